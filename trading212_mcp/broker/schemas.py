"""Pydantic schemas for Trading 212 entities, requests and tool inputs.

Response models validate what the downstream API returns; request models
validate what tools send to it. Tool input models are strict: numbers must be
JSON numbers and enumerations must match exactly.
"""

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field


OrderType = Literal["MARKET", "LIMIT", "STOP", "STOP_LIMIT"]
OrderSide = Literal["BUY", "SELL"]
OrderStatus = Literal[
    "NEW",
    "PROCESSING",
    "CONFIRMED",
    "PENDING",
    "LOCAL",
    "REPLACED",
    "CANCELLED",
    "REJECTED",
]
TimeValidity = Literal["DAY", "GTC"]
DividendCashAction = Literal["REINVEST", "TO_ACCOUNT_CASH"]

DEFAULT_TIME_VALIDITY: TimeValidity = "DAY"

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

class AccountInfo(BaseModel):
    """Account metadata."""

    currencyCode: str
    id: int


class AccountCash(BaseModel):
    """Cash balance breakdown."""

    free: float
    total: float
    ppl: float | None = None
    result: float | None = None
    invested: float | None = None
    pieCash: float | None = None
    blocked: float | None = None


class AccountSummary(BaseModel):
    """Cash, invested amounts and profit/loss in one view."""

    cash: AccountCash
    invested: float
    ppl: float
    pieCash: float
    maxRisk: float | None = None
    freeForStocks: float | None = None
    freeForInvest: float | None = None
    pplRelative: float | None = None


# ---------------------------------------------------------------------------
# Instruments & exchanges
# ---------------------------------------------------------------------------

class Instrument(BaseModel):
    """Tradeable instrument metadata."""

    addedOn: str
    currencyCode: str
    isin: str
    maxOpenQuantity: float | None = None
    minTradeQuantity: float
    name: str
    shortName: str
    ticker: str
    type: Literal["STOCK", "ETF", "FUND"]
    workingScheduleId: int


class TimeEvent(BaseModel):
    date: str
    type: str


class WorkingSchedule(BaseModel):
    id: int
    timeEvents: list[TimeEvent]


class Exchange(BaseModel):
    """Exchange with its trading schedules."""

    id: int
    name: str
    workingSchedules: list[WorkingSchedule]


# ---------------------------------------------------------------------------
# Positions & orders
# ---------------------------------------------------------------------------

class Position(BaseModel):
    """Open position in the portfolio."""

    averagePrice: float
    currentPrice: float
    frontend: str | None = None
    initialFillDate: str | None = None
    maxBuy: float | None = None
    maxSell: float | None = None
    pieQuantity: float | None = None
    ppl: float
    quantity: float
    ticker: str


class Order(BaseModel):
    """Active or just-placed order."""

    createdOn: str
    filledQuantity: float
    filledValue: float
    id: int
    limitPrice: float | None = None
    quantity: float
    side: OrderSide
    status: OrderStatus
    stopPrice: float | None = None
    strategy: str | None = None
    ticker: str
    timeValidity: TimeValidity
    type: OrderType
    value: float | None = None


# ---------------------------------------------------------------------------
# Pies
# ---------------------------------------------------------------------------

class PieInstrument(BaseModel):
    expectedShare: float
    ticker: str


class Pie(BaseModel):
    """Investment pie (portfolio bucket)."""

    cash: float
    dividendCashAction: DividendCashAction
    goal: float | None = None
    icon: str
    id: int
    instruments: list[PieInstrument]
    name: str
    publicUrl: str | None = None
    result: float
    status: Literal["ACTIVE", "INACTIVE"]


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class OrderTaxes(BaseModel):
    fillTax: float
    finraTradingActivityFee: float | None = None
    stampDutyReserveTax: float | None = None
    transactionTax: float | None = None


class HistoricalOrder(BaseModel):
    """Filled, cancelled or rejected order from the history endpoint."""

    dateCreated: str
    dateExecuted: str | None = None
    dateModified: str | None = None
    executor: str | None = None
    fillCost: float
    fillId: int
    fillPrice: float
    fillResult: float
    fillType: str
    filledQuantity: float
    filledValue: float
    id: int
    limitPrice: float | None = None
    orderedQuantity: float
    orderedValue: float
    parentOrder: int | None = None
    status: OrderStatus
    stopPrice: float | None = None
    taxes: OrderTaxes
    ticker: str
    timeValidity: TimeValidity
    type: OrderType


class Dividend(BaseModel):
    amount: float
    amountInEuro: float
    grossAmountPerShare: float
    paidOn: str
    quantity: float
    reference: str
    ticker: str
    type: Literal["ORDINARY", "SPECIAL", "RETURN_OF_CAPITAL"]


class Transaction(BaseModel):
    amount: float
    dateTime: str
    reference: str
    type: Literal[
        "DEPOSIT",
        "WITHDRAWAL",
        "ORDER",
        "DIVIDEND",
        "AUTOINVEST",
        "FEE",
        "INTEREST",
        "LENDING",
    ]


class Page(BaseModel, Generic[T]):
    """One page of a cursor-paginated history endpoint.

    Attributes:
        items: Entries on this page.
        nextPagePath: Relative path of the next page, absent on the last page.
    """

    items: list[T]
    nextPagePath: str | None = None


class ExportResponse(BaseModel):
    reportId: int


# ---------------------------------------------------------------------------
# Requests sent downstream (also used directly as tool inputs)
# ---------------------------------------------------------------------------

class ToolInput(BaseModel):
    """Base for tool argument models: strict types, unknown keys ignored."""

    model_config = ConfigDict(strict=True, extra="ignore")


class EmptyInput(ToolInput):
    """Tools that take no arguments."""


class MarketOrderRequest(ToolInput):
    ticker: str = Field(min_length=1, description="The ticker symbol of the instrument")
    quantity: float = Field(gt=0, description="The quantity to buy")
    timeValidity: TimeValidity = Field(
        default=DEFAULT_TIME_VALIDITY,
        description="Time validity of the order (DAY or GTC - Good Till Cancelled)",
    )


class LimitOrderRequest(ToolInput):
    ticker: str = Field(min_length=1, description="The ticker symbol of the instrument")
    quantity: float = Field(gt=0, description="The quantity to buy")
    limitPrice: float = Field(gt=0, description="The limit price for the order")
    timeValidity: TimeValidity = Field(default=DEFAULT_TIME_VALIDITY, description="Time validity of the order")


class StopOrderRequest(ToolInput):
    ticker: str = Field(min_length=1, description="The ticker symbol of the instrument")
    quantity: float = Field(gt=0, description="The quantity to buy")
    stopPrice: float = Field(gt=0, description="The stop price that triggers the market order")
    timeValidity: TimeValidity = Field(default=DEFAULT_TIME_VALIDITY, description="Time validity of the order")


class StopLimitOrderRequest(ToolInput):
    ticker: str = Field(min_length=1, description="The ticker symbol of the instrument")
    quantity: float = Field(gt=0, description="The quantity to buy")
    stopPrice: float = Field(gt=0, description="The stop price that triggers the limit order")
    limitPrice: float = Field(gt=0, description="The limit price for the order once triggered")
    timeValidity: TimeValidity = Field(default=DEFAULT_TIME_VALIDITY, description="Time validity of the order")


class CreatePieRequest(ToolInput):
    name: str = Field(min_length=1, max_length=50, description="Name of the pie (1-50 characters)")
    icon: str = Field(description="Icon identifier for the pie")
    instrumentShares: dict[str, float] = Field(
        description='Mapping of ticker symbols to their share of the pie (e.g. {"AAPL": 0.5, "GOOGL": 0.5})',
    )
    dividendCashAction: DividendCashAction = Field(description="What to do with dividend cash")
    goal: float | None = Field(default=None, gt=0, description="Optional investment goal amount")


class UpdatePieRequest(ToolInput):
    name: str | None = Field(default=None, min_length=1, max_length=50, description="Updated name of the pie")
    icon: str | None = Field(default=None, description="Updated icon identifier")
    instrumentShares: dict[str, float] | None = Field(default=None, description="Updated instrument allocations")
    dividendCashAction: DividendCashAction | None = Field(default=None, description="Updated dividend action")
    goal: float | None = Field(default=None, gt=0, description="Updated investment goal")


class ExportDataIncluded(BaseModel):
    includeDividends: bool
    includeInterest: bool
    includeOrders: bool
    includeTransactions: bool


class ExportRequest(BaseModel):
    dataIncluded: ExportDataIncluded
    timeFrom: str
    timeTo: str


# ---------------------------------------------------------------------------
# Tool-only inputs
# ---------------------------------------------------------------------------

class TickerInput(ToolInput):
    ticker: str = Field(min_length=1, description="The ticker symbol of the instrument (e.g. AAPL, TSLA)")


class OrderIdInput(ToolInput):
    orderId: int = Field(description="The unique identifier of the order")


class PieIdInput(ToolInput):
    pieId: int = Field(description="The unique identifier of the pie")


class UpdatePieInput(UpdatePieRequest):
    pieId: int = Field(description="The unique identifier of the pie")

    def to_request(self) -> UpdatePieRequest:
        return UpdatePieRequest(**self.model_dump(exclude={"pieId"}, exclude_none=True))


class InstrumentSearchInput(ToolInput):
    search: str | None = Field(
        default=None,
        description="Optional search query to filter instruments by ticker, name, or ISIN",
    )


class TransactionsQuery(ToolInput):
    cursor: int | None = Field(default=None, description="Pagination cursor for fetching next page")
    limit: int | None = Field(default=None, gt=0, description="Maximum number of results to return")


class HistoryQuery(TransactionsQuery):
    ticker: str | None = Field(default=None, description="Filter by ticker symbol")


class ExportInput(ToolInput):
    timeFrom: str = Field(min_length=1, description="Start date in ISO 8601 format (e.g. 2024-01-01T00:00:00Z)")
    timeTo: str = Field(min_length=1, description="End date in ISO 8601 format")
    includeDividends: bool = Field(default=True, description="Include dividend data in export")
    includeInterest: bool = Field(default=True, description="Include interest data in export")
    includeOrders: bool = Field(default=True, description="Include order data in export")
    includeTransactions: bool = Field(default=True, description="Include transaction data in export")

    def to_request(self) -> ExportRequest:
        return ExportRequest(
            timeFrom=self.timeFrom,
            timeTo=self.timeTo,
            dataIncluded=ExportDataIncluded(
                includeDividends=self.includeDividends,
                includeInterest=self.includeInterest,
                includeOrders=self.includeOrders,
                includeTransactions=self.includeTransactions,
            ),
        )
