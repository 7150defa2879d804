"""Tool handlers binding validated arguments to client calls."""

from typing import Any

from trading212_mcp.broker.client import Trading212Client
from trading212_mcp.broker.schemas import (
    CreatePieRequest,
    EmptyInput,
    ExportInput,
    HistoryQuery,
    Instrument,
    InstrumentSearchInput,
    LimitOrderRequest,
    MarketOrderRequest,
    OrderIdInput,
    PieIdInput,
    StopLimitOrderRequest,
    StopOrderRequest,
    TickerInput,
    TransactionsQuery,
    UpdatePieInput,
)


def filter_instruments(instruments: list[Instrument], search: str | None) -> list[Instrument]:
    """Case-insensitive substring match on ticker, name, short name and ISIN.

    An empty or missing query keeps every instrument.
    """
    if not search:
        return instruments
    needle = search.lower()
    return [
        instrument
        for instrument in instruments
        if any(
            needle in (field or "").lower()
            for field in (instrument.ticker, instrument.name, instrument.shortName, instrument.isin)
        )
    ]


# Account Management
async def get_account_info(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_account_info()


async def get_account_cash(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_account_cash()


async def get_account_summary(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_account_summary()


# Portfolio/Positions
async def get_portfolio(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_portfolio()


async def get_position(client: Trading212Client, args: TickerInput) -> Any:
    return await client.get_position(args.ticker)


# Order Management
async def get_orders(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_orders()


async def get_order(client: Trading212Client, args: OrderIdInput) -> Any:
    return await client.get_order(args.orderId)


async def cancel_order(client: Trading212Client, args: OrderIdInput) -> str:
    await client.cancel_order(args.orderId)
    return f"Order {args.orderId} cancelled successfully"


async def place_market_order(client: Trading212Client, args: MarketOrderRequest) -> Any:
    return await client.place_market_order(args)


async def place_limit_order(client: Trading212Client, args: LimitOrderRequest) -> Any:
    return await client.place_limit_order(args)


async def place_stop_order(client: Trading212Client, args: StopOrderRequest) -> Any:
    return await client.place_stop_order(args)


async def place_stop_limit_order(client: Trading212Client, args: StopLimitOrderRequest) -> Any:
    return await client.place_stop_limit_order(args)


# Instruments & Market Data
async def get_instruments(client: Trading212Client, args: InstrumentSearchInput) -> Any:
    instruments = await client.get_instruments()
    return filter_instruments(instruments, args.search)


async def get_exchanges(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_exchanges()


# Pies
async def get_pies(client: Trading212Client, args: EmptyInput) -> Any:
    return await client.get_pies()


async def get_pie(client: Trading212Client, args: PieIdInput) -> Any:
    return await client.get_pie(args.pieId)


async def create_pie(client: Trading212Client, args: CreatePieRequest) -> Any:
    return await client.create_pie(args)


async def update_pie(client: Trading212Client, args: UpdatePieInput) -> Any:
    return await client.update_pie(args.pieId, args.to_request())


async def delete_pie(client: Trading212Client, args: PieIdInput) -> str:
    await client.delete_pie(args.pieId)
    return f"Pie {args.pieId} deleted successfully"


# Historical Data
async def get_order_history(client: Trading212Client, args: HistoryQuery) -> Any:
    return await client.get_order_history(cursor=args.cursor, limit=args.limit, ticker=args.ticker)


async def get_dividends(client: Trading212Client, args: HistoryQuery) -> Any:
    return await client.get_dividends(cursor=args.cursor, limit=args.limit, ticker=args.ticker)


async def get_transactions(client: Trading212Client, args: TransactionsQuery) -> Any:
    return await client.get_transactions(cursor=args.cursor, limit=args.limit)


async def request_export(client: Trading212Client, args: ExportInput) -> Any:
    return await client.request_export(args.to_request())


# Tool name -> (argument model, handler)
HANDLERS = {
    "get_account_info": (EmptyInput, get_account_info),
    "get_account_cash": (EmptyInput, get_account_cash),
    "get_account_summary": (EmptyInput, get_account_summary),
    "get_portfolio": (EmptyInput, get_portfolio),
    "get_position": (TickerInput, get_position),
    "get_orders": (EmptyInput, get_orders),
    "get_order": (OrderIdInput, get_order),
    "cancel_order": (OrderIdInput, cancel_order),
    "place_market_order": (MarketOrderRequest, place_market_order),
    "place_limit_order": (LimitOrderRequest, place_limit_order),
    "place_stop_order": (StopOrderRequest, place_stop_order),
    "place_stop_limit_order": (StopLimitOrderRequest, place_stop_limit_order),
    "get_instruments": (InstrumentSearchInput, get_instruments),
    "get_exchanges": (EmptyInput, get_exchanges),
    "get_pies": (EmptyInput, get_pies),
    "get_pie": (PieIdInput, get_pie),
    "create_pie": (CreatePieRequest, create_pie),
    "update_pie": (UpdatePieInput, update_pie),
    "delete_pie": (PieIdInput, delete_pie),
    "get_order_history": (HistoryQuery, get_order_history),
    "get_dividends": (HistoryQuery, get_dividends),
    "get_transactions": (TransactionsQuery, get_transactions),
    "request_export": (ExportInput, request_export),
}
