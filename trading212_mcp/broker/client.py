"""HTTP client for the Trading 212 public API."""

import base64
import json
import urllib.parse
from functools import lru_cache
from typing import Any

import httpx
import pydantic
import structlog

from trading212_mcp.config import BASE_URLS
from trading212_mcp.exceptions import ApiError, AuthError, RateLimitError
from trading212_mcp.ratelimit import RateLimitSnapshot, RateLimitStore, extract_snapshot

from .schemas import (
    AccountCash,
    AccountInfo,
    AccountSummary,
    CreatePieRequest,
    Dividend,
    Exchange,
    ExportRequest,
    ExportResponse,
    HistoricalOrder,
    Instrument,
    LimitOrderRequest,
    MarketOrderRequest,
    Order,
    Page,
    Pie,
    Position,
    StopLimitOrderRequest,
    StopOrderRequest,
    Transaction,
    UpdatePieRequest,
)


logger = structlog.get_logger(__name__)

# Default timeout for downstream requests
DEFAULT_TIMEOUT_SECONDS = 30.0


@lru_cache(maxsize=None)
def _adapter(schema: Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(schema)


def build_auth_header(api_key: str) -> str:
    """Build the Basic auth header value for an API key.

    Keys issued as ``key:secret`` pairs are encoded as-is; bare keys get an
    empty secret.
    """
    raw = api_key if ":" in api_key else f"{api_key}:"
    return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


def build_query_path(path: str, params: dict[str, Any]) -> str:
    """Append only the parameters that have a value.

    Returns ``path`` untouched when every parameter is None.
    """
    defined = {key: value for key, value in params.items() if value is not None}
    if not defined:
        return path
    return f"{path}?{httpx.QueryParams(defined)}"


def _segment(value: Any) -> str:
    """Percent-encode one path segment so it can never add segments or a query."""
    quoted = urllib.parse.quote(str(value), safe="")
    if quoted in (".", ".."):
        # dot segments would be collapsed by URL normalization
        quoted = quoted.replace(".", "%2E")
    return quoted


def _extract_error_message(body: str) -> str:
    try:
        data = json.loads(body)
    except ValueError:
        return body
    if isinstance(data, dict):
        for key in ("message", "errorMessage"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return body


class Trading212Client:
    """Authenticated, rate-limit aware client for one Trading 212 account.

    One instance is shared by every dispatch context in the process. Each
    call issues exactly one request; there are no retries and no caching.

    Attributes:
        base_url: API root for the configured environment.
        rate_limits: Last rate-limit snapshot seen per endpoint path.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        environment: str = "demo",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        rate_limits: RateLimitStore | None = None,
    ):
        """Initialize the client.

        Args:
            api_key: Trading 212 API key (or ``key:secret`` pair).
            http_client: Shared HTTP client.
            environment: ``demo`` or ``live``.
            timeout: Per-request timeout in seconds.
            rate_limits: Snapshot store, a fresh one if not provided.

        Raises:
            AuthError: If the API key is empty.
        """
        if not api_key:
            raise AuthError.missing_api_key()
        self.base_url = BASE_URLS[environment]
        self.environment = environment
        self.timeout = timeout
        self.rate_limits = rate_limits or RateLimitStore()
        self._http = http_client
        self._headers = {
            "Authorization": build_auth_header(api_key),
            "Content-Type": "application/json",
        }

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any | None = None,
        schema: Any | None = None,
    ) -> Any:
        """Send one request and classify the outcome.

        Args:
            endpoint: Path relative to the API root, query string included.
            method: HTTP method.
            body: JSON-serializable body (pydantic models are dumped).
            schema: Type the response body must validate against.

        Returns:
            The validated response (or raw JSON when no schema is given,
            None for an empty body).

        Raises:
            RateLimitError: On HTTP 429.
            AuthError: On HTTP 401.
            ApiError: On any other failure, including a body that does not
                match ``schema``.
        """
        url = f"{self.base_url}{endpoint}"
        if isinstance(body, pydantic.BaseModel):
            body = body.model_dump(mode="json", exclude_none=True)

        try:
            response = await self._http.request(
                method,
                url,
                headers=self._headers,
                json=body,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise ApiError(f"Trading 212 API request to {endpoint} timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise ApiError(f"Trading 212 API request to {endpoint} failed: {e}") from e

        path = endpoint.split("?", 1)[0]
        snapshot = extract_snapshot(response.headers)
        if snapshot is not None:
            self.rate_limits.set(path, snapshot)

        logger.debug(
            "trading212_response",
            method=method,
            endpoint=endpoint,
            status_code=response.status_code,
        )

        if response.status_code == 429:
            raise RateLimitError.from_headers(response.headers)

        if not response.is_success:
            error_text = response.text
            error_message = _extract_error_message(error_text)
            if response.status_code == 401:
                raise AuthError(f"Trading 212 API Error (401): {error_message}")
            raise ApiError(
                f"Trading 212 API Error ({response.status_code}): {error_message}",
                status_code=response.status_code,
                response=error_text,
            )

        if not response.content:
            return None

        try:
            data = response.json()
        except ValueError:
            raise ApiError(
                f"Trading 212 API returned a non-JSON response for {endpoint}",
                status_code=response.status_code,
                response=response.text,
            )

        if schema is None:
            return data

        try:
            return _adapter(schema).validate_python(data)
        except pydantic.ValidationError as e:
            raise ApiError.response_mismatch(endpoint, e)

    def get_rate_limit_info(self, endpoint: str) -> RateLimitSnapshot | None:
        """Return the last rate-limit snapshot for an endpoint path, if any."""
        return self.rate_limits.get(endpoint.split("?", 1)[0])

    # Account Management
    async def get_account_info(self) -> AccountInfo:
        return await self.request("/equity/account/info", schema=AccountInfo)

    async def get_account_cash(self) -> AccountCash:
        return await self.request("/equity/account/cash", schema=AccountCash)

    async def get_account_summary(self) -> AccountSummary:
        return await self.request("/equity/account/summary", schema=AccountSummary)

    # Portfolio/Positions
    async def get_portfolio(self) -> list[Position]:
        return await self.request("/equity/portfolio", schema=list[Position])

    async def get_position(self, ticker: str) -> Position:
        return await self.request(f"/equity/portfolio/{_segment(ticker)}", schema=Position)

    # Order Management
    async def get_orders(self) -> list[Order]:
        return await self.request("/equity/orders", schema=list[Order])

    async def get_order(self, order_id: int) -> Order:
        return await self.request(f"/equity/orders/{_segment(order_id)}", schema=Order)

    async def cancel_order(self, order_id: int) -> None:
        await self.request(f"/equity/orders/{_segment(order_id)}", method="DELETE")

    async def place_market_order(self, order: MarketOrderRequest) -> Order:
        return await self.request("/equity/orders/market", method="POST", body=order, schema=Order)

    async def place_limit_order(self, order: LimitOrderRequest) -> Order:
        return await self.request("/equity/orders/limit", method="POST", body=order, schema=Order)

    async def place_stop_order(self, order: StopOrderRequest) -> Order:
        return await self.request("/equity/orders/stop", method="POST", body=order, schema=Order)

    async def place_stop_limit_order(self, order: StopLimitOrderRequest) -> Order:
        return await self.request("/equity/orders/stop_limit", method="POST", body=order, schema=Order)

    # Instruments & Market Data
    async def get_instruments(self) -> list[Instrument]:
        return await self.request("/equity/metadata/instruments", schema=list[Instrument])

    async def get_exchanges(self) -> list[Exchange]:
        return await self.request("/equity/metadata/exchanges", schema=list[Exchange])

    # Pies
    async def get_pies(self) -> list[Pie]:
        return await self.request("/equity/pies", schema=list[Pie])

    async def get_pie(self, pie_id: int) -> Pie:
        return await self.request(f"/equity/pies/{_segment(pie_id)}", schema=Pie)

    async def create_pie(self, pie: CreatePieRequest) -> Pie:
        return await self.request("/equity/pies", method="POST", body=pie, schema=Pie)

    async def update_pie(self, pie_id: int, pie: UpdatePieRequest) -> Pie:
        return await self.request(f"/equity/pies/{_segment(pie_id)}", method="POST", body=pie, schema=Pie)

    async def delete_pie(self, pie_id: int) -> None:
        await self.request(f"/equity/pies/{_segment(pie_id)}", method="DELETE")

    # Historical Data
    async def get_order_history(
        self,
        cursor: int | None = None,
        limit: int | None = None,
        ticker: str | None = None,
    ) -> Page[HistoricalOrder]:
        endpoint = build_query_path(
            "/equity/history/orders", {"cursor": cursor, "limit": limit, "ticker": ticker}
        )
        return await self.request(endpoint, schema=Page[HistoricalOrder])

    async def get_dividends(
        self,
        cursor: int | None = None,
        limit: int | None = None,
        ticker: str | None = None,
    ) -> Page[Dividend]:
        endpoint = build_query_path(
            "/history/dividends", {"cursor": cursor, "limit": limit, "ticker": ticker}
        )
        return await self.request(endpoint, schema=Page[Dividend])

    async def get_transactions(
        self,
        cursor: int | None = None,
        limit: int | None = None,
    ) -> Page[Transaction]:
        endpoint = build_query_path("/history/transactions", {"cursor": cursor, "limit": limit})
        return await self.request(endpoint, schema=Page[Transaction])

    async def request_export(self, export_request: ExportRequest) -> ExportResponse:
        return await self.request(
            "/history/exports", method="POST", body=export_request, schema=ExportResponse
        )
