"""Unit tests for Trading 212 request and tool input models."""

import pydantic
import pytest

from trading212_mcp.broker.schemas import (
    CreatePieRequest,
    ExportInput,
    HistoryQuery,
    LimitOrderRequest,
    MarketOrderRequest,
    OrderIdInput,
    Page,
    Pie,
    StopLimitOrderRequest,
    UpdatePieInput,
)


class TestOrderRequests:
    """Tests for order placement inputs."""

    def test_time_validity_defaults_to_day(self):
        order = MarketOrderRequest(ticker="AAPL", quantity=1)

        assert order.timeValidity == "DAY"

    def test_gtc_accepted(self):
        order = LimitOrderRequest(ticker="AAPL", quantity=1, limitPrice=150.5, timeValidity="GTC")

        assert order.timeValidity == "GTC"

    @pytest.mark.parametrize("quantity", [0, -1, -0.5])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(pydantic.ValidationError):
            MarketOrderRequest(ticker="AAPL", quantity=quantity)

    @pytest.mark.parametrize("price", [0, -1])
    @pytest.mark.parametrize("field", ["stopPrice", "limitPrice"])
    def test_prices_must_be_positive(self, field, price):
        data = {"ticker": "AAPL", "quantity": 1, "stopPrice": 10, "limitPrice": 11}
        data[field] = price

        with pytest.raises(pydantic.ValidationError) as exc_info:
            StopLimitOrderRequest.model_validate(data)

        assert [error["loc"] for error in exc_info.value.errors()] == [(field,)]

    def test_string_quantity_rejected(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            MarketOrderRequest.model_validate({"ticker": "AAPL", "quantity": "10"})

        assert exc_info.value.errors()[0]["loc"] == ("quantity",)

    def test_unknown_time_validity_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            MarketOrderRequest(ticker="AAPL", quantity=1, timeValidity="WEEK")

    def test_empty_ticker_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            MarketOrderRequest(ticker="", quantity=1)

    def test_stop_limit_requires_both_prices(self):
        with pytest.raises(pydantic.ValidationError) as exc_info:
            StopLimitOrderRequest.model_validate({"ticker": "AAPL", "quantity": 1, "stopPrice": 10})

        assert [error["loc"] for error in exc_info.value.errors()] == [("limitPrice",)]

    def test_unknown_keys_ignored(self):
        order = MarketOrderRequest.model_validate({"ticker": "AAPL", "quantity": 1, "note": "x"})

        assert not hasattr(order, "note")


class TestPieRequests:
    """Tests for pie create/update inputs."""

    def _pie(self, **overrides):
        data = {
            "name": "Tech",
            "icon": "Coins",
            "instrumentShares": {"AAPL": 0.5, "MSFT": 0.5},
            "dividendCashAction": "REINVEST",
        }
        data.update(overrides)
        return data

    def test_goal_optional(self):
        pie = CreatePieRequest.model_validate(self._pie())

        assert pie.goal is None

    def test_name_length_bounds(self):
        with pytest.raises(pydantic.ValidationError):
            CreatePieRequest.model_validate(self._pie(name=""))
        with pytest.raises(pydantic.ValidationError):
            CreatePieRequest.model_validate(self._pie(name="x" * 51))

        assert CreatePieRequest.model_validate(self._pie(name="x" * 50)).name == "x" * 50

    def test_goal_must_be_positive(self):
        with pytest.raises(pydantic.ValidationError):
            CreatePieRequest.model_validate(self._pie(goal=0))

    def test_unknown_dividend_action_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            CreatePieRequest.model_validate(self._pie(dividendCashAction="SPEND"))

    def test_update_sends_only_given_fields(self):
        update = UpdatePieInput.model_validate({"pieId": 9, "name": "Renamed"})

        request = update.to_request()

        assert request.model_dump(exclude_none=True) == {"name": "Renamed"}


class TestToolInputs:
    """Tests for tool-only argument models."""

    def test_order_id_must_be_integer(self):
        with pytest.raises(pydantic.ValidationError):
            OrderIdInput.model_validate({"orderId": "123"})

    def test_history_query_all_optional(self):
        query = HistoryQuery.model_validate({})

        assert (query.cursor, query.limit, query.ticker) == (None, None, None)

    def test_history_limit_positive(self):
        with pytest.raises(pydantic.ValidationError):
            HistoryQuery.model_validate({"limit": 0})

    def test_export_includes_everything_by_default(self):
        export = ExportInput.model_validate({"timeFrom": "2024-01-01T00:00:00Z", "timeTo": "2024-02-01T00:00:00Z"})

        included = export.to_request().dataIncluded
        assert included.includeDividends
        assert included.includeInterest
        assert included.includeOrders
        assert included.includeTransactions


class TestResponseModels:
    """Tests for downstream response models."""

    def test_pie_public_url_optional(self):
        pie = Pie.model_validate({
            "cash": 0,
            "dividendCashAction": "TO_ACCOUNT_CASH",
            "icon": "Coins",
            "id": 1,
            "instruments": [{"expectedShare": 1.0, "ticker": "AAPL"}],
            "name": "Solo",
            "result": 0,
            "status": "ACTIVE",
        })

        assert pie.publicUrl is None

    def test_last_page_has_no_next_path(self):
        page = Page[int].model_validate({"items": [1, 2]})

        assert page.items == [1, 2]
        assert page.nextPagePath is None
