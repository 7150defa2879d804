"""Unit tests for the tool registry."""

import pytest

from trading212_mcp.broker.schemas import EmptyInput, Instrument
from trading212_mcp.registry import (
    HANDLERS,
    ToolCatalog,
    ToolDescriptor,
    build_catalog,
    filter_instruments,
    load_tool_registry,
)


EXPECTED_TOOLS = {
    "get_account_info",
    "get_account_cash",
    "get_account_summary",
    "get_portfolio",
    "get_position",
    "get_orders",
    "get_order",
    "cancel_order",
    "place_market_order",
    "place_limit_order",
    "place_stop_order",
    "place_stop_limit_order",
    "get_instruments",
    "get_exchanges",
    "get_pies",
    "get_pie",
    "create_pie",
    "update_pie",
    "delete_pie",
    "get_order_history",
    "get_dividends",
    "get_transactions",
    "request_export",
}


def _instrument(ticker: str, name: str, short_name: str, isin: str) -> Instrument:
    return Instrument(
        addedOn="2020-01-01",
        currencyCode="USD",
        isin=isin,
        minTradeQuantity=0.01,
        name=name,
        shortName=short_name,
        ticker=ticker,
        type="STOCK",
        workingScheduleId=1,
    )


class TestRegistryConfig:
    """Tests for the YAML tool registry."""

    def test_packaged_registry_lists_every_tool(self):
        config = load_tool_registry()

        assert {tool.name for tool in config.tools} == EXPECTED_TOOLS
        assert all(tool.description for tool in config.tools)

    def test_missing_file_gives_empty_config(self, tmp_path):
        config = load_tool_registry(tmp_path / "absent.yaml")

        assert config.tools == []

    def test_custom_registry(self, tmp_path):
        path = tmp_path / "tools.yaml"
        path.write_text("tools:\n  - name: get_portfolio\n    description: Positions\n")

        catalog = build_catalog(path)

        assert catalog.names() == ["get_portfolio"]

    def test_tool_without_handler_rejected(self, tmp_path):
        path = tmp_path / "tools.yaml"
        path.write_text("tools:\n  - name: sell_everything\n    description: No\n")

        with pytest.raises(ValueError, match="sell_everything"):
            build_catalog(path)


class TestCatalog:
    """Tests for the in-memory catalog."""

    def test_catalog_matches_handlers(self, catalog):
        assert set(catalog.names()) == set(HANDLERS) == EXPECTED_TOOLS
        assert len(catalog) == 23

    def test_lookup_is_exact(self, catalog):
        assert catalog.get("get_portfolio") is not None
        assert catalog.get("GET_PORTFOLIO") is None
        assert "get_portfolio" in catalog

    def test_duplicate_names_rejected(self):
        async def handler(client, args):
            return None

        tool = ToolDescriptor(name="dup", description="d", input_model=EmptyInput, handler=handler)

        with pytest.raises(ValueError, match="duplicate"):
            ToolCatalog([tool, tool])

    def test_input_schema_is_object(self, catalog):
        schema = catalog.get("get_account_info").input_schema

        assert schema["type"] == "object"
        assert schema["properties"] == {}
        assert "title" not in schema

    def test_order_schema_required_fields(self, catalog):
        schema = catalog.get("place_limit_order").input_schema

        assert set(schema["required"]) == {"ticker", "quantity", "limitPrice"}
        assert schema["properties"]["timeValidity"]["default"] == "DAY"
        assert schema["properties"]["quantity"]["exclusiveMinimum"] == 0


class TestInstrumentFilter:
    """Tests for client-side instrument search."""

    @pytest.fixture
    def instruments(self):
        return [
            _instrument("AAPL_US_EQ", "Apple Inc", "AAPL", "US0378331005"),
            _instrument("MSFT_US_EQ", "Microsoft Corp", "MSFT", "US5949181045"),
            _instrument("VOD_L_EQ", "Vodafone Group", "VOD", "GB00BH4HKS39"),
        ]

    def test_empty_search_keeps_all(self, instruments):
        assert filter_instruments(instruments, None) == instruments
        assert filter_instruments(instruments, "") == instruments

    def test_case_insensitive_name_match(self, instruments):
        result = filter_instruments(instruments, "apple")

        assert [i.ticker for i in result] == ["AAPL_US_EQ"]

    def test_isin_match(self, instruments):
        result = filter_instruments(instruments, "gb00")

        assert [i.ticker for i in result] == ["VOD_L_EQ"]

    def test_no_match(self, instruments):
        assert filter_instruments(instruments, "tesla") == []
