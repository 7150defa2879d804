"""Business logic for MCP protocol handlers."""

from typing import Any

import pydantic
import structlog

from trading212_mcp import __version__
from trading212_mcp.broker.client import Trading212Client
from trading212_mcp.gateway import InvokeToolRequest, invoke_tool
from trading212_mcp.registry import ToolCatalog

from .schemas import (
    MCPContent,
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPTool,
    MCPToolCallParams,
    MCPToolCallResult,
    MCPToolListResult,
)

logger = structlog.get_logger(__name__)

SERVER_NAME = "trading212-mcp"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]


def error_message(request_id: str | int | None, code: int, message: str) -> dict[str, Any]:
    return MCPJSONRPCResponse(id=request_id, error={"code": code, "message": message}).to_message()


def parse_error_response() -> dict[str, Any]:
    """Response for a frame that is not valid JSON."""
    return error_message(None, MCPErrorCodes.PARSE_ERROR, "Parse error")


async def handle_initialize(params: MCPInitializeParams) -> dict[str, Any]:
    """Handle initialize request.

    Args:
        params: Initialize parameters from client.

    Returns:
        Server initialization response. The client's protocol version is
        echoed when supported, otherwise the latest supported one is offered.
    """
    if params.protocolVersion in SUPPORTED_PROTOCOL_VERSIONS:
        protocol_version = params.protocolVersion
    else:
        protocol_version = LATEST_PROTOCOL_VERSION
    return {
        "protocolVersion": protocol_version,
        "capabilities": {
            "tools": {
                "listChanged": False  # Static tool list
            }
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": __version__,
        },
    }


async def handle_tools_list(catalog: ToolCatalog) -> MCPToolListResult:
    """Handle tools/list request."""
    return MCPToolListResult(
        tools=[
            MCPTool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in catalog
        ]
    )


async def handle_tools_call(
    catalog: ToolCatalog,
    client: Trading212Client,
    name: str,
    arguments: dict[str, Any],
) -> MCPToolCallResult:
    """Handle tools/call request.

    Args:
        catalog: Tools available in this context.
        client: Shared Trading 212 client.
        name: Tool name to invoke.
        arguments: Tool arguments.

    Returns:
        Tool execution result; failures are reported with ``isError``.
    """
    result = await invoke_tool(
        catalog=catalog,
        client=client,
        request=InvokeToolRequest(tool_name=name, arguments=arguments),
    )
    return MCPToolCallResult(
        content=[MCPContent(type="text", text=result.text)],
        isError=result.is_error,
        structuredContent={"error": result.error} if result.error is not None else None,
    )


class DispatchContext:
    """Protocol endpoint state for one client connection.

    One context serves the stdio channel; the HTTP transport builds one per
    session. Contexts hold no state of their own beyond references to the
    catalog and the shared client.
    """

    def __init__(
        self,
        catalog: ToolCatalog,
        client: Trading212Client,
        session_id: str | None = None,
    ):
        self.catalog = catalog
        self.client = client
        self.session_id = session_id

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Handle one decoded JSON-RPC message.

        Args:
            message: Decoded JSON value received from the client.

        Returns:
            The response message, or None for notifications and responses.
        """
        if not isinstance(message, dict):
            return error_message(None, MCPErrorCodes.INVALID_REQUEST, "Invalid Request")

        request_id = message.get("id")
        if "method" not in message:
            if "result" in message or "error" in message:
                # Reply to a server-initiated request; nothing to answer.
                return None
            return error_message(request_id, MCPErrorCodes.INVALID_REQUEST, "Invalid Request")

        try:
            request = MCPJSONRPCRequest(**message)
        except pydantic.ValidationError:
            return error_message(None, MCPErrorCodes.INVALID_REQUEST, "Invalid Request")

        is_notification = "id" not in message
        response = await self._dispatch(request)
        logger.debug(
            "mcp_message",
            method=request.method,
            request_id=request.id,
            session_id=self.session_id,
        )
        if is_notification:
            return None
        return response.to_message()

    async def _dispatch(self, request: MCPJSONRPCRequest) -> MCPJSONRPCResponse:
        method = request.method
        params = request.params or {}

        try:
            if method == "initialize":
                try:
                    init_params = MCPInitializeParams(**params)
                except pydantic.ValidationError as e:
                    return MCPJSONRPCResponse(
                        id=request.id,
                        error={"code": MCPErrorCodes.INVALID_PARAMS, "message": f"Invalid params: {e.error_count()} error(s)"},
                    )
                result = await handle_initialize(init_params)
                return MCPJSONRPCResponse(id=request.id, result=result)

            elif method.startswith("notifications/"):
                # initialized, cancelled...: acknowledged, nothing to do
                return MCPJSONRPCResponse(id=request.id, result={})

            elif method == "ping":
                return MCPJSONRPCResponse(id=request.id, result={})

            elif method == "tools/list":
                result = await handle_tools_list(self.catalog)
                return MCPJSONRPCResponse(id=request.id, result=result.model_dump())

            elif method == "tools/call":
                try:
                    call_params = MCPToolCallParams(**params)
                except pydantic.ValidationError:
                    return MCPJSONRPCResponse(
                        id=request.id,
                        error={
                            "code": MCPErrorCodes.INVALID_PARAMS,
                            "message": "Invalid params: tools/call requires a tool name and object arguments",
                        },
                    )
                result = await handle_tools_call(
                    catalog=self.catalog,
                    client=self.client,
                    name=call_params.name,
                    arguments=call_params.arguments or {},
                )
                return MCPJSONRPCResponse(id=request.id, result=result.model_dump(exclude_none=True))

            else:
                return MCPJSONRPCResponse(
                    id=request.id,
                    error={
                        "code": MCPErrorCodes.METHOD_NOT_FOUND,
                        "message": f"Method not found: {method}",
                    },
                )

        except Exception as e:
            logger.error("mcp_internal_error", method=method, error=str(e), exc_info=True)
            return MCPJSONRPCResponse(
                id=request.id,
                error={
                    "code": MCPErrorCodes.INTERNAL_ERROR,
                    "message": f"Internal error: {str(e)}",
                },
            )
