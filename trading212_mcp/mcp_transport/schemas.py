"""Pydantic schemas for MCP protocol messages."""

from typing import Any, Literal
from pydantic import BaseModel, Field


class MCPInitializeParams(BaseModel):
    """Parameters for initialize request."""

    protocolVersion: str = Field(description="MCP protocol version")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    clientInfo: dict[str, Any] = Field(default_factory=dict)


class MCPTool(BaseModel):
    """MCP tool definition."""

    name: str
    description: str
    inputSchema: dict[str, Any]


class MCPToolListResult(BaseModel):
    """Result for tools/list."""

    tools: list[MCPTool]


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call."""

    name: str
    arguments: dict[str, Any] | None = None


class MCPContent(BaseModel):
    """Content item in tool response."""

    type: Literal["text"] = "text"
    text: str


class MCPToolCallResult(BaseModel):
    """Result for tools/call.

    ``structuredContent`` carries the serialized error on failure so clients
    can branch on its kind and details without parsing text.
    """

    content: list[MCPContent]
    isError: bool = False
    structuredContent: dict[str, Any] | None = None


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: dict[str, Any] | None = None

    def to_message(self) -> dict[str, Any]:
        """Wire form: exactly one of ``result`` or ``error`` is present."""
        message: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            message["error"] = self.error
        else:
            message["result"] = self.result if self.result is not None else {}
        return message


# Standard JSON-RPC error codes
class MCPErrorCodes:
    """Standard JSON-RPC error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
