"""MCP transport module - JSON-RPC dispatch over stdio and streamable HTTP."""

from .schemas import (
    MCPErrorCodes,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallResult,
)
from .service import (
    DispatchContext,
    SUPPORTED_PROTOCOL_VERSIONS,
    handle_initialize,
    handle_tools_call,
    handle_tools_list,
)
from .sessions import Session, SessionManager
from .stdio import serve_stdio
from .router import CORS_HEADERS, SESSION_HEADER, build_router


__all__ = [
    # Schemas
    "MCPErrorCodes",
    "MCPJSONRPCRequest",
    "MCPJSONRPCResponse",
    "MCPToolCallResult",
    # Service
    "DispatchContext",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "handle_initialize",
    "handle_tools_call",
    "handle_tools_list",
    # Sessions
    "Session",
    "SessionManager",
    # Transports
    "serve_stdio",
    "build_router",
    "CORS_HEADERS",
    "SESSION_HEADER",
]
