"""Gateway module - tool dispatch and result normalization."""

from .schemas import InvokeToolRequest, ToolResult
from .exceptions import ToolNotFoundError
from .service import format_error, format_payload, invoke_tool


__all__ = [
    # Schemas
    "InvokeToolRequest",
    "ToolResult",
    # Exceptions
    "ToolNotFoundError",
    # Service
    "format_error",
    "format_payload",
    "invoke_tool",
]
