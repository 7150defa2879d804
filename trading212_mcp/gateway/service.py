"""Service layer for tool dispatch with validation and error normalization."""

import json
import time
from typing import Any

import pydantic
import pydantic_core
import structlog

from trading212_mcp.broker.client import Trading212Client
from trading212_mcp.exceptions import ValidationError, serialize_error
from trading212_mcp.registry import ToolCatalog

from .exceptions import ToolNotFoundError
from .schemas import InvokeToolRequest, ToolResult


logger = structlog.get_logger(__name__)


def format_payload(result: Any) -> str:
    """Serialize a handler result as tool output text.

    Strings pass through; anything else becomes indented JSON with unset
    optional fields left out.
    """
    if isinstance(result, str):
        return result
    return json.dumps(pydantic_core.to_jsonable_python(result, exclude_none=True), indent=2)


def format_error(error: BaseException) -> str:
    """Human-readable failure text for a tool result."""
    if isinstance(error, ToolNotFoundError):
        return error.message
    if isinstance(error, ValidationError):
        return f"Validation Error: {error.message}\n{json.dumps(error.issues, indent=2)}"
    payload = serialize_error(error)
    return f"Error: {payload['message']}"


async def invoke_tool(
    catalog: ToolCatalog,
    client: Trading212Client,
    request: InvokeToolRequest,
) -> ToolResult:
    """Validate and execute one tool call.

    This is the only place tool failures are caught. It:
    1. Looks up the tool by exact name
    2. Validates the arguments against the tool's input model
    3. Runs the handler against the shared client
    4. Converts the return value, or any exception, into a ToolResult

    Validation failures never reach the client.

    Args:
        catalog: Tools available to the caller.
        client: Shared Trading 212 client.
        request: Tool name and raw arguments.

    Returns:
        ToolResult describing success or failure. Never raises for tool errors.
    """
    start_time = time.perf_counter()

    tool = catalog.get(request.tool_name)
    if tool is None:
        error = ToolNotFoundError(request.tool_name)
        logger.warning("unknown_tool_requested", tool=request.tool_name)
        return ToolResult.failure(format_error(error), serialize_error(error))

    try:
        try:
            arguments = tool.input_model.model_validate(request.arguments)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(e) from e

        result = await tool.handler(client, arguments)
        text = format_payload(result)
    except Exception as e:
        logger.error(
            "tool_execution_failed",
            tool=request.tool_name,
            args=request.arguments,
            error=serialize_error(e),
            duration_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return ToolResult.failure(format_error(e), serialize_error(e))

    logger.info(
        "tool_invocation",
        tool=request.tool_name,
        duration_ms=int((time.perf_counter() - start_time) * 1000),
    )
    return ToolResult.success(text)
