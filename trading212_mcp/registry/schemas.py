"""Tool descriptor types."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from trading212_mcp.broker.client import Trading212Client

ToolHandler = Callable[[Trading212Client, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolDescriptor:
    """One callable tool.

    Attributes:
        name: Unique tool identifier.
        description: Human-readable description.
        input_model: Model the raw arguments are validated against.
        handler: Coroutine receiving the client and the validated arguments.
    """

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's arguments."""
        schema = self.input_model.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema
