"""Pydantic schemas for tool invocation and its outcome."""

from typing import Any

from pydantic import BaseModel, Field


class InvokeToolRequest(BaseModel):
    """A single tool invocation.

    Attributes:
        tool_name: Name of the tool to invoke.
        arguments: Raw, unvalidated arguments.
    """

    tool_name: str = Field(..., description="Tool to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Tool arguments")


class ToolResult(BaseModel):
    """Outcome of a tool invocation; produced for every call, never raised.

    Attributes:
        ok: Whether the tool succeeded.
        text: Serialized payload on success, readable error text on failure.
        error: Structured error (see ``serialize_error``) on failure.
    """

    ok: bool = Field(..., description="Whether the tool succeeded")
    text: str = Field(..., description="Payload or error text")
    error: dict[str, Any] | None = Field(default=None, description="Structured error on failure")

    @property
    def is_error(self) -> bool:
        return not self.ok

    @classmethod
    def success(cls, text: str) -> "ToolResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, text: str, error: dict[str, Any]) -> "ToolResult":
        return cls(ok=False, text=text, error=error)
