"""Custom exceptions for tool dispatch."""

from trading212_mcp.exceptions import ValidationError


class ToolNotFoundError(ValidationError):
    """Raised when the requested tool is not in the catalog.

    Attributes:
        tool_name: Name of the tool that was not found.
    """

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Unknown tool: {tool_name}",
            issues=[{"path": ["name"], "message": f"Unknown tool: {tool_name}", "type": "unknown_tool"}],
        )
        self.code = "TOOL_NOT_FOUND"
        self.tool_name = tool_name
