"""Tool catalog built from the static registry config."""

from functools import lru_cache
from pathlib import Path
from typing import Iterator

from .config import load_tool_registry
from .handlers import HANDLERS
from .schemas import ToolDescriptor


class ToolCatalog:
    """Immutable, name-indexed set of tool descriptors."""

    def __init__(self, tools: list[ToolDescriptor]):
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools:
            if tool.name in self._tools:
                raise ValueError(f"duplicate tool name: {tool.name}")
            self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


def build_catalog(config_path: str | Path | None = None) -> ToolCatalog:
    """Bind every configured tool to its argument model and handler.

    Args:
        config_path: Optional path override for the tool registry config.

    Raises:
        ValueError: If a configured tool has no handler or is listed twice.
    """
    registry_config = load_tool_registry(config_path)

    tools: list[ToolDescriptor] = []
    for tool in registry_config.tools:
        if tool.name not in HANDLERS:
            raise ValueError(f"no handler registered for tool: {tool.name}")
        input_model, handler = HANDLERS[tool.name]
        tools.append(
            ToolDescriptor(
                name=tool.name,
                description=tool.description,
                input_model=input_model,
                handler=handler,
            )
        )

    return ToolCatalog(tools)


@lru_cache()
def get_catalog() -> ToolCatalog:
    """Process-wide catalog loaded from the packaged registry config."""
    return build_catalog()
