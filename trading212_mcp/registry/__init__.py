"""Registry module - Tool definitions and catalog."""

from .config import ToolConfig, ToolRegistryConfig, load_tool_registry
from .handlers import HANDLERS, filter_instruments
from .schemas import ToolDescriptor, ToolHandler
from .service import ToolCatalog, build_catalog, get_catalog


__all__ = [
    "HANDLERS",
    "ToolCatalog",
    "ToolConfig",
    "ToolDescriptor",
    "ToolHandler",
    "ToolRegistryConfig",
    "build_catalog",
    "filter_instruments",
    "get_catalog",
    "load_tool_registry",
]
