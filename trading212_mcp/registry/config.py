"""Static tool registry config loader."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_REGISTRY_PATH = Path(__file__).parent / "tools.yaml"


class ToolConfig(BaseModel):
    """Tool definition loaded from static config."""

    name: str
    description: str


class ToolRegistryConfig(BaseModel):
    """Container for tool definitions."""

    tools: list[ToolConfig] = Field(default_factory=list)


def load_tool_registry(config_path: str | Path | None = None) -> ToolRegistryConfig:
    """Load tool registry config from YAML.

    Args:
        config_path: Optional custom path for the tool registry config.

    Returns:
        Parsed ToolRegistryConfig, or an empty config if the file is missing.
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_REGISTRY_PATH

    if not config_path.exists():
        return ToolRegistryConfig()

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return ToolRegistryConfig(**data)
