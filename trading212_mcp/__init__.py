"""MCP server exposing the Trading 212 public API as tools."""

__version__ = "1.0.0"
