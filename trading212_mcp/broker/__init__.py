"""Broker module - Trading 212 schemas and HTTP client."""

from .client import Trading212Client, build_auth_header, build_query_path


__all__ = [
    "Trading212Client",
    "build_auth_header",
    "build_query_path",
]
