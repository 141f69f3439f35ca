"""Interfaces for external collaborators."""

from .query import (
    Embed,
    Filter,
    Ordering,
    Projection,
    QueryClient,
    QueryClientError,
    QueryConfigurationError,
    QueryError,
    QueryResult,
    SelectQuery,
    UpdateQuery,
)

__all__ = [
    "QueryClient",
    "SelectQuery",
    "UpdateQuery",
    "Projection",
    "Embed",
    "Filter",
    "Ordering",
    "QueryResult",
    "QueryError",
    "QueryClientError",
    "QueryConfigurationError",
]
