"""Database adapters for the hosted REST backend."""

from .postgrest_adapter import (
    PostgrestAPIError,
    PostgrestAuthError,
    PostgrestError,
    PostgrestQueryClient,
    create_postgrest_client,
    render_select,
)

__all__ = [
    "PostgrestQueryClient",
    "PostgrestError",
    "PostgrestAPIError",
    "PostgrestAuthError",
    "create_postgrest_client",
    "render_select",
]
