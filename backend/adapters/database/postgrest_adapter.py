"""
PostgREST query adapter for the hosted database.

Translates the generic select/update queries into PostgREST HTTP calls
(the REST dialect served by Supabase): embeds become the ``select``
parameter's nested resource syntax, equality filters become ``col=eq.value``
and ordering becomes ``order=col.desc``.
"""

import logging
from typing import Any

import httpx

from core.interfaces.query import (
    Projection,
    QueryClient,
    QueryClientError,
    QueryError,
    QueryResult,
    SelectQuery,
    UpdateQuery,
)
from infrastructure.config.settings import settings

logger = logging.getLogger(__name__)


# Custom Exceptions
class PostgrestError(QueryClientError):
    """Base exception for PostgREST adapter errors."""

    def __init__(self, message: str, code: str | None = None, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details

    def to_query_error(self) -> QueryError:
        return QueryError(message=self.message, code=self.code, details=self.details)


class PostgrestAPIError(PostgrestError):
    """Raised when the REST API returns an error or cannot be reached."""

    pass


class PostgrestAuthError(PostgrestError):
    """Raised when the adapter has no URL or API key to authenticate with."""

    pass


def render_select(projection: Projection) -> str:
    """
    Render a projection as a PostgREST ``select`` parameter.

    Example:
        ``*,profiles:profiles!influencer_id(username,full_name,avatar_url)``
    """
    parts = list(projection.columns)
    for embed in projection.embeds:
        parts.append(
            f"{embed.alias}:{embed.table}!{embed.foreign_key}({render_select(embed.projection)})"
        )
    return ",".join(parts)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


class PostgrestQueryClient(QueryClient):
    """
    Query client for a PostgREST endpoint.

    Every request carries the project API key; when the caller's access
    token is supplied it is sent as the bearer so row-level security
    applies to the signed-in user.
    """

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        access_token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize PostgREST adapter.

        Args:
            base_url: Project URL, e.g. https://xyz.supabase.co (defaults to settings)
            api_key: Project anon key (defaults to settings)
            access_token: Signed-in user's access token, forwarded as bearer
            timeout: Request timeout in seconds (defaults to settings)
            transport: Optional httpx transport, used by tests
        """
        self.base_url = (base_url or settings.supabase_url or "").rstrip("/")
        self.api_key = api_key or settings.supabase_anon_key
        self.access_token = access_token
        self.timeout = timeout or settings.rest_timeout
        self._transport = transport

        if not self.base_url or not self.api_key:
            logger.warning(
                "PostgREST adapter not configured. Set supabase_url and supabase_anon_key in settings."
            )

    @property
    def rest_url(self) -> str:
        return f"{self.base_url}{self.REST_PATH}"

    def _get_headers(self, prefer: str | None = None) -> dict[str, str]:
        """Get HTTP headers for API requests."""
        if not self.base_url or not self.api_key:
            raise PostgrestAuthError(
                "PostgREST adapter not configured. Set supabase_url and supabase_anon_key in settings.",
                code="not_configured",
            )

        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _make_request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        data: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        """
        Make HTTP request to the REST API.

        Raises:
            PostgrestAuthError: If the adapter is not configured
            PostgrestAPIError: If the request fails or returns an error status
        """
        url = f"{self.rest_url}/{table}"
        headers = self._get_headers(prefer)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                logger.debug("Making %s request to %s", method, table)
                response = await client.request(method, url, headers=headers, params=params, json=data)
                response.raise_for_status()
                return response

        except httpx.HTTPStatusError as e:
            message = str(e)
            code = str(e.response.status_code)
            details = None
            try:
                error_data = e.response.json()
                if isinstance(error_data, dict):
                    message = error_data.get("message") or message
                    code = error_data.get("code") or code
                    details = error_data.get("details")
            except ValueError:
                pass

            logger.error("PostgREST API error on %s: %s", table, message)
            raise PostgrestAPIError(message, code=code, details=details)
        except httpx.RequestError as e:
            logger.error("HTTP request error on %s: %s", table, e)
            raise PostgrestAPIError(f"Request failed: {e}", code="network_error")

    async def run_select(self, query: SelectQuery) -> QueryResult:
        params = [("select", render_select(query.projection))]
        params.extend((f.column, f"eq.{_format_value(f.value)}") for f in query.filters)
        if query.ordering is not None:
            direction = "desc" if query.ordering.descending else "asc"
            params.append(("order", f"{query.ordering.column}.{direction}"))

        try:
            response = await self._make_request("GET", query.table, params)
        except PostgrestError as e:
            return QueryResult(error=e.to_query_error())

        try:
            rows = response.json()
        except ValueError:
            logger.error("PostgREST returned a non-JSON body for %s", query.table)
            return QueryResult(error=QueryError("Invalid JSON in response", code="invalid_response"))
        if not isinstance(rows, list):
            return QueryResult(error=QueryError("Expected a list of rows", code="invalid_response"))
        return QueryResult(rows=rows)

    async def run_update(self, query: UpdateQuery) -> QueryResult:
        params = [(f.column, f"eq.{_format_value(f.value)}") for f in query.filters]

        try:
            await self._make_request(
                "PATCH",
                query.table,
                params,
                data=query.patch,
                prefer="return=minimal",
            )
        except PostgrestError as e:
            return QueryResult(error=e.to_query_error())

        logger.info("Patched %s (%s)", query.table, ", ".join(sorted(query.patch)))
        return QueryResult()


def create_postgrest_client(access_token: str | None = None) -> PostgrestQueryClient:
    """
    Create a PostgREST client from settings.

    Args:
        access_token: Signed-in user's access token, forwarded for row-level security

    Returns:
        PostgrestQueryClient instance
    """
    return PostgrestQueryClient(access_token=access_token)
