"""Generic query client interface for the remote relational store.

The view-models only ever need four things from the store: a select with
declarative embeds, an equality filter, one ordering clause and a
single-statement patch update. Backends implement ``run_select`` and
``run_update``; the fluent builders below are shared.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


class QueryClientError(Exception):
    """Base exception for query client errors."""

    pass


class QueryConfigurationError(QueryClientError):
    """Raised when a query is built in a way no backend will run."""

    pass


@dataclass(frozen=True)
class QueryError:
    """Error value returned by a failed query."""

    message: str
    code: str | None = None
    details: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass
class QueryResult:
    """Outcome of an executed query. Exactly one of rows/error is meaningful."""

    rows: list[dict[str, Any]] = field(default_factory=list)
    error: QueryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Projection:
    """Columns to read plus nested embeds."""

    columns: tuple[str, ...] = ("*",)
    embeds: tuple["Embed", ...] = ()


@dataclass(frozen=True)
class Embed:
    """
    A joined entity nested under ``alias`` in each result row.

    To-one (``many=False``): ``foreign_key`` is a column of the parent row
    referencing ``table.id``; the embed is a mapping or None.
    To-many (``many=True``): ``foreign_key`` is a column of ``table``
    referencing the parent's ``id``; the embed is a list.
    """

    alias: str
    table: str
    foreign_key: str
    projection: Projection = Projection()
    many: bool = False


@dataclass(frozen=True)
class Filter:
    """Equality filter ``column = value``."""

    column: str
    value: Any


@dataclass(frozen=True)
class Ordering:
    column: str
    descending: bool = False


class SelectQuery:
    """Fluent select builder bound to a client."""

    def __init__(self, client: "QueryClient", table: str, projection: Projection):
        self._client = client
        self.table = table
        self.projection = projection
        self.filters: list[Filter] = []
        self.ordering: Ordering | None = None

    def eq(self, column: str, value: Any) -> "SelectQuery":
        self.filters.append(Filter(column, value))
        return self

    def order(self, column: str, descending: bool = False) -> "SelectQuery":
        if self.ordering is not None:
            raise QueryConfigurationError("Only one ordering clause is supported")
        self.ordering = Ordering(column, descending)
        return self

    async def execute(self) -> QueryResult:
        return await self._client.run_select(self)


class UpdateQuery:
    """Fluent patch-update builder bound to a client."""

    def __init__(self, client: "QueryClient", table: str, patch: dict[str, Any]):
        if not patch:
            raise QueryConfigurationError("Update patch must not be empty")
        self._client = client
        self.table = table
        self.patch = dict(patch)
        self.filters: list[Filter] = []

    def eq(self, column: str, value: Any) -> "UpdateQuery":
        self.filters.append(Filter(column, value))
        return self

    async def execute(self) -> QueryResult:
        # Unfiltered updates would rewrite the whole table
        if not self.filters:
            raise QueryConfigurationError(f"Refusing to update {self.table} without a filter")
        return await self._client.run_update(self)


class QueryClient(ABC):
    """Abstract client for the remote relational store."""

    def select(self, table: str, projection: Projection | None = None) -> SelectQuery:
        """Start a select on ``table``."""
        return SelectQuery(self, table, projection or Projection())

    def update(self, table: str, patch: dict[str, Any]) -> UpdateQuery:
        """Start a patch update on ``table``."""
        return UpdateQuery(self, table, patch)

    @abstractmethod
    async def run_select(self, query: SelectQuery) -> QueryResult:
        """Execute a select. Failures are returned, never raised."""
        ...

    @abstractmethod
    async def run_update(self, query: UpdateQuery) -> QueryResult:
        """Execute an update. Failures are returned, never raised."""
        ...
