"""
SQLAlchemy-backed query client.

Runs the generic select/update queries directly against the database
using SQLAlchemy Core on the declared table metadata. Embeds are resolved
with one batched ``IN`` query per embed level, so a select costs
1 + (number of embeds) round trips regardless of row count.
"""

import logging
from typing import Any

from sqlalchemy import MetaData, Table, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.interfaces.query import (
    Embed,
    Filter,
    Ordering,
    Projection,
    QueryClient,
    QueryClientError,
    QueryError,
    QueryResult,
    SelectQuery,
    UpdateQuery,
)

from .models.base import Base

logger = logging.getLogger(__name__)


class SqlAlchemyQueryClient(QueryClient):
    """Query client running against a SQLAlchemy async session factory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        metadata: MetaData | None = None,
    ):
        """
        Initialize the client.

        Args:
            session_factory: Factory producing async sessions
            metadata: Table metadata to resolve names against (defaults to the models)
        """
        self._session_factory = session_factory
        self._metadata = metadata if metadata is not None else Base.metadata

    async def run_select(self, query: SelectQuery) -> QueryResult:
        try:
            async with self._session_factory() as session:
                rows, hidden = await self._fetch(
                    session,
                    query.table,
                    query.projection,
                    filters=query.filters,
                    ordering=query.ordering,
                )
        except QueryClientError as e:
            logger.warning("Rejected select on %s: %s", query.table, e)
            return QueryResult(error=QueryError(str(e), code="invalid_query"))
        except SQLAlchemyError as e:
            logger.error("Select on %s failed: %s", query.table, e)
            return QueryResult(error=QueryError(_describe(e), code=type(e).__name__))

        _strip(rows, hidden)
        return QueryResult(rows=rows)

    async def run_update(self, query: UpdateQuery) -> QueryResult:
        try:
            table = self._table(query.table)
            for column in query.patch:
                self._column(table, column)

            stmt = update(table).values(**query.patch)
            for f in query.filters:
                stmt = stmt.where(self._column(table, f.column) == f.value)

            async with self._session_factory() as session:
                try:
                    result = await session.execute(stmt)
                    await session.commit()
                except SQLAlchemyError:
                    await session.rollback()
                    raise
        except QueryClientError as e:
            logger.warning("Rejected update on %s: %s", query.table, e)
            return QueryResult(error=QueryError(str(e), code="invalid_query"))
        except SQLAlchemyError as e:
            logger.error("Update on %s failed: %s", query.table, e)
            return QueryResult(error=QueryError(_describe(e), code=type(e).__name__))

        logger.info("Updated %d row(s) in %s", result.rowcount, query.table)
        return QueryResult()

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            raise QueryClientError(f"relation {name!r} does not exist")
        return table

    def _column(self, table: Table, name: str):
        if name not in table.c:
            raise QueryClientError(f"column {table.name}.{name} does not exist")
        return table.c[name]

    def _visible_columns(self, table: Table, projection: Projection) -> list[str]:
        names: list[str] = []
        for column in projection.columns:
            if column == "*":
                names.extend(c.name for c in table.columns)
            else:
                names.append(self._column(table, column).name)
        return list(dict.fromkeys(names))

    async def _fetch(
        self,
        session: AsyncSession,
        table_name: str,
        projection: Projection,
        filters: list[Filter] | None = None,
        ordering: Ordering | None = None,
        match: tuple[str, list[Any]] | None = None,
        keep: tuple[str, ...] = (),
    ) -> tuple[list[dict[str, Any]], set[str]]:
        """
        Read rows of one table and resolve its embeds.

        Returns the rows plus the names of helper columns that were read
        only for joining; the caller strips them once it is done matching.
        """
        table = self._table(table_name)
        visible = self._visible_columns(table, projection)

        helpers = list(keep)
        for embed in projection.embeds:
            helpers.append("id" if embed.many else embed.foreign_key)
        for name in helpers:
            self._column(table, name)

        selected = list(dict.fromkeys(visible + helpers))
        stmt = select(*(table.c[name] for name in selected))
        for f in filters or ():
            stmt = stmt.where(self._column(table, f.column) == f.value)
        if match is not None:
            column, values = match
            stmt = stmt.where(self._column(table, column).in_(values))
        if ordering is not None:
            column = self._column(table, ordering.column)
            stmt = stmt.order_by(column.desc() if ordering.descending else column.asc())

        result = await session.execute(stmt)
        rows = [dict(row._mapping) for row in result]

        for embed in projection.embeds:
            await self._attach(session, rows, embed)

        aliases = {embed.alias for embed in projection.embeds}
        hidden = set(selected) - set(visible) - aliases
        return rows, hidden

    async def _attach(self, session: AsyncSession, rows: list[dict[str, Any]], embed: Embed) -> None:
        """Nest ``embed`` into every parent row."""
        if embed.many:
            parent_ids = list({row["id"] for row in rows if row.get("id") is not None})
            children: list[dict[str, Any]] = []
            hidden: set[str] = set()
            if parent_ids:
                children, hidden = await self._fetch(
                    session,
                    embed.table,
                    embed.projection,
                    match=(embed.foreign_key, parent_ids),
                    keep=(embed.foreign_key,),
                )
            grouped: dict[Any, list[dict[str, Any]]] = {}
            for child in children:
                grouped.setdefault(child[embed.foreign_key], []).append(child)
            _strip(children, hidden)
            for row in rows:
                row[embed.alias] = grouped.get(row.get("id"), [])
            return

        keys = list({row[embed.foreign_key] for row in rows if row.get(embed.foreign_key) is not None})
        by_id: dict[Any, dict[str, Any]] = {}
        if keys:
            children, hidden = await self._fetch(
                session,
                embed.table,
                embed.projection,
                match=("id", keys),
                keep=("id",),
            )
            by_id = {child["id"]: child for child in children}
            _strip(children, hidden)
        for row in rows:
            row[embed.alias] = by_id.get(row.get(embed.foreign_key))


def _strip(rows: list[dict[str, Any]], hidden: set[str]) -> None:
    if not hidden:
        return
    for row in rows:
        for key in hidden:
            row.pop(key, None)


def _describe(error: SQLAlchemyError) -> str:
    """Driver message without SQLAlchemy's statement dump."""
    orig = getattr(error, "orig", None)
    return str(orig) if orig is not None else str(error)
