from __future__ import annotations
import hashlib
import sqlite3
from typing import Optional, Dict, Iterator
from logging import Logger, getLogger as logging_getLogger
from aiosqlite import Connection as AioConnection, Cursor as AioCursor

from .connection import ConnectionManager
from .exceptions import PrepareError
from .types import ErrorInfo, NO_ERROR


def cache_key(final_sql: str) -> str:
    """Content hash of the final (post-substitution) SQL text."""
    return hashlib.sha256(final_sql.encode("utf-8")).hexdigest()


class CachedStatement:
    """
    A prepared statement: the final SQL text and the cursor dedicated to it.

    Attributes:
        key (str): cache_key(sql).
        sql (str): The final SQL text this statement was prepared from.
        cursor (AioCursor): Driver cursor executing this statement.
        connection (AioConnection): Connection the cursor was opened on.
        error_info (ErrorInfo): Outcome of the last execution.
    """
    __slots__ = ("key", "sql", "cursor", "connection", "error_info")

    def __init__(self, key: str, sql: str, cursor: AioCursor, connection: AioConnection) -> None:
        self.key = key
        self.sql = sql
        self.cursor = cursor
        self.connection = connection
        self.error_info: ErrorInfo = NO_ERROR

    @property
    def row_count(self) -> int:
        return self.cursor.rowcount

    def __repr__(self) -> str:
        return f"CachedStatement(key={self.key[:12]}, sql={self.sql!r})"


class StatementCache:
    """
    Maps the hash of final SQL text to its CachedStatement.

    Entries live until ``clear()``; there is no eviction and no silent
    invalidation, so a schema change that needs re-preparation requires a
    full teardown. The one exception is a connection replaced behind the
    cache's back (a persistent connection closed by
    ``close_persistent_connections()``): statements of the old connection
    are dropped and prepared again on the new one.
    """

    def __init__(self, connections: ConnectionManager, logger: Optional[Logger] = None) -> None:
        self._connections = connections
        self.logger = logger or logging_getLogger(__name__)
        self._statements: Dict[str, CachedStatement] = {}
        self._connection: Optional[AioConnection] = None

    async def get_or_create(self, final_sql: str) -> CachedStatement:
        """Return the cached statement for *final_sql*, preparing it on first use."""
        key = cache_key(final_sql)
        conn = await self._connections.get_connection()
        if conn is not self._connection:
            if self._statements:
                self._drop_stale(conn)
            self._connection = conn
        statement = self._statements.get(key)
        if statement is not None:
            if statement.sql != final_sql:
                raise PrepareError(f"Statement cache key collision for {final_sql!r}")
            return statement

        try:
            cursor = await conn.cursor()
        except (sqlite3.Error, ValueError) as e:
            raise PrepareError(f"Failed to prepare statement {final_sql!r}: {e}") from e

        statement = CachedStatement(key, final_sql, cursor, conn)
        self._statements[key] = statement
        self.logger.debug(f"Prepared statement {key[:12]}: {final_sql}")
        return statement

    def _drop_stale(self, conn: AioConnection) -> None:
        # Their connection is already closed, so there is nothing to release.
        stale = [key for key, statement in self._statements.items() if statement.connection is not conn]
        for key in stale:
            del self._statements[key]
        self.logger.info(f"Dropped {len(stale)} statements prepared on a closed connection")

    def get(self, key: Optional[str]) -> Optional[CachedStatement]:
        if key is None:
            return None
        return self._statements.get(key)

    async def clear(self) -> None:
        """Close every cached cursor and empty the cache."""
        statements = list(self._statements.values())
        self._statements.clear()
        self._connection = None
        for statement in statements:
            try:
                await statement.cursor.close()
            except (sqlite3.Error, ValueError) as e:
                # The connection may already be gone; the cursor is released either way.
                self.logger.warning(f"Failed to close statement {statement.key[:12]}: {e}")

    @property
    def keys(self) -> list[str]:
        return list(self._statements)

    def __len__(self) -> int:
        return len(self._statements)

    def __contains__(self, final_sql: object) -> bool:
        return isinstance(final_sql, str) and cache_key(final_sql) in self._statements

    def __iter__(self) -> Iterator[CachedStatement]:
        return iter(list(self._statements.values()))
