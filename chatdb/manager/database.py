from __future__ import annotations
from contextlib import asynccontextmanager
import asyncio
import sqlite3
from typing import Optional, Union, Type
from logging import Logger, getLogger as logging_getLogger
from aiosqlite import Connection as AioConnection

from .connection import ConnectionManager, close_persistent_connections
from .statement_cache import StatementCache
from .error_policy import ErrorPolicy
from .exceptions import ChatDBError, ConnectionError
from .types import Bindings, QueryResult, ErrorInfo, Row
from ..config import Config
from ..execution.executor import QueryExecutor
from ..execution.fetch_types import QueryOptions, ReturnMode, FetchShape
from ..log import ExecutionLog, Unknown


class Database:
    """
    Database handle for the chat backend.

    Public API:

        db = Database(Config(database="chat.db", table_prefix="chat_"))

        async with db:
            await db.query("INSERT INTO {sessions} (state) VALUES (?)", ["open"])
            session_id = await db.last_inserted_id()
            rows = await db.query(
                "SELECT * FROM {sessions} WHERE state = :state",
                {"state": "open"},
                {"return_mode": "all"},
            )

    One handle owns one lazily opened connection, its statement cache and
    the error policy. Construct it once and pass it to whatever needs the
    database; ``async with`` (or an explicit ``teardown()``) releases the
    connection on every exit path.
    """

    def __init__(
        self,
        config: Config,
        *,
        log_queries: bool = False,
        logger: Optional[Logger] = None,
    ) -> None:
        self.config = config
        self.logger = logger or logging_getLogger(__name__)
        self.policy = ErrorPolicy(config.throw_on_error, logger=self.logger)
        self.connections = ConnectionManager(config, logger=self.logger)
        self.statements = StatementCache(self.connections, logger=self.logger)
        self.executor = QueryExecutor(
            self.connections,
            self.statements,
            table_prefix=config.table_prefix,
            log_queries=log_queries,
            logger=self.logger,
        )
        self._lock = asyncio.Lock()

    @classmethod
    def from_env(cls, prefix: str = "CHATDB_", dotenv_path: Optional[str] = None, **kwargs) -> Database:
        return cls(Config.from_env(prefix, dotenv_path), **kwargs)

    # Properties
    @property
    def throw_on_error(self) -> bool:
        return self.policy.throw_on_error

    @property
    def log_queries(self) -> bool:
        return self.executor.log_queries

    @log_queries.setter
    def log_queries(self, value: bool) -> None:
        self.executor.log_queries = value

    @property
    def last_execution(self) -> Optional[ExecutionLog]:
        return self.executor.last_execution

    def throw_exceptions(self, value: bool) -> None:
        """Choose between raising typed errors (True) and report-and-exit (False)."""
        self.policy.throw_on_error = value

    # Error boundary
    @asynccontextmanager
    async def _guard(self):
        """Hand every ChatDBError raised inside the block to the error policy."""
        try:
            yield
        except ChatDBError as e:
            if not self.policy.throw_on_error:
                # The process is about to exit; release driver handles first.
                await self._teardown_quietly(close_persistent=True)
            self.policy.handle(e)

    @asynccontextmanager
    async def serialized(self):
        """Serialize access for callers sharing this handle between tasks."""
        async with self._lock:
            yield

    # Connection Management
    async def connect(self) -> AioConnection:
        """Open the connection now instead of on the first query."""
        async with self._guard():
            return await self.connections.get_connection()

    async def teardown(self) -> None:
        """Close cached statements and the connection; the next query reconnects."""
        async with self._guard():
            await self.statements.clear()
            self.executor.reset()
            try:
                await self.connections.close()
            except (sqlite3.Error, ValueError) as e:
                raise ConnectionError(f"Failed to close connection: {e}") from e

    close = teardown

    async def _teardown_quietly(self, close_persistent: bool = False) -> None:
        try:
            await self.statements.clear()
            self.executor.reset()
            await self.connections.close()
            if close_persistent:
                await close_persistent_connections()
        except (sqlite3.Error, ValueError) as e:
            self.logger.warning(f"Teardown failed: {e}")

    async def __aenter__(self) -> Database:
        return self

    async def __aexit__(self, exc_type: Optional[Type[BaseException]],
                        exc_val: Optional[BaseException], exc_tb) -> None:
        if exc_type is not None and not issubclass(exc_type, Exception):
            # SystemExit / cancellation: release without raising over the original.
            await self._teardown_quietly()
            return
        await self.teardown()

    # Queries
    async def query(
        self,
        query: str,
        bindings: Bindings = None,
        options: Union[QueryOptions, dict, None] = None,
        *,
        log: bool = False,
    ) -> QueryResult:
        """
        Execute a SQL query. See QueryExecutor.query for the argument contract.

        Returns:
            True, one row (or None), or a list of rows, depending on options.
        """
        async with self._guard():
            return await self.executor.query(query, bindings, options, log=log)

    async def fetch_one(
        self,
        query: str,
        bindings: Bindings = None,
        fetch_shape: Union[str, FetchShape, None] = None,
    ) -> Optional[Row]:
        async with self._guard():
            return await self.executor.query(query, bindings, QueryOptions(ReturnMode.ONE, fetch_shape))

    async def fetch_all(
        self,
        query: str,
        bindings: Bindings = None,
        fetch_shape: Union[str, FetchShape, None] = None,
    ) -> list:
        async with self._guard():
            return await self.executor.query(query, bindings, QueryOptions(ReturnMode.ALL, fetch_shape))

    # Introspection
    async def last_error_info(self) -> Union[ErrorInfo, Unknown]:
        async with self._guard():
            return await self.executor.last_error_info()

    async def last_inserted_id(self) -> int:
        async with self._guard():
            return await self.executor.last_inserted_id()

    async def affected_rows(self) -> Union[int, Unknown]:
        async with self._guard():
            return await self.executor.affected_rows()
