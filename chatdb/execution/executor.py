from __future__ import annotations
import sqlite3
from typing import Optional, Any, Union
from logging import Logger, getLogger as logging_getLogger

from .fetch_types import QueryOptions, ReturnMode
from .placeholders import check_bindings
from .row_factory import row_factory_for
from .table_names import resolve_table_names
from ..log import ExecutionLog, Unknown, NOT_EXECUTED
from ..manager.connection import ConnectionManager
from ..manager.statement_cache import StatementCache, CachedStatement
from ..manager.exceptions import ExecuteError
from ..manager.types import Bindings, QueryResult, ErrorInfo, NO_ERROR, GENERAL_ERROR_SQLSTATE


# sqlite3 raises OverflowError for integers that do not fit in 64 bits.
DRIVER_ERRORS = (sqlite3.Error, ValueError, OverflowError)


def error_info_from(error: BaseException) -> ErrorInfo:
    """Build the driver-level error descriptor of a failed execution."""
    return ErrorInfo(
        GENERAL_ERROR_SQLSTATE,
        getattr(error, "sqlite_errorcode", None),
        str(error),
    )


class QueryExecutor:
    """
    Runs queries through table-name resolution, the statement cache and
    result shaping, and remembers the last executed statement.

    Every failure is raised as a typed ChatDBError; what happens next is up
    to the caller's error policy.
    """

    def __init__(
        self,
        connections: ConnectionManager,
        statements: StatementCache,
        table_prefix: str = "",
        log_queries: bool = False,
        logger: Optional[Logger] = None,
    ) -> None:
        self.connections = connections
        self.statements = statements
        self.table_prefix = table_prefix
        self.log_queries = log_queries
        self.logger = logger or logging_getLogger(__name__)
        self._last_key: Optional[str] = None
        self._last_execution: Optional[ExecutionLog] = None

    # Properties
    @property
    def last_statement(self) -> Optional[CachedStatement]:
        return self.statements.get(self._last_key)

    @property
    def last_execution(self) -> Optional[ExecutionLog]:
        return self._last_execution

    def reset(self) -> None:
        """Forget the last executed statement."""
        self._last_key = None
        self._last_execution = None

    def resolve(self, query: str) -> str:
        return resolve_table_names(query, self.table_prefix)

    def _should_log(self, log: bool) -> bool:
        return log or self.log_queries

    async def query(
        self,
        query: str,
        bindings: Bindings = None,
        options: Union[QueryOptions, dict, None] = None,
        *,
        log: bool = False,
    ) -> QueryResult:
        """
        Execute a SQL query.

        Args:
            query (str): SQL text with ``?`` or ``:name`` placeholders and
                ``{table}`` markers, which become ``table_prefix + table``.
            bindings: Sequence of values for ``?`` placeholders or mapping of
                names to values for ``:name`` placeholders.
            options: QueryOptions or a mapping with "return_mode" ("one"/"all")
                and "fetch_shape" ("assoc"/"numeric"/"both", default "assoc").
            log (bool): Log this query at INFO even when log_queries is off.

        Returns:
            True when no return mode is set; one row or None for
            ReturnMode.ONE; a list of rows for ReturnMode.ALL.

        Raises:
            UsageError: Invalid options or bindings, before anything is sent to the database.
            ConnectionError: The connection could not be established.
            PrepareError: The statement could not be prepared.
            ExecuteError: The database rejected the statement.
        """
        opts = QueryOptions.coerce(options)
        final_sql = self.resolve(query)
        params = check_bindings(final_sql, bindings)

        statement = await self.statements.get_or_create(final_sql)
        self._last_key = statement.key

        if self._should_log(log):
            self.logger.info(f"{final_sql} | {params}")

        cursor = statement.cursor
        cursor.row_factory = row_factory_for(opts.fetch_shape) if opts.returns_rows else None
        try:
            await cursor.execute(final_sql, params)
            result = await self._fetch_results(statement, opts)
        except DRIVER_ERRORS as e:
            statement.error_info = error_info_from(e)
            self._record(statement, params, opts)
            self.logger.error(f"Query failed: {e} | {final_sql}")
            raise ExecuteError(f"Query failed: {e}", statement.error_info) from e
        statement.error_info = NO_ERROR
        self._record(statement, params, opts, cursor.rowcount)
        return result

    def _record(self, statement: CachedStatement, params: Any, opts: QueryOptions, row_count: Any = None) -> None:
        self._last_execution = ExecutionLog(
            statement.key,
            statement.sql,
            params,
            opts.return_mode.to_string() if opts.return_mode else None,
            opts.fetch_shape.value,
            statement.error_info,
            row_count if row_count is not None else Unknown("RowCount"),
        )
        self.logger.debug(str(self._last_execution))

    async def _fetch_results(self, statement: CachedStatement, opts: QueryOptions) -> QueryResult:
        cursor = statement.cursor
        if opts.return_mode is ReturnMode.ALL:
            return list(await cursor.fetchall())

        row: Any = True
        if opts.return_mode is ReturnMode.ONE:
            row = await cursor.fetchone()
        if cursor.description is not None:
            # Drain what is left so no read stays pending on the connection.
            cursor.row_factory = None
            await cursor.fetchall()
        return row

    # Introspection
    async def last_error_info(self) -> Union[ErrorInfo, Unknown]:
        """Error descriptor of the last executed statement, or NOT_EXECUTED."""
        statement = self.last_statement
        if statement is None:
            return NOT_EXECUTED
        return statement.error_info

    async def last_inserted_id(self) -> int:
        """Row id generated by the most recent INSERT on the current connection."""
        conn = await self.connections.get_connection()
        try:
            cursor = await conn.execute("SELECT last_insert_rowid()")
            row = await cursor.fetchone()
            await cursor.close()
        except DRIVER_ERRORS as e:
            raise ExecuteError(f"Failed to read last inserted id: {e}", error_info_from(e)) from e
        return row[0]

    async def affected_rows(self) -> Union[int, Unknown]:
        """Rows changed by the last executed statement, or NOT_EXECUTED."""
        statement = self.last_statement
        if statement is None:
            return NOT_EXECUTED
        try:
            return statement.row_count
        except DRIVER_ERRORS as e:
            raise ExecuteError(f"Failed to read affected rows: {e}", error_info_from(e)) from e
