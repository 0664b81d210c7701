"""
Database handle, connection lifecycle, statement cache and error policy.

Public API:

    from chatdb import Config, Database

    db = Database(Config(database="chat.db", table_prefix="chat_", throw_on_error=True))

    async with db:
        await db.query("INSERT INTO {sessions} (state) VALUES (?)", ["open"])
        row = await db.fetch_one("SELECT * FROM {sessions} WHERE id = ?", [1])

The lower-level pieces (ConnectionManager, StatementCache, ErrorPolicy) are
also exported for custom integrations, but the recommended entry point is
`Database`.
"""

from .exceptions import (
    ChatDBError,
    ConnectionError,
    PrepareError,
    ExecuteError,
    UsageError,
)

from .types import (
    Bindings,
    Row,
    QueryResult,
    ErrorInfo,
    NO_ERROR,
)

from .connection import (
    ConnectionManager,
    close_persistent_connections,
)
from .statement_cache import (
    CachedStatement,
    StatementCache,
    cache_key,
)
from .error_policy import ErrorPolicy

from .database import Database          # High-level handle

__all__ = [
    # Main entry point
    "Database",

    # Advanced / extension points
    "ConnectionManager",
    "close_persistent_connections",
    "CachedStatement",
    "StatementCache",
    "cache_key",
    "ErrorPolicy",

    # Exceptions
    "ChatDBError",
    "ConnectionError",
    "PrepareError",
    "ExecuteError",
    "UsageError",

    # Typing helpers
    "Bindings",
    "Row",
    "QueryResult",
    "ErrorInfo",
    "NO_ERROR",
]
