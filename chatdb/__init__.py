from .config import Config
from .manager import (
    Database,
    ChatDBError,
    ConnectionError,
    PrepareError,
    ExecuteError,
    UsageError,
    ErrorInfo,
    close_persistent_connections,
)
from .execution import (
    QueryOptions,
    ReturnMode,
    FetchShape,
    BothRow,
    resolve_table_names,
)
from .log import NOT_EXECUTED, is_unknown

__all__ = (
    "Config",
    "Database",
    "QueryOptions",
    "ReturnMode",
    "FetchShape",
    "BothRow",
    "resolve_table_names",
    "ErrorInfo",
    "NOT_EXECUTED",
    "is_unknown",
    "close_persistent_connections",
    "ChatDBError",
    "ConnectionError",
    "PrepareError",
    "ExecuteError",
    "UsageError",
)
