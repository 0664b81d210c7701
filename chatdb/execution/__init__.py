from .executor import QueryExecutor
from .fetch_types import (
    QueryOptions,
    ReturnMode,
    FetchShape,
)
from .row_factory import BothRow
from .table_names import resolve_table_names

__all__ = ("QueryExecutor", "QueryOptions", "ReturnMode", "FetchShape", "BothRow", "resolve_table_names")
