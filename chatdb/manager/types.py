from __future__ import annotations
from typing import Optional, Union, List, Any, Mapping, Sequence, NamedTuple

# Type aliases
Bindings = Optional[Union[Sequence[Any], Mapping[Union[str, int], Any]]]
Row = Union[dict, tuple, Mapping[Union[str, int], Any]]
QueryResult = Union[bool, Optional[Row], List[Row]]


class ErrorInfo(NamedTuple):
    """Driver-level error descriptor of a statement: (sqlstate, driver_code, message)."""
    sqlstate: str
    driver_code: Optional[int]
    message: Optional[str]


SUCCESS_SQLSTATE = "00000"
GENERAL_ERROR_SQLSTATE = "HY000"
NO_ERROR = ErrorInfo(SUCCESS_SQLSTATE, None, None)
