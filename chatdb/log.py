from typing import Any, Optional
class Unknown:
    __slots__ = ("name",)
    def __init__(self, name: str):
        self.name = name
    def __repr__(self):
        return f"<Unknown: {self.name}>"
    def __eq__(self, other):
        if isinstance(other, Unknown):
            return self.name == other.name
        return False
    def __hash__(self):
        return hash(self.name)
    def __bool__(self):
        return False
    def __str__(self):
        return f'Unknown({self.name})'


# Returned by introspection calls before any statement has been executed.
NOT_EXECUTED = Unknown("NotExecuted")


def is_unknown(value: Any) -> bool:
    """
    Check if the value is an instance of Unknown.

    Args:
        value: The value to check.

    Returns:
        bool: True if the value is an instance of Unknown, False otherwise.
    """
    return isinstance(value, Unknown)


class ExecutionLog:
    """
    Outcome of the most recent query: the statement that ran, its bindings,
    the options it was shaped with and how it ended.

    ``error_info`` holds the driver's error descriptor; a successful run
    carries the ``("00000", None, None)`` descriptor and a failed one has no
    row count.
    """
    __slots__ = ("key", "query", "params", "return_mode", "fetch_shape", "row_count", "error_info")
    def __init__(self, key: str, query: str, params: Any, return_mode: Optional[str],
                 fetch_shape: str, error_info: Any, row_count: Any = Unknown("RowCount")):
        self.key = key
        self.query = query
        self.params = params
        self.return_mode = return_mode
        self.fetch_shape = fetch_shape
        self.error_info = error_info
        self.row_count = row_count

    @property
    def failed(self) -> bool:
        return self.error_info.message is not None

    def __str__(self):
        outcome = f"failed={self.error_info.message!r}" if self.failed else f"row_count={self.row_count}"
        return (f"ExecutionLog("
                f"key={self.key[:12]}, "
                f"query={self.query!r}, params={self.params!r}, "
                f"return_mode={self.return_mode}, fetch_shape={self.fetch_shape}, {outcome})")
