from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ErrorInfo


class ChatDBError(Exception):
    """Base exception for the chat database layer."""
    pass

class ConnectionError(ChatDBError):
    """Raised when the database connection cannot be established."""
    pass

class PrepareError(ChatDBError):
    """Raised when a statement cannot be prepared."""
    pass

class ExecuteError(ChatDBError):
    """Raised when a statement fails to execute."""

    def __init__(self, message: str, error_info: Optional[ErrorInfo] = None) -> None:
        super().__init__(message)
        self.error_info = error_info

class UsageError(ChatDBError):
    """Raised for invalid query options or inconsistent bindings."""
    pass
