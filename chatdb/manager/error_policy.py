from __future__ import annotations
from typing import Optional, NoReturn
from logging import Logger, getLogger as logging_getLogger

from .exceptions import ChatDBError


class ErrorPolicy:
    """
    Decides what happens to a failure raised by the data-access layer.

    In throwing mode the typed error is re-raised to the caller. In
    terminating mode (the default) the error is reported and the process
    exits with a non-zero status.
    """

    def __init__(self, throw_on_error: bool = False, logger: Optional[Logger] = None) -> None:
        self.throw_on_error = throw_on_error
        self.logger = logger or logging_getLogger(__name__)

    def handle(self, error: ChatDBError) -> NoReturn:
        if self.throw_on_error:
            raise error
        self.terminate(error)

    def terminate(self, error: ChatDBError) -> NoReturn:
        """Report *error* and halt the process."""
        message = str(error)
        self.logger.critical(f"{type(error).__name__}: {message}")
        # SystemExit with a message prints it on stderr and exits with status 1.
        raise SystemExit(message) from error

    def __repr__(self) -> str:
        mode = "throw" if self.throw_on_error else "terminate"
        return f"ErrorPolicy(mode={mode})"
