"""Connection settings for the chat database, loaded once at startup."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Optional

from dotenv import load_dotenv

TRUTHY_STRINGS = ('1', 'true', 'yes', 'on')
FALSY_STRINGS = ('0', 'false', 'no', 'off', '')


def parse_bool(value: str, name: str = "value") -> bool:
    """Parse an environment flag; raise ValueError on anything unrecognized."""

    normalized = value.strip().lower()
    if normalized in TRUTHY_STRINGS:
        return True
    if normalized in FALSY_STRINGS:
        return False
    raise ValueError(f"Invalid boolean for {name}: {value!r}")


@dataclass(frozen=True)
class Config:
    host: str = "localhost"
    user: str = ""
    password: str = ""
    database: str = ""
    encoding: str = "utf8"
    table_prefix: str = ""
    force_encoding_on_connect: bool = True
    use_persistent_connection: bool = False
    throw_on_error: bool = False

    def with_overrides(self, **changes: Any) -> Config:
        """Return a copy with *changes* applied; the original stays untouched."""

        return replace(self, **changes)

    def masked(self) -> dict[str, Any]:
        """Settings as a dict with the password hidden, suitable for logging."""

        return {
            "host": self.host,
            "user": self.user,
            "password": "***" if self.password else "",
            "database": self.database,
            "encoding": self.encoding,
            "table_prefix": self.table_prefix,
            "force_encoding_on_connect": self.force_encoding_on_connect,
            "use_persistent_connection": self.use_persistent_connection,
            "throw_on_error": self.throw_on_error,
        }

    @classmethod
    def from_env(cls, prefix: str = "CHATDB_", dotenv_path: Optional[str] = None) -> Config:
        """Build settings from ``<prefix>*`` environment variables (after loading ``.env``)."""

        load_dotenv(dotenv_path)
        defaults = cls()

        def text(name: str, default: str) -> str:
            value = os.getenv(prefix + name)
            return default if value is None else value

        def flag(name: str, default: bool) -> bool:
            value = os.getenv(prefix + name)
            return default if value is None else parse_bool(value, prefix + name)

        return cls(
            host=text("HOST", defaults.host),
            user=text("USER", defaults.user),
            password=text("PASSWORD", defaults.password),
            database=text("NAME", defaults.database),
            encoding=text("ENCODING", defaults.encoding),
            table_prefix=text("TABLE_PREFIX", defaults.table_prefix),
            force_encoding_on_connect=flag("FORCE_ENCODING", defaults.force_encoding_on_connect),
            use_persistent_connection=flag("PERSISTENT", defaults.use_persistent_connection),
            throw_on_error=flag("THROW_ON_ERROR", defaults.throw_on_error),
        )
