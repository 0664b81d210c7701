from __future__ import annotations
from aiosqlite import connect, Connection as AioConnection
import sqlite3
from typing import Optional, Dict
from logging import Logger, getLogger as logging_getLogger

from .exceptions import ConnectionError
from ..config import Config


# SQLite names for the connection encodings accepted in Config.encoding.
SQLITE_ENCODINGS = {
    "utf8": "UTF-8",
    "utf-8": "UTF-8",
    "utf16": "UTF-16",
    "utf-16": "UTF-16",
    "utf16le": "UTF-16le",
    "utf-16le": "UTF-16le",
    "utf16be": "UTF-16be",
    "utf-16be": "UTF-16be",
}

# Connections opened with use_persistent_connection, shared process-wide by database path.
_persistent_connections: Dict[str, AioConnection] = {}


def sqlite_encoding(encoding: str) -> str:
    """Map a configured encoding name to the name SQLite's ``PRAGMA encoding`` accepts."""
    try:
        return SQLITE_ENCODINGS[encoding.strip().lower()]
    except KeyError:
        raise ConnectionError(f"Unsupported connection encoding: {encoding!r}") from None


async def close_persistent_connections() -> None:
    """Close every persistent connection. Intended as a process shutdown hook."""
    while _persistent_connections:
        _, conn = _persistent_connections.popitem()
        await conn.close()


class ConnectionManager:
    """
    Owns the single live connection built from a Config.

    The connection is opened lazily by the first ``get_connection()`` call and
    reused until ``close()``; after that the next call opens a fresh one.
    """

    def __init__(self, config: Config, logger: Optional[Logger] = None) -> None:
        self.config = config
        self.logger = logger or logging_getLogger(__name__)
        self._conn: Optional[AioConnection] = None

    @property
    def connected(self) -> bool:
        return self._conn is not None

    @property
    def persistent(self) -> bool:
        return self.config.use_persistent_connection

    async def get_connection(self) -> AioConnection:
        """Return the live connection, opening it on first use."""
        if self._conn is not None:
            if not self.persistent or _persistent_connections.get(self.config.database) is self._conn:
                return self._conn
            # close_persistent_connections() closed the shared connection under us.
            self.logger.info(f"Persistent connection to {self.config.database} was closed; reconnecting")
            self._conn = None

        if not self.config.database:
            raise ConnectionError("Database name is not set.")

        if self.persistent:
            conn = _persistent_connections.get(self.config.database)
            if conn is not None:
                self._conn = conn
                self.logger.debug(f"Reusing persistent connection to {self.config.database}")
                return conn

        # Validate before connecting so a bad setting leaves nothing open.
        encoding = sqlite_encoding(self.config.encoding) if self.config.force_encoding_on_connect else None

        try:
            conn = await connect(self.config.database, isolation_level=None)
        except (sqlite3.Error, OSError) as e:
            raise ConnectionError(f"Failed to connect to {self.config.database}: {e}") from e

        if encoding is not None:
            try:
                cursor = await conn.execute(f"PRAGMA encoding = '{encoding}'")
                await cursor.close()
            except sqlite3.Error as e:
                await conn.close()
                raise ConnectionError(f"Failed to set connection encoding {encoding}: {e}") from e

        if self.persistent:
            _persistent_connections[self.config.database] = conn
        self._conn = conn
        self.logger.info(f"Connected to {self.config.database}")
        return conn

    async def close(self) -> None:
        """Release the connection. Persistent connections stay open for the next manager."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        if self.persistent:
            self.logger.debug(f"Detached from persistent connection to {self.config.database}")
            return
        await conn.close()
        self.logger.info(f"Disconnected from {self.config.database}")

    disconnect = close
