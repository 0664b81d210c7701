# tests/conftest.py
import pytest
from ..config import Config


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "chat.db")


@pytest.fixture
def config(db_path):
    """Throwing-mode configuration against a fresh database file."""
    return Config(database=db_path, table_prefix="chat_", throw_on_error=True)


SESSIONS_DDL = (
    "CREATE TABLE {sessions} ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, "
    "state TEXT NOT NULL, "
    "operator TEXT)"
)
