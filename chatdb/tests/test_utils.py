# tests/test_utils.py
from ..utils import is_iterable, no_underscore_or_space, iter_sql_segments, sql_code
from ..log import Unknown, NOT_EXECUTED, is_unknown, ExecutionLog
from ..manager.types import ErrorInfo, NO_ERROR


class TestSqlScanning:
    """Tests for iter_sql_segments and sql_code."""

    def test_segments_rebuild_original(self):
        sql = "SELECT 'a''b', \"c\" FROM t -- note\nWHERE x = ? /* block */"
        assert "".join(text for _, text in iter_sql_segments(sql)) == sql

    def test_opaque_segments(self):
        segments = list(iter_sql_segments("SELECT 'x' FROM t"))
        assert segments == [(False, "SELECT "), (True, "'x'"), (False, " FROM t")]

    def test_escaped_quote_stays_in_literal(self):
        assert sql_code("SELECT 'it''s ?' , ?") == "SELECT   , ?"

    def test_unterminated_literal_runs_to_end(self):
        assert sql_code("SELECT 'open") == "SELECT  "

    def test_comments_removed(self):
        assert sql_code("a -- ?\nb /* :x */ c") == "a  \nb   c"


def test_is_iterable():
    assert is_iterable([1]) is True
    assert is_iterable((1,)) is True
    assert is_iterable("abc") is False
    assert is_iterable(b"abc") is False
    assert is_iterable(5) is False


def test_no_underscore_or_space():
    assert no_underscore_or_space("fetch_one all") == "fetchoneall"


class TestUnknown:
    """Tests for the Unknown marker."""

    def test_not_executed_marker(self):
        assert is_unknown(NOT_EXECUTED)
        assert not NOT_EXECUTED
        assert NOT_EXECUTED == Unknown("NotExecuted")
        assert str(NOT_EXECUTED) == "Unknown(NotExecuted)"


class TestExecutionLog:
    """Tests for the last-execution record."""

    def test_successful_run(self):
        record = ExecutionLog("ab" * 32, "SELECT ?", (1,), "fetchall", "assoc", NO_ERROR, 3)
        assert record.failed is False
        assert str(record) == (
            "ExecutionLog(key=abababababab, query='SELECT ?', params=(1,), "
            "return_mode=fetchall, fetch_shape=assoc, row_count=3)"
        )

    def test_failed_run(self):
        info = ErrorInfo("HY000", 1, "no such table: chat_sessions")
        record = ExecutionLog("cd" * 32, "SELECT * FROM chat_sessions", (), None, "assoc", info)
        assert record.failed is True
        assert is_unknown(record.row_count)
        assert "failed='no such table: chat_sessions'" in str(record)
