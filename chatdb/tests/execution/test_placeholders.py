# tests/execution/test_placeholders.py
import pytest
from ...execution.placeholders import scan_placeholders, check_bindings, Placeholders
from ...manager.exceptions import UsageError


class TestScanPlaceholders:
    """Tests for scan_placeholders."""

    def test_positional(self):
        assert scan_placeholders("SELECT * FROM t WHERE a = ? AND b = ?") == Placeholders(2, ())

    def test_named_in_order_of_appearance(self):
        found = scan_placeholders("SELECT * FROM t WHERE a = :b AND c = :a OR d = :b")
        assert found.names == ("b", "a")
        assert found.style == "named"

    def test_numbered_positional(self):
        assert scan_placeholders("SELECT ?2, ?1").positional == 2

    @pytest.mark.parametrize("query, expected", [
        ("SELECT ?1, ?", 2),
        ("SELECT ?, ?1", 1),
        ("SELECT ?3, ?", 4),
        ("SELECT ?, ?5, ?", 6),
    ])
    def test_bare_after_numbered(self, query, expected):
        assert scan_placeholders(query).positional == expected

    def test_ignores_literals_and_comments(self):
        found = scan_placeholders("SELECT '?', ':x', \"a?\" FROM t -- ?\n WHERE a = ? /* :y */")
        assert found == Placeholders(1, ())

    def test_ignores_double_colon_cast(self):
        assert scan_placeholders("SELECT a::text FROM t").style == "none"

    def test_mixed_style(self):
        assert scan_placeholders("SELECT ? , :a").style == "mixed"


class TestCheckBindings:
    """Tests for check_bindings."""

    def test_positional_sequence(self):
        assert check_bindings("INSERT INTO t VALUES (?, ?)", ["open", 1]) == ("open", 1)

    def test_named_mapping(self):
        assert check_bindings("SELECT * FROM t WHERE s = :state", {"state": "open"}) == {"state": "open"}

    def test_named_mapping_accepts_colon_keys(self):
        assert check_bindings("SELECT * FROM t WHERE s = :state", {":state": "open"}) == {"state": "open"}

    def test_no_placeholders_no_bindings(self):
        assert check_bindings("SELECT 1", None) == ()
        assert check_bindings("SELECT 1", []) == ()

    def test_int_keyed_mapping_is_positional(self):
        assert check_bindings("SELECT ?, ?", {0: "a", 1: "b"}) == ("a", "b")

    def test_mixed_keys_rejected(self):
        """Positional and named bindings in the same call."""
        with pytest.raises(UsageError, match="cannot be combined"):
            check_bindings("SELECT * FROM t WHERE s = :state", {0: "x", "state": "open"})

    def test_sequence_containing_mapping_rejected(self):
        with pytest.raises(UsageError, match="cannot be combined"):
            check_bindings("SELECT ?", ["x", {"state": "open"}])

    def test_mixed_placeholders_rejected(self):
        with pytest.raises(UsageError, match="mixes"):
            check_bindings("SELECT ? , :a", ["x"])

    def test_sequence_for_named_placeholders_rejected(self):
        with pytest.raises(UsageError):
            check_bindings("SELECT * FROM t WHERE s = :state", ["open"])

    def test_mapping_for_positional_placeholders_rejected(self):
        with pytest.raises(UsageError):
            check_bindings("SELECT * FROM t WHERE s = ?", {"state": "open"})

    def test_wrong_count_rejected(self):
        with pytest.raises(UsageError, match="expected 2, got 1"):
            check_bindings("SELECT ?, ?", ["x"])

    def test_wrong_count_for_bare_after_numbered_rejected(self):
        with pytest.raises(UsageError, match="expected 2, got 1"):
            check_bindings("SELECT ?1, ?", ["open"])
        assert check_bindings("SELECT ?1, ?", ["open", 1]) == ("open", 1)

    def test_missing_named_value_rejected(self):
        with pytest.raises(UsageError, match="Missing named bindings: id"):
            check_bindings("UPDATE t SET s = :state WHERE id = :id", {"state": "closed"})

    def test_bindings_without_placeholders_rejected(self):
        with pytest.raises(UsageError):
            check_bindings("SELECT 1", {"a": 1})

    def test_missing_bindings_rejected(self):
        with pytest.raises(UsageError):
            check_bindings("SELECT ?", None)

    @pytest.mark.parametrize("bindings", ["open", b"open", 5, {"a", "b"}])
    def test_non_sequence_rejected(self, bindings):
        with pytest.raises(UsageError):
            check_bindings("SELECT ?, ?, ?, ?", bindings)
