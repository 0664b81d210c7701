# tests/execution/test_fetch_types.py
import pytest
from ...execution.fetch_types import (
    ReturnMode,
    FetchShape,
    QueryOptions,
    normalize_return_mode,
    normalize_fetch_shape,
)
from ...manager.exceptions import UsageError


class TestNormalizeReturnMode:
    """Tests for normalize_return_mode."""

    @pytest.mark.parametrize("arg, expected", [
        (None, None),
        (ReturnMode.ONE, ReturnMode.ONE),
        ("one", ReturnMode.ONE),
        ("fetch_one", ReturnMode.ONE),
        ("FetchAll", ReturnMode.ALL),
        ("ALL", ReturnMode.ALL),
        ("return all rows", ReturnMode.ALL),
    ])
    def test_accepted_values(self, arg, expected):
        assert normalize_return_mode(arg) is expected

    @pytest.mark.parametrize("arg", ["many", "", 8, 16, FetchShape.ASSOC])
    def test_unknown_values_raise(self, arg):
        with pytest.raises(UsageError, match="return_mode"):
            normalize_return_mode(arg)


class TestNormalizeFetchShape:
    """Tests for normalize_fetch_shape."""

    def test_defaults_to_assoc(self):
        assert normalize_fetch_shape(None) is FetchShape.ASSOC

    @pytest.mark.parametrize("arg, expected", [
        ("assoc", FetchShape.ASSOC),
        ("num", FetchShape.NUMERIC),
        ("Numeric", FetchShape.NUMERIC),
        ("fetch_both", FetchShape.BOTH),
        (FetchShape.BOTH, FetchShape.BOTH),
    ])
    def test_accepted_values(self, arg, expected):
        assert normalize_fetch_shape(arg) is expected

    @pytest.mark.parametrize("arg", ["xyz", 1, ReturnMode.ONE])
    def test_unknown_values_raise(self, arg):
        with pytest.raises(UsageError, match="fetch_shape"):
            normalize_fetch_shape(arg)


class TestQueryOptions:
    """Tests for QueryOptions."""

    def test_defaults(self):
        opts = QueryOptions()
        assert opts.return_mode is None
        assert opts.fetch_shape is FetchShape.ASSOC
        assert opts.returns_rows is False

    def test_coerce_none(self):
        assert QueryOptions.coerce(None) == QueryOptions()

    def test_coerce_returns_same_instance(self):
        opts = QueryOptions("one", "both")
        assert QueryOptions.coerce(opts) is opts

    def test_coerce_mapping(self):
        opts = QueryOptions.coerce({"return_mode": "all", "fetch_shape": "numeric"})
        assert opts == QueryOptions(ReturnMode.ALL, FetchShape.NUMERIC)
        assert opts.returns_rows is True

    def test_coerce_legacy_keys(self):
        opts = QueryOptions.coerce({"return_rows": "one", "fetch_type": "both"})
        assert opts == QueryOptions(ReturnMode.ONE, FetchShape.BOTH)

    def test_unknown_key_rejected(self):
        with pytest.raises(UsageError, match="Unknown query option"):
            QueryOptions.coerce({"return_mode": "all", "limit": 5})

    def test_duplicate_key_rejected(self):
        with pytest.raises(UsageError, match="given twice"):
            QueryOptions.coerce({"return_mode": "all", "return_rows": "one"})

    def test_unknown_fetch_shape_rejected(self):
        with pytest.raises(UsageError):
            QueryOptions.coerce({"return_mode": "all", "fetch_shape": "xyz"})

    def test_invalid_type_rejected(self):
        with pytest.raises(UsageError, match="Invalid options type"):
            QueryOptions.coerce(["all"])

    def test_hashable_and_equal(self):
        assert hash(QueryOptions("one")) == hash(QueryOptions(ReturnMode.ONE, FetchShape.ASSOC))

    def test_to_string(self):
        assert ReturnMode.ONE.to_string() == "fetchone"
        assert ReturnMode.ALL.to_string() == "fetchall"
