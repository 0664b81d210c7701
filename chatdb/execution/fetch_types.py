from __future__ import annotations
from enum import Enum
from typing import Any, Mapping, Optional, Union
from ..utils import no_underscore_or_space
from ..manager.exceptions import UsageError



# === Enumerants ===

class ReturnMode(Enum):
    """How many rows a query hands back: one row or every matching row."""
    ONE = "one"
    ALL = "all"

    def to_string(self) -> str: return f"fetch{self.value}"


class FetchShape(Enum):
    """Indexing style of the returned rows."""
    ASSOC = "assoc"
    NUMERIC = "numeric"
    BOTH = "both"


_RETURN_MODE_ALIASES = {
    "one": ReturnMode.ONE,
    "fetchone": ReturnMode.ONE,
    "returnonerow": ReturnMode.ONE,
    "all": ReturnMode.ALL,
    "fetchall": ReturnMode.ALL,
    "returnallrows": ReturnMode.ALL,
}

_FETCH_SHAPE_ALIASES = {
    "assoc": FetchShape.ASSOC,
    "fetchassoc": FetchShape.ASSOC,
    "dict": FetchShape.ASSOC,
    "num": FetchShape.NUMERIC,
    "numeric": FetchShape.NUMERIC,
    "fetchnum": FetchShape.NUMERIC,
    "tuple": FetchShape.NUMERIC,
    "both": FetchShape.BOTH,
    "fetchboth": FetchShape.BOTH,
}

# Legacy option names are accepted next to the current ones.
_OPTION_KEYS = {
    "return_mode": "return_mode",
    "return_rows": "return_mode",
    "fetch_shape": "fetch_shape",
    "fetch_type": "fetch_shape",
}


# === Normalizers ===

def normalize_return_mode(arg: Optional[Union[str, ReturnMode]]) -> Optional[ReturnMode]:
    """
    Normalizes a return mode specifier.
    Args:
        arg (Optional[Union[str, ReturnMode]]): None, a ReturnMode member, or one of
            "one", "fetchone", "all", "fetchall" (case, underscores and spaces ignored).
    Returns:
        Optional[ReturnMode]: The return mode, or None when no rows are requested.
    Raises:
        UsageError: If the value is not a recognized return mode.
    """
    if arg is None or isinstance(arg, ReturnMode):
        return arg
    if isinstance(arg, str):
        mode = _RETURN_MODE_ALIASES.get(no_underscore_or_space(arg).lower())
        if mode is not None:
            return mode
    raise UsageError(f"Unknown 'return_mode' value: {arg!r}")


def normalize_fetch_shape(arg: Optional[Union[str, FetchShape]]) -> FetchShape:
    """
    Normalizes a fetch shape specifier, defaulting to FetchShape.ASSOC.
    Raises:
        UsageError: If the value is not a recognized fetch shape.
    """
    if arg is None:
        return FetchShape.ASSOC
    if isinstance(arg, FetchShape):
        return arg
    if isinstance(arg, str):
        shape = _FETCH_SHAPE_ALIASES.get(no_underscore_or_space(arg).lower())
        if shape is not None:
            return shape
    raise UsageError(f"Unknown 'fetch_shape' value: {arg!r}")


# === Options ===

class QueryOptions:
    """
    Call-level options of a query.

    Both fields are validated on construction, so an unknown value is
    rejected before the query reaches the database.
    """
    __slots__ = ("_return_mode", "_fetch_shape")

    def __init__(
        self,
        return_mode: Optional[Union[str, ReturnMode]] = None,
        fetch_shape: Optional[Union[str, FetchShape]] = None,
    ) -> None:
        self._return_mode = normalize_return_mode(return_mode)
        self._fetch_shape = normalize_fetch_shape(fetch_shape)

    @property
    def return_mode(self) -> Optional[ReturnMode]:
        return self._return_mode

    @property
    def fetch_shape(self) -> FetchShape:
        return self._fetch_shape

    @property
    def returns_rows(self) -> bool:
        return self._return_mode is not None

    @classmethod
    def coerce(cls, options: Any) -> QueryOptions:
        """
        Builds QueryOptions from None, a QueryOptions instance or a mapping.
        Args:
            options: None, QueryOptions, or a mapping with the keys "return_mode"
                and/or "fetch_shape" ("return_rows" and "fetch_type" are accepted as aliases).
        Returns:
            QueryOptions: The validated options.
        Raises:
            UsageError: On unknown keys, unknown values or an unsupported options type.
        """
        if options is None:
            return cls()
        if isinstance(options, QueryOptions):
            return options
        if isinstance(options, Mapping):
            kwargs = {}
            for key, value in options.items():
                name = _OPTION_KEYS.get(key) if isinstance(key, str) else None
                if name is None:
                    raise UsageError(f"Unknown query option: {key!r}")
                if name in kwargs:
                    raise UsageError(f"Query option given twice: {name!r}")
                kwargs[name] = value
            return cls(**kwargs)
        raise UsageError(f"Invalid options type: {type(options).__name__}")

    def __repr__(self):
        return f"QueryOptions(return_mode={self._return_mode}, fetch_shape={self._fetch_shape})"
    def __eq__(self, value):
        return (isinstance(value, QueryOptions) and self._return_mode == value._return_mode
                and self._fetch_shape == value._fetch_shape)
    def __hash__(self): return hash((self._return_mode, self._fetch_shape))
