"""
Row factory implementations for the three fetch shapes.

Each factory follows the sqlite3 ``row_factory`` signature ``(cursor, row)``
and is installed on the statement cursor before rows are fetched:

- ``dict_row_factory``: column name -> value (FetchShape.ASSOC)
- ``tuple_row_factory``: values by column position (FetchShape.NUMERIC)
- ``both_row_factory``: a BothRow answering names and positions (FetchShape.BOTH)
"""
from typing import Any, Callable, Iterator, Mapping, Tuple, Union
import sqlite3

from .fetch_types import FetchShape


def _column_names(cursor: sqlite3.Cursor) -> Tuple[str, ...]:
    return tuple(column[0] for column in cursor.description)


def dict_row_factory(cursor: sqlite3.Cursor, row: Tuple) -> dict:
    """
    Row factory that returns rows as dictionaries.

    Args:
        cursor: The SQLite cursor object.
        row: The raw row tuple from SQLite.

    Returns:
        A dictionary mapping column names to values. When two columns share a
        name, the rightmost one wins.

    Examples:
        >>> conn.row_factory = dict_row_factory
        >>> cursor = conn.execute("SELECT 1 as id, 'open' as state")
        >>> cursor.fetchone()
        {'id': 1, 'state': 'open'}
    """
    return dict(zip(_column_names(cursor), row))


def tuple_row_factory(cursor: sqlite3.Cursor, row: Tuple) -> tuple:
    """Row factory that returns rows as plain tuples indexed by column position."""
    return tuple(row)


class BothRow(Mapping):
    """
    Read-only row exposing each value under its column name and its position.

    ``row["state"]`` and ``row[1]`` return the same value. Iteration follows
    the keys the way an associative-and-numeric row lists them: for every
    column, its position followed by its name.
    """
    __slots__ = ("_names", "_values", "_index")

    def __init__(self, names: Tuple[str, ...], values: Tuple[Any, ...]) -> None:
        self._names = names
        self._values = values
        self._index = {name: i for i, name in enumerate(names)}

    def __getitem__(self, key: Union[str, int]) -> Any:
        if isinstance(key, bool):
            raise KeyError(key)
        if isinstance(key, int):
            if 0 <= key < len(self._values):
                return self._values[key]
            raise KeyError(key)
        return self._values[self._index[key]]

    def __iter__(self) -> Iterator[Union[str, int]]:
        for i, name in enumerate(self._names):
            yield i
            yield name

    def __len__(self) -> int:
        return len(self._values) * 2

    def __contains__(self, key: object) -> bool:
        if isinstance(key, bool):
            return False
        if isinstance(key, int):
            return 0 <= key < len(self._values)
        return key in self._index

    def keys_by_name(self) -> Tuple[str, ...]:
        return self._names

    def as_dict(self) -> dict:
        return dict(zip(self._names, self._values))

    def as_tuple(self) -> tuple:
        return self._values

    def __eq__(self, other) -> bool:
        if isinstance(other, BothRow):
            return self._names == other._names and self._values == other._values
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name!r}: {value!r}" for name, value in zip(self._names, self._values))
        return f"BothRow({{{pairs}}})"


def both_row_factory(cursor: sqlite3.Cursor, row: Tuple) -> BothRow:
    """Row factory that returns rows indexed by both column name and column position."""
    return BothRow(_column_names(cursor), tuple(row))


_ROW_FACTORIES = {
    FetchShape.ASSOC: dict_row_factory,
    FetchShape.NUMERIC: tuple_row_factory,
    FetchShape.BOTH: both_row_factory,
}


def row_factory_for(shape: FetchShape) -> Callable:
    """
    Return the row factory producing rows of the given fetch shape.

    Args:
        shape: A FetchShape member.

    Returns:
        A row factory function usable as ``cursor.row_factory``.
    """
    return _ROW_FACTORIES[shape]
