import re
from typing import Iterable, Iterator, Tuple


# Quoted literals and comments, in which markers and placeholders are not interpreted.
_SQL_OPAQUE = re.compile(
    r"""
    '(?:[^']|'')*'?        # single-quoted string
    | "(?:[^"]|"")*"?      # double-quoted identifier
    | `(?:[^`]|``)*`?      # backtick identifier
    | \[[^\]]*\]?          # bracketed identifier
    | --[^\n]*             # line comment
    | /\*.*?(?:\*/|$)      # block comment
    """,
    re.VERBOSE | re.DOTALL,
)


def is_iterable(obj) -> bool:
    """
    Check if the object is iterable (excluding strings and bytes).

    Args:
        obj: The object to check.

    Returns:
        bool: True if the object is iterable, False otherwise.
    """
    return isinstance(obj, Iterable) and not isinstance(obj, (str, bytes))

def no_underscore_or_space(s: str) -> str:
    """
    Replaces underscores and spaces in a string with an empty string.

    Args:
        s (str): The input string.

    Returns:
        str: The modified string with underscores and spaces removed.
    """
    return s.replace("_", "").replace(" ", "")


def iter_sql_segments(sql: str) -> Iterator[Tuple[bool, str]]:
    """
    Split SQL text into alternating code and opaque segments.

    Yields ``(is_opaque, text)`` pairs, where opaque segments are quoted
    literals, quoted identifiers and comments. Joining every ``text`` gives
    back the original string.

    Args:
        sql (str): The SQL text to scan.

    Yields:
        Tuple[bool, str]: Whether the segment is opaque, and the segment text.
    """
    pos = 0
    for match in _SQL_OPAQUE.finditer(sql):
        if match.start() > pos:
            yield False, sql[pos:match.start()]
        yield True, match.group(0)
        pos = match.end()
    if pos < len(sql):
        yield False, sql[pos:]


def sql_code(sql: str) -> str:
    """Return only the code segments of *sql*, with literals and comments replaced by a space."""
    return "".join(" " if opaque else text for opaque, text in iter_sql_segments(sql))
