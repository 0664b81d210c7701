"""
Placeholder inspection and binding validation.

Queries use either unnamed positional placeholders (``?``) or named
placeholders (``:name``), never both. Bindings are checked against the
placeholders before the statement reaches the database, so an inconsistent
call fails with UsageError without any side effect.
"""
from __future__ import annotations
import re
from typing import Any, Mapping, NamedTuple, Tuple

from ..utils import sql_code, is_iterable
from ..manager.exceptions import UsageError
from ..manager.types import Bindings


# `::` is a cast in some dialects and never a placeholder.
_NAMED = re.compile(r"(?<![:\w]):([A-Za-z_]\w*)")
_POSITIONAL = re.compile(r"\?(\d*)")


class Placeholders(NamedTuple):
    positional: int
    names: Tuple[str, ...]

    @property
    def style(self) -> str:
        if self.positional and self.names:
            return "mixed"
        if self.names:
            return "named"
        if self.positional:
            return "positional"
        return "none"


def scan_placeholders(query: str) -> Placeholders:
    """
    Find the placeholders of *query*, ignoring quoted literals and comments.

    Returns:
        Placeholders: the number of ``?`` placeholders and the distinct
        ``:name`` placeholders in order of first appearance.
    """
    code = sql_code(query)
    names = []
    for match in _NAMED.finditer(code):
        if match.group(1) not in names:
            names.append(match.group(1))
    positional = 0
    for match in _POSITIONAL.finditer(code):
        # ?NNN binds index NNN; a bare ? takes the next index after the highest seen so far
        index = int(match.group(1)) if match.group(1) else positional + 1
        positional = max(positional, index)
    return Placeholders(positional, tuple(names))


def _strip_colon(key: str) -> str:
    return key[1:] if key.startswith(":") else key


def check_bindings(query: str, bindings: Bindings) -> Bindings:
    """
    Validate *bindings* against the placeholders of *query*.

    Args:
        query (str): Final SQL text.
        bindings: None, a sequence of values for ``?`` placeholders, or a
            mapping of names to values for ``:name`` placeholders.

    Returns:
        The bindings in the form the driver expects: a tuple for positional
        placeholders, a dict keyed by bare names for named ones, or an empty
        tuple when the query has none.

    Raises:
        UsageError: On mixed placeholder styles, positional and named bindings
            in the same call, a binding style that does not match the
            placeholders, a wrong value count or a missing named value.
    """
    found = scan_placeholders(query)
    if found.style == "mixed":
        raise UsageError("Query mixes positional '?' and named ':name' placeholders")

    if bindings is None:
        if found.style != "none":
            raise UsageError(f"Query expects {found.style} bindings but none were given")
        return ()

    if isinstance(bindings, Mapping):
        keys = list(bindings.keys())
        has_int = any(isinstance(k, int) for k in keys)
        has_str = any(isinstance(k, str) for k in keys)
        if has_int and has_str:
            raise UsageError("Positional and named bindings cannot be combined in one call")
        if has_int:
            # {0: a, 1: b} is an explicitly indexed positional sequence
            if sorted(keys) != list(range(len(keys))):
                raise UsageError(f"Positional binding indexes must be 0..{len(keys) - 1}")
            return check_bindings(query, [bindings[i] for i in range(len(keys))])
        if keys and not has_str:
            raise UsageError("Named binding keys must be strings")
        if found.style == "positional":
            raise UsageError("Named bindings given for a query with positional '?' placeholders")
        named = {_strip_colon(k): v for k, v in bindings.items()}
        missing = [name for name in found.names if name not in named]
        if missing:
            raise UsageError(f"Missing named bindings: {', '.join(missing)}")
        if found.style == "none" and named:
            raise UsageError("Bindings given for a query without placeholders")
        return named

    if not is_iterable(bindings):
        raise UsageError(f"Bindings must be a sequence or a mapping, got {type(bindings).__name__}")

    if isinstance(bindings, (set, frozenset)):
        raise UsageError("Positional bindings must be an ordered sequence")

    values: Tuple[Any, ...] = tuple(bindings)
    if any(isinstance(v, Mapping) for v in values):
        raise UsageError("Positional and named bindings cannot be combined in one call")
    if found.style == "named":
        raise UsageError("Positional bindings given for a query with named ':name' placeholders")
    if len(values) != found.positional:
        raise UsageError(
            f"Incorrect number of bindings: expected {found.positional}, got {len(values)}"
        )
    return values
