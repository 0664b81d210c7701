import re

from ..utils import sql_code
from ..manager.exceptions import UsageError


TABLE_MARKER = re.compile(r"\{(\w+)\}")


def resolve_table_names(query: str, prefix: str) -> str:
    """
    Replace every ``{name}`` table marker in *query* with ``prefix + name``.

    Substitution happens everywhere in the text, before the statement cache
    key is computed, so the key always reflects the final SQL. The prefix is
    concatenated verbatim.

    Args:
        query (str): SQL template, e.g. ``"SELECT * FROM {sessions}"``.
        prefix (str): Table prefix, e.g. ``"chat_"``.

    Returns:
        str: The final SQL text, e.g. ``"SELECT * FROM chat_sessions"``.

    Raises:
        UsageError: If a ``{`` or ``}`` is left over outside quoted literals
            and comments, i.e. a marker is unbalanced or malformed.

    Examples:
        >>> resolve_table_names("INSERT INTO {sessions} (state) VALUES (?)", "chat_")
        'INSERT INTO chat_sessions (state) VALUES (?)'
    """
    resolved = TABLE_MARKER.sub(lambda m: prefix + m.group(1), query)
    # Only the template's own braces are checked; the prefix may contain anything.
    leftover = sql_code(TABLE_MARKER.sub("", query))
    if "{" in leftover or "}" in leftover:
        raise UsageError(f"Malformed table marker in query: {query!r}")
    return resolved
