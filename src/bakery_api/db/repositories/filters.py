"""
bakery_api.db.repositories.filters

Query-building helpers shared by repositories.
"""

from __future__ import annotations

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """
    LIKE pattern matching `term` as a literal substring.

    `%` and `_` in user input are escaped so they never act as wildcards.
    """

    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
