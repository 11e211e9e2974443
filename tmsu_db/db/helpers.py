"""
Shared DB helper utilities.

Every backend executes statements through this module:
    - safe_execute runs a write and reports the affected-row count
    - safe_fetch_all runs a read and returns the driver rows
    - failures surface as QueryError carrying the statement
    - to_format_paramstyle adapts '?' placeholders for pymysql/psycopg2

Cursors never outlive the call that opened them.

Backends import this module as `.helpers`
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Sequence

from ..errors import QueryError


# ----------------------------------------------------------------------
# Execution helpers
# ----------------------------------------------------------------------

def _run(cur: Any, query: str, params: Optional[Sequence]) -> None:
    try:
        cur.execute(query, tuple(params or ()))
    except Exception as e:
        raise QueryError(query, tuple(params or ()), e) from e


def safe_execute(conn: Any, query: str, params: Optional[Sequence] = None) -> int:
    """
    Execute a single SQL statement.
    Returns the number of rows it affected (``cursor.rowcount``).

    Parameters
    ----------
    conn:
        DB-API compatible connection object (sqlite3, pymysql, psycopg2).
    query:
        SQL string with placeholders in the driver's paramstyle.
    params:
        Optional parameter sequence.

    Raises
    ------
    QueryError
        Wrapped execution error with context.
    """
    cur = conn.cursor()
    try:
        _run(cur, query, params)
        return cur.rowcount
    finally:
        cur.close()


def safe_fetch_all(conn: Any, query: str, params: Optional[Sequence] = None):
    """
    Execute a SELECT query and fetch all rows.

    Returns
    -------
    list
        List of backend-specific row records (e.g., sqlite3.Row).
    """
    cur = conn.cursor()
    try:
        _run(cur, query, params)
        return cur.fetchall()
    finally:
        cur.close()


# ----------------------------------------------------------------------
# Paramstyle
# ----------------------------------------------------------------------

# quoted literals and identifiers are matched whole so that a '?' inside
# them is left alone
_FORMAT_TOKENS = re.compile(
    r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|`[^`]*`|[?%]"""
)


def _format_token(match: "re.Match[str]") -> str:
    token = match.group(0)
    if token == "?":
        return "%s"
    # the driver %-formats the whole statement, literals included
    return token.replace("%", "%%")


def to_format_paramstyle(query: str) -> str:
    """
    Convert qmark placeholders to format placeholders.

    pymysql and psycopg2 both expect '%s'; literal percent signs must
    then be doubled. A '?' inside a quoted literal is not a placeholder.

    Example:
        "SELECT * FROM tag WHERE name LIKE '%a?' AND id = ?"
        -> "SELECT * FROM tag WHERE name LIKE '%%a?' AND id = %s"
    """
    return _FORMAT_TOKENS.sub(_format_token, query)


# ----------------------------------------------------------------------
# Row mapping
# ----------------------------------------------------------------------

def row_to_dict(row: Mapping[str, Any]) -> dict:
    """
    Copy a mapping row (sqlite3.Row, a pymysql DictCursor row or a
    psycopg2 RealDictRow) into a plain dict keyed by column name.
    """
    return {k: row[k] for k in row.keys()}


__all__ = [
    "safe_execute",
    "safe_fetch_all",
    "to_format_paramstyle",
    "row_to_dict",
]
