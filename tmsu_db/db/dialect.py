"""
SQL dialect translation.

All statements in this package are written once, in SQLite syntax. Right
before a statement reaches a driver it is rewritten for the backend the
transaction is bound to:

    sqlite    identity
    mysql     numbered placeholders, INSERT OR IGNORE/REPLACE, '=='
    postgres  the MySQL rules' equivalents plus identifier quoting,
              ON CONFLICT upserts and DATETIME -> TIMESTAMP

The rewrite is textual and pattern based. It covers the fixed statement
set issued by the storage layer and the domain queries built on top of
it; it is not a SQL parser.
"""

from __future__ import annotations

import re
from typing import Dict, Mapping, Sequence, Tuple

from ..schema.tables import PRIMARY_KEYS


Rule = Tuple["re.Pattern[str]", object]


def _rule(pattern: str, replacement, flags: int = 0) -> Rule:
    return re.compile(pattern, flags), replacement


# ----------------------------------------------------------------------
# Base dialect
# ----------------------------------------------------------------------

class Dialect:
    """
    An ordered list of (pattern, replacement) rewrite rules.

    The SQLite dialect has no rules, so translation is the identity.
    """

    name = "sqlite"
    rules: Sequence[Rule] = ()

    def translate(self, statement: str) -> str:
        for pattern, replacement in self.rules:
            statement = pattern.sub(replacement, statement)
        return statement


class SQLiteDialect(Dialect):
    name = "sqlite"


# ----------------------------------------------------------------------
# MySQL
# ----------------------------------------------------------------------

class MySQLDialect(Dialect):
    name = "mysql"
    rules = (
        # numbered placeholders are not supported
        _rule(r"\?\d+", "?"),
        _rule(r"INSERT\s+OR\s+IGNORE\s+", "INSERT IGNORE "),
        _rule(r"INSERT\s+OR\s+REPLACE\s+", "REPLACE "),
        _rule(r"==", "="),
    )


# ----------------------------------------------------------------------
# PostgreSQL
# ----------------------------------------------------------------------

_PG_INSERT_IGNORE = re.compile(
    r"^(\s*)INSERT\s+OR\s+IGNORE\s+(INTO\b.*?)\s*;?\s*$", re.DOTALL
)
_PG_INSERT_REPLACE = re.compile(
    r"^(\s*)INSERT\s+OR\s+REPLACE\s+INTO\s+(\"?)(\w+)\2\s*\(([^)]*)\)(.*?)\s*;?\s*$",
    re.DOTALL,
)


class PostgresDialect(Dialect):
    """
    PostgreSQL has no INSERT OR IGNORE / INSERT OR REPLACE. Both become
    ``ON CONFLICT`` clauses; the replace form needs the conflict target,
    which is looked up in ``primary_keys`` by table name.
    """

    name = "postgres"
    rules = (
        _rule(r"\?\d+", "?"),
        _rule(r"`(\w+)`", r'"\1"'),
        _rule(r"==", "="),
        _rule(r"\bDATETIME\b", "TIMESTAMP"),
    )

    def __init__(self, primary_keys: Mapping[str, Sequence[str]] = PRIMARY_KEYS):
        self.primary_keys = primary_keys

    def translate(self, statement: str) -> str:
        statement = super().translate(statement)
        statement = _PG_INSERT_IGNORE.sub(r"\1INSERT \2 ON CONFLICT DO NOTHING", statement)
        return _PG_INSERT_REPLACE.sub(self._upsert, statement)

    def _upsert(self, match: "re.Match[str]") -> str:
        indent, quote, table, columns, rest = match.groups()
        keys = self.primary_keys.get(table)
        if not keys:
            raise ValueError(f"no conflict target known for table '{table}'")

        column_names = [c.strip().strip('"') for c in columns.split(",") if c.strip()]
        updates = [c for c in column_names if c not in keys]

        if updates:
            action = "DO UPDATE SET " + ", ".join(
                f"{c} = EXCLUDED.{c}" for c in updates
            )
        else:
            action = "DO NOTHING"

        return (
            f"{indent}INSERT INTO {quote}{table}{quote} ({columns}){rest} "
            f"ON CONFLICT ({', '.join(keys)}) {action}"
        )


# ----------------------------------------------------------------------
# Lookup
# ----------------------------------------------------------------------

DIALECTS: Dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "mysql": MySQLDialect(),
    "postgres": PostgresDialect(),
}


def get_dialect(kind: str) -> Dialect:
    """
    Return the dialect for a backend kind. Unknown kinds get the native
    (identity) dialect.
    """
    return DIALECTS.get(kind, DIALECTS["sqlite"])


def translate(kind: str, statement: str) -> str:
    return get_dialect(kind).translate(statement)


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "MySQLDialect",
    "PostgresDialect",
    "DIALECTS",
    "get_dialect",
    "translate",
]
