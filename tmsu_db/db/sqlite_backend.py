"""
SQLite backend: the embedded, file-backed store.

Used for every connection path without a scheme, typically
``<dir>/.tmsu/db``. Statements are native SQLite, so the dialect
translation is the identity and the driver's qmark paramstyle
(including numbered ``?NNN`` placeholders) is used as-is.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from .backend_base import DBBackend, count

if TYPE_CHECKING:
    from .connection import Transaction


class SQLiteBackend(DBBackend):
    """
    Minimal SQLite backend.

    Parameters
    ----------
    address : str
        Path to the SQLite database file. The file is created by
        ``connect()`` if it does not exist; callers that must not create
        a store check for the file first.
    """

    kind = "sqlite"
    paramstyle = "qmark"

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """
        Open a SQLite3 connection with dict-like rows and foreign keys
        enforced.

        isolation_level=None hands transaction control to begin() so that
        DDL runs inside the same explicit transaction as DML.
        """
        conn = sqlite3.connect(self.address, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def begin(self, raw_conn: sqlite3.Connection) -> None:
        raw_conn.execute("BEGIN")

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def table_exists(self, tx: "Transaction", name: str) -> bool:
        return count(
            tx,
            "SELECT COUNT(*) AS count FROM sqlite_master WHERE type = 'table' AND name = ?",
            name,
        ) > 0
