"""
Core façade for the TMSU storage layer.

Every entry point runs the same connect sequence:

    resolve path -> open connection -> begin -> ensure schema -> commit

``create_at`` runs it against a store that may not exist yet and closes
the connection again. ``open_at`` refuses local paths that do not exist
and hands the open Database back to the caller:

    with open_at("/home/me/.tmsu/db") as db:
        with db.begin() as tx:
            rows = tx.query("SELECT name FROM tag WHERE id == ?1", 3)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from .db.connection import DBConnection, Transaction
from .db.migrations import MigrationManager
from .db.registry import BackendRegistry, open_connection
from .errors import DatabaseAccessError, DatabaseNotFoundError
from .utils.paths import has_scheme

logger = logging.getLogger(__name__)


class Database:
    """
    An open, schema-current store.

    Owns its connection; close() (or leaving a ``with`` block) releases
    it together with any transaction still open.
    """

    def __init__(self, connection: DBConnection):
        self.connection = connection

    @property
    def path(self) -> str:
        return self.connection.path

    @property
    def kind(self) -> str:
        return self.connection.kind

    def begin(self) -> Transaction:
        return self.connection.begin()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"Database({self.path!r}, kind={self.kind!r})"


# ---------------------------------------------------------------------------
# Connect sequence
# ---------------------------------------------------------------------------

def _connect(
    path: str,
    registry: Optional[BackendRegistry],
    migrations: Optional[MigrationManager],
) -> DBConnection:
    conn = open_connection(path, registry)
    try:
        with conn.begin() as tx:
            (migrations or MigrationManager()).ensure_schema(tx)
    except BaseException:
        conn.close()
        raise
    return conn


def create_at(
    path: str,
    registry: Optional[BackendRegistry] = None,
    migrations: Optional[MigrationManager] = None,
) -> None:
    """
    Create (or bring current) the store at ``path``.

    For local paths the containing directory must already exist.

    Raises
    ------
    DatabaseAccessError, DatabaseTransactionError, MigrationError
    """
    logger.info("creating database at '%s'", path)
    _connect(path, registry, migrations).close()


def open_at(
    path: str,
    registry: Optional[BackendRegistry] = None,
    migrations: Optional[MigrationManager] = None,
) -> Database:
    """
    Open an existing store, upgrading its schema if it is stale.

    Raises
    ------
    DatabaseNotFoundError
        ``path`` is a local path and nothing exists there.
    DatabaseAccessError, DatabaseTransactionError, MigrationError
    """
    logger.info("opening database at '%s'", path)

    if not has_scheme(path):
        try:
            os.stat(path)
        except FileNotFoundError as e:
            raise DatabaseNotFoundError(path) from e
        except OSError as e:
            raise DatabaseAccessError(path, e) from e

    return Database(_connect(path, registry, migrations))


__all__ = [
    "Database",
    "create_at",
    "open_at",
]
