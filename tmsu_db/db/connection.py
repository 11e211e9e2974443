"""
Connection and transaction wrappers.

This file defines:
- DBConnection: a live database handle bound to one backend
- Transaction: the single active unit of work on a DBConnection

Every statement issued through a Transaction is:

    1. translated for the backend kind recorded when the connection was
       opened (tmsu_db.db.dialect)
    2. converted to the driver's paramstyle (backend.prepare)
    3. executed through the backend's helper module

Only one transaction may be active per connection. Both classes are
context managers:

    with open_connection(path) as conn:
        with conn.begin() as tx:
            tx.execute("INSERT OR IGNORE INTO tag (id, name) VALUES (?1, ?2)", 1, "music")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..errors import DatabaseTransactionError, StorageError, TransactionStateError
from .backend_base import BackendLike
from .dialect import translate

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Transaction
# ----------------------------------------------------------------------

class Transaction:
    """
    The active transaction of a DBConnection.

    Notes:
        - Leaving a ``with`` block normally commits; leaving it with an
          exception rolls back and re-raises.
        - After commit() or rollback() the object is spent.
    """

    def __init__(self, connection: "DBConnection"):
        self.connection = connection
        self.backend = connection.backend
        self.kind = connection.kind
        self.active = True

    # ------------------------------------------------------------------
    # SQL execution
    # ------------------------------------------------------------------

    def _prepare(self, query: str) -> str:
        if not self.active:
            raise TransactionStateError("transaction is no longer active")

        query = self.backend.prepare(translate(self.kind, query))
        logger.debug(query)
        return query

    def execute(self, query: str, *args: Any) -> int:
        """
        Execute a single statement and return the number of rows it
        affected.
        """
        query = self._prepare(query)
        logger.debug("params: %r", args)
        return self.backend.helpers.safe_execute(self.connection.raw, query, args)

    def query(self, query: str, *args: Any) -> List[Dict[str, Any]]:
        """
        Execute a SELECT statement and return a list of dict rows.
        """
        query = self._prepare(query)
        logger.debug("params: %r", args)
        helpers = self.backend.helpers
        rows = helpers.safe_fetch_all(self.connection.raw, query, args)
        return [helpers.row_to_dict(r) for r in rows]

    def query_one(self, query: str, *args: Any) -> Optional[Dict[str, Any]]:
        """
        Execute a SELECT statement and return the first row or None.
        """
        rows = self.query(query, *args)
        return rows[0] if rows else None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def commit(self) -> None:
        if not self.active:
            raise TransactionStateError("transaction is no longer active")

        logger.info("committing transaction")
        try:
            self.connection.raw.commit()
        except Exception as e:
            raise DatabaseTransactionError(self.connection.path, e) from e
        finally:
            self._finish()

    def rollback(self) -> None:
        if not self.active:
            raise TransactionStateError("transaction is no longer active")

        logger.info("rolling back transaction")
        try:
            self.connection.raw.rollback()
        except Exception as e:
            raise DatabaseTransactionError(self.connection.path, e) from e
        finally:
            self._finish()

    def _finish(self) -> None:
        self.active = False
        self.connection._release(self)

    def __enter__(self) -> "Transaction":
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.active:
            return False

        if exc_type is None:
            self.commit()
            return False

        try:
            self.rollback()
        except StorageError:
            logger.exception("rollback failed while handling %s", exc_type.__name__)

        return False


# ----------------------------------------------------------------------
# Connection
# ----------------------------------------------------------------------

class DBConnection:
    """
    Thin wrapper around a raw DB-API 2.0 connection.

    Attributes
    ----------
    raw:
        The driver connection.
    backend:
        Backend that opened ``raw``; decides dialect and paramstyle.
    path:
        Connection path as supplied by the caller (for error messages).

    Safe to close() multiple times.
    """

    def __init__(self, raw_conn: Any, backend: BackendLike, path: str):
        self.raw = raw_conn
        self.backend = backend
        self.path = path
        self.closed = False
        self._tx: Optional[Transaction] = None

    @property
    def kind(self) -> str:
        return self.backend.kind

    @property
    def in_transaction(self) -> bool:
        return self._tx is not None

    def begin(self) -> Transaction:
        """
        Start the connection's transaction.

        Raises
        ------
        TransactionStateError
            A transaction is already active, or the connection is closed.
        DatabaseTransactionError
            The engine refused to start a transaction.
        """
        if self.closed:
            raise TransactionStateError(f"connection to '{self.path}' is closed")
        if self._tx is not None:
            raise TransactionStateError(
                f"a transaction is already active on '{self.path}'"
            )

        logger.info("beginning transaction")
        try:
            self.backend.begin(self.raw)
        except Exception as e:
            raise DatabaseTransactionError(self.path, e) from e

        self._tx = Transaction(self)
        return self._tx

    def _release(self, tx: Transaction) -> None:
        if self._tx is tx:
            self._tx = None

    def close(self) -> None:
        """
        Roll back any open transaction and close the underlying
        connection.
        """
        if self.closed:
            return

        if self._tx is not None:
            try:
                self._tx.rollback()
            except StorageError:
                logger.exception("rollback on close failed for '%s'", self.path)

        self.closed = True
        try:
            self.raw.close()
        except Exception:
            logger.warning("error closing database '%s'", self.path, exc_info=True)

    def __enter__(self) -> "DBConnection":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


__all__ = [
    "DBConnection",
    "Transaction",
]
