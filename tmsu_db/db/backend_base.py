"""
Backend base interfaces for the TMSU storage layer.

This module defines the minimal contracts that all database backends
(SQLite, MySQL, Postgres) must satisfy.

It does NOT depend on any specific DB driver. It only encodes the
structural requirements assumed by:
      * tmsu_db.db.connection.DBConnection / Transaction
      * tmsu_db.db.registry.BackendRegistry
      * tmsu_db.schema

Backends must expose:

    backend.kind        -> dialect / backend kind ("sqlite", "mysql", ...)
    backend.paramstyle  -> "qmark" or "format"
    backend.helpers     -> module with safe_execute, safe_fetch_all, row_to_dict
    backend.connect()   -> raw DB-API connection
    backend.begin(raw)  -> start a transaction on a raw connection
    backend.table_exists(tx, name)
    backend.index_exists(tx, table, name)

This file provides:
- DBBackend: abstract base class
- BackendLike: structural protocol
- ensure_backend: runtime validator
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from . import helpers

if TYPE_CHECKING:
    from .connection import Transaction


# ---------------------------------------------------------------------------
# Abstract Base Backend
# ---------------------------------------------------------------------------

class DBBackend(ABC):
    """
    Abstract base class for a storage backend.

    Concrete subclasses take the backend-specific address (file path or
    DSN remainder) as their only constructor argument.
    """

    kind: str = "sqlite"
    paramstyle: str = "qmark"
    supports_index_if_not_exists: bool = True

    def __init__(self, address: str):
        self.address = address

    @property
    def helpers(self) -> Any:
        """
        Return the helper module associated with this backend.

        Normally this is tmsu_db.db.helpers, but test backends may
        provide compatible modules.
        """
        return helpers

    @abstractmethod
    def connect(self) -> Any:
        """
        Acquire and return a new raw DB-API 2.0 connection.
        """
        raise NotImplementedError

    def begin(self, raw_conn: Any) -> None:
        """
        Start a transaction on ``raw_conn``.

        Default: nothing, for drivers that open a transaction implicitly
        on the first statement.
        """
        return None

    def prepare(self, query: str) -> str:
        """Convert a translated statement to the driver's paramstyle."""
        if self.paramstyle == "format":
            return helpers.to_format_paramstyle(query)
        return query

    @abstractmethod
    def table_exists(self, tx: "Transaction", name: str) -> bool:
        raise NotImplementedError

    def index_exists(self, tx: "Transaction", table: str, name: str) -> bool:
        """
        Only consulted when supports_index_if_not_exists is False.
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address!r})"


def count(tx: "Transaction", query: str, *args: Any) -> int:
    """Run a ``SELECT COUNT(*) AS count ...`` statement."""
    row = tx.query_one(query, *args)
    if row is None:
        return 0
    return int(row["count"])


# ---------------------------------------------------------------------------
# Structural Protocol
# ---------------------------------------------------------------------------

@runtime_checkable
class BackendLike(Protocol):
    """
    Structural protocol for objects usable as a storage backend.

    Lets tests register lightweight fakes without subclassing DBBackend.
    """

    kind: str
    paramstyle: str
    supports_index_if_not_exists: bool
    helpers: Any

    def connect(self) -> Any:
        ...

    def begin(self, raw_conn: Any) -> None:
        ...

    def prepare(self, query: str) -> str:
        ...

    def table_exists(self, tx: Any, name: str) -> bool:
        ...

    def index_exists(self, tx: Any, table: str, name: str) -> bool:
        ...


# ---------------------------------------------------------------------------
# Runtime Guard
# ---------------------------------------------------------------------------

_REQUIRED = ("kind", "paramstyle", "helpers", "connect", "begin", "prepare", "table_exists")


def ensure_backend(backend: Any) -> BackendLike:
    """
    Check a registry factory result before a DBConnection is built on it.

    Raises TypeError naming every attribute in _REQUIRED that the object
    lacks.
    """
    if not isinstance(backend, BackendLike):
        missing = [name for name in _REQUIRED if not hasattr(backend, name)]
        if missing:
            raise TypeError(
                f"Invalid storage backend {backend!r}: missing attributes {missing}"
            )

    return backend  # type: ignore[return-value]


__all__ = [
    "DBBackend",
    "BackendLike",
    "ensure_backend",
    "count",
]
