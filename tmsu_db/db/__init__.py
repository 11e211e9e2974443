"""
tmsu_db.db

Database backend abstraction layer.

This package provides:

- Connection and transaction wrappers:
      * DBConnection
      * Transaction

- The connection factory and explicit backend registry:
      * BackendRegistry
      * default_registry
      * open_connection

- Concrete database backend implementations:
      * SQLiteBackend   (embedded store, ``.tmsu/db``)
      * MySQLBackend    (``mysql://`` paths, PyMySQL)
      * PostgresBackend (``postgres://`` paths, psycopg2)

- SQL dialect translation:
      * translate
      * get_dialect

- Schema migration:
      * MigrationManager

- Backend contracts:
      * DBBackend
      * BackendLike
      * ensure_backend
"""

from .connection import DBConnection, Transaction
from .sqlite_backend import SQLiteBackend
from .mysql_backend import MySQLBackend, parse_mysql_address
from .postgres_backend import PostgresBackend
from .backend_base import DBBackend, BackendLike, ensure_backend
from .dialect import translate, get_dialect
from .registry import BackendRegistry, default_registry, open_connection
from .migrations import MigrationManager

__all__ = [
    # Connection / Transaction
    "DBConnection",
    "Transaction",

    # Factory
    "BackendRegistry",
    "default_registry",
    "open_connection",

    # Backends
    "SQLiteBackend",
    "MySQLBackend",
    "PostgresBackend",
    "parse_mysql_address",
    "DBBackend",
    "BackendLike",
    "ensure_backend",

    # Dialects
    "translate",
    "get_dialect",

    # Migrations
    "MigrationManager",
]
