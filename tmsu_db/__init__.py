"""
tmsu_db

Storage-access layer for the TMSU file-tagging tool.

A store is either an embedded SQLite file (``<dir>/.tmsu/db``) or a
networked MySQL/Postgres database addressed as ``scheme://address``.
All higher-level code issues SQLite-syntax statements through a
Transaction; the layer translates them for the bound backend and keeps
the schema created and current.

Submodules include:
    - db/        connections, transactions, backends, dialects, migrations
    - schema/    table DDL and schema version bookkeeping
    - registry/  transaction-bound record stores (settings)
    - utils/     connection-path resolution

This root package exports the connect entry points and config loader.
"""

from .config import TmsuDBConfig, load_config
from .core import Database, create_at, open_at

__version__ = "0.7.0"

__all__ = [
    "TmsuDBConfig",
    "load_config",
    "Database",
    "create_at",
    "open_at",
]
