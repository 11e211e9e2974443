"""
Error taxonomy for the TMSU storage layer.

Every error raised by this package derives from StorageError, which is a
RuntimeError so that callers written against the plain DB helpers keep
working.

    StorageError
      ├── DatabaseNotFoundError   local store path missing on open
      ├── DatabaseAccessError     any other open/connect failure
      ├── DatabaseTransactionError begin/commit/rollback failed
      ├── ConstraintError         unexpected affected-row count
      ├── MigrationError          schema creation / upgrade failed
      ├── QueryError              statement execution failed
      └── TransactionStateError   nested begin() (programming error)
"""

from __future__ import annotations

from typing import Any, Optional


class StorageError(RuntimeError):
    """Base class for all storage-layer errors."""


class DatabaseNotFoundError(StorageError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"no database at '{path}'")


class DatabaseAccessError(StorageError):
    def __init__(self, path: str, cause: Any = None):
        self.path = path
        self.cause = cause
        super().__init__(f"cannot access database at '{path}': {cause}")


class DatabaseTransactionError(StorageError):
    def __init__(self, path: str, cause: Any = None):
        self.path = path
        self.cause = cause
        super().__init__(f"transaction failed for database at '{path}': {cause}")


class ConstraintError(StorageError):
    """
    An insert/update that must touch exactly one row touched some other
    number of rows.
    """

    def __init__(self, what: str, rows_affected: int):
        self.what = what
        self.rows_affected = rows_affected
        super().__init__(
            f"{what}: expected exactly one row to be affected, got {rows_affected}"
        )


class MigrationError(StorageError):
    def __init__(self, step: str, cause: Any = None):
        self.step = step
        self.cause = cause
        message = f"schema {step} failed"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class QueryError(StorageError):
    def __init__(self, query: str, params: Optional[tuple], cause: Any = None):
        self.query = query
        self.params = params
        self.cause = cause
        super().__init__(
            f"DB execute failed: {cause} | Query: {query!r} | Params: {params!r}"
        )


class TransactionStateError(StorageError):
    """Raised when a second transaction is begun on a busy connection."""


__all__ = [
    "StorageError",
    "DatabaseNotFoundError",
    "DatabaseAccessError",
    "DatabaseTransactionError",
    "ConstraintError",
    "MigrationError",
    "QueryError",
    "TransactionStateError",
]
