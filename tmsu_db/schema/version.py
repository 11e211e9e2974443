"""
Schema version bookkeeping.

The ``version`` table holds a single row describing the structural
generation of the schema:

    CREATE TABLE IF NOT EXISTS version (
        major INT NOT NULL,
        minor INT NOT NULL,
        patch INT NOT NULL,
        revision INT NOT NULL,
        PRIMARY KEY (major, minor, patch, revision)
    )

Stores created before schema 0.7.0-1 have no ``revision`` column. Such a
row is read as revision 0; the legacy shape is recognised by its column
count rather than by catching decode failures.
"""

from __future__ import annotations

import logging
from dataclasses import astuple, dataclass
from typing import TYPE_CHECKING, Tuple

from ..errors import ConstraintError, MigrationError

if TYPE_CHECKING:
    from ..db.connection import Transaction

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class SchemaVersion:
    major: int = 0
    minor: int = 0
    patch: int = 0
    revision: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}-{self.revision}"

    def as_params(self) -> tuple:
        return astuple(self)


LATEST_SCHEMA_VERSION = SchemaVersion(0, 7, 0, 1)

_LEGACY_COLUMNS = ("major", "minor", "patch")
_CURRENT_COLUMNS = _LEGACY_COLUMNS + ("revision",)


def _read_version(tx: "Transaction") -> Tuple[SchemaVersion, bool]:
    """The stored version and whether the row has the legacy layout."""
    row = tx.query_one("SELECT * FROM version")
    if row is None:
        return SchemaVersion(), False

    if len(row) == len(_CURRENT_COLUMNS):
        return SchemaVersion(*(int(row[c]) for c in _CURRENT_COLUMNS)), False

    if len(row) == len(_LEGACY_COLUMNS):
        return SchemaVersion(*(int(row[c]) for c in _LEGACY_COLUMNS)), True

    raise MigrationError(
        "version read",
        f"unexpected version row layout: {sorted(row.keys())}",
    )


def current_schema_version(tx: "Transaction") -> SchemaVersion:
    """
    Read the stored schema version.

    Returns SchemaVersion(0, 0, 0, 0) when the table holds no row.

    Raises
    ------
    MigrationError
        The row has neither the current nor the legacy column layout.
    """
    version, legacy = _read_version(tx)
    if legacy:
        logger.info("schema version row predates the revision column")
    return version


def has_revision_column(tx: "Transaction") -> bool:
    """
    False when the version row has the legacy three-column layout.

    An empty table carries no layout information and counts as current.
    """
    return not _read_version(tx)[1]


def insert_schema_version(tx: "Transaction", version: SchemaVersion) -> None:
    rows = tx.execute(
        """
INSERT INTO version (major, minor, patch, revision)
VALUES (?, ?, ?, ?)""",
        *version.as_params(),
    )
    if rows != 1:
        raise ConstraintError("version could not be inserted", rows)


def update_schema_version(tx: "Transaction", version: SchemaVersion) -> int:
    """
    Move the stored version to ``version``.

    Returns the number of rows changed: 0 when the store already holds
    ``version``, otherwise 1.

    A legacy row can only be moved to another revision 0 version; the
    0.7.0-1 upgrade adds the column first.
    """
    current, legacy = _read_version(tx)
    if current == version:
        return 0

    if legacy:
        if version.revision != 0:
            raise MigrationError(
                "version update",
                f"version table has no revision column to hold {version}",
            )
        rows = tx.execute(
            """
UPDATE version SET major = ?, minor = ?, patch = ?""",
            version.major,
            version.minor,
            version.patch,
        )
    else:
        rows = tx.execute(
            """
UPDATE version SET major = ?, minor = ?, patch = ?, revision = ?""",
            *version.as_params(),
        )
    if rows != 1:
        raise ConstraintError("version could not be updated", rows)

    logger.info("schema version set to %s", version)
    return 1


def stamp_schema_version(tx: "Transaction", version: SchemaVersion) -> None:
    """Insert the version row if there is none, otherwise update it."""
    row = tx.query_one("SELECT COUNT(*) AS count FROM version")
    if row is None or int(row["count"]) == 0:
        insert_schema_version(tx, version)
    else:
        update_schema_version(tx, version)


__all__ = [
    "SchemaVersion",
    "LATEST_SCHEMA_VERSION",
    "current_schema_version",
    "has_revision_column",
    "insert_schema_version",
    "update_schema_version",
    "stamp_schema_version",
]
