"""
Upgrade steps shipped with the package, keyed by the schema version each
one brings a store to. MigrationManager starts from this table.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict

from .version import SchemaVersion, has_revision_column

if TYPE_CHECKING:
    from ..db.connection import Transaction

logger = logging.getLogger(__name__)


# revision joins the primary key, so the table is rebuilt rather than
# altered in place
_VERSION_REBUILD = (
    """
CREATE TABLE version_upgrade (
    major INT NOT NULL,
    minor INT NOT NULL,
    patch INT NOT NULL,
    revision INT NOT NULL DEFAULT 0,
    PRIMARY KEY (major, minor, patch, revision)
)""",
    """
INSERT INTO version_upgrade (major, minor, patch, revision)
SELECT major, minor, patch, 0
FROM version""",
    "DROP TABLE version",
    "ALTER TABLE version_upgrade RENAME TO version",
)


def add_version_revision(tx: "Transaction") -> None:
    """0.7.0-1: add the ``revision`` column to the version table."""
    if has_revision_column(tx):
        return

    logger.info("adding revision column to the version table")
    for statement in _VERSION_REBUILD:
        tx.execute(statement)


DEFAULT_UPGRADES: Dict[SchemaVersion, Callable[["Transaction"], None]] = {
    SchemaVersion(0, 7, 0, 1): add_version_revision,
}


__all__ = [
    "add_version_revision",
    "DEFAULT_UPGRADES",
]
