"""
Schema migration registry and the connect-time schema check.

A migration step upgrades a store *to* a given SchemaVersion. Steps are
applied in ascending version order, and the version row is stamped after
each one, so a failed run resumes from the last completed step.

    mgr = MigrationManager(latest=SchemaVersion(0, 7, 0, 2))
    mgr.register(
        SchemaVersion(0, 7, 0, 2),
        upgrade=lambda tx: tx.execute("ALTER TABLE ..."),
    )
    mgr.ensure_schema(tx)

A new manager starts with the steps shipped in tmsu_db.schema.upgrades.
After the steps run, the idempotent schema DDL is re-applied and the
latest version stamped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Mapping, Optional

from ..errors import MigrationError, StorageError
from ..schema.tables import create_schema, create_tables
from ..schema.upgrades import DEFAULT_UPGRADES
from ..schema.version import (
    LATEST_SCHEMA_VERSION,
    SchemaVersion,
    current_schema_version,
    update_schema_version,
)

if TYPE_CHECKING:
    from .connection import Transaction

logger = logging.getLogger(__name__)

Upgrade = Callable[["Transaction"], None]


class MigrationManager:
    """
    Ordered registry of upgrade steps plus the schema state machine:

        absent  -> create_schema()           -> current
        stale   -> upgrade steps + DDL       -> current
        current -> nothing
        newer   -> MigrationError
    """

    def __init__(
        self,
        latest: SchemaVersion = LATEST_SCHEMA_VERSION,
        migrations: Optional[Mapping[SchemaVersion, Upgrade]] = None,
    ):
        self.latest = latest
        self.migrations: Dict[SchemaVersion, Upgrade] = dict(
            DEFAULT_UPGRADES if migrations is None else migrations
        )

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, version: SchemaVersion, upgrade: Upgrade) -> None:
        """
        Register the step that upgrades a store to ``version``.

        Raises
        ------
        ValueError
            A step for ``version`` already exists, or ``version`` is
            beyond the latest schema version.
        """
        if version in self.migrations:
            raise ValueError(f"migration to {version} already registered")
        if version > self.latest:
            raise ValueError(f"migration to {version} is beyond latest {self.latest}")
        self.migrations[version] = upgrade

    def pending(self, current: SchemaVersion) -> List[SchemaVersion]:
        """Versions of the steps still to run for a store at ``current``."""
        return sorted(v for v in self.migrations if current < v <= self.latest)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def apply_migrations(self, tx: "Transaction", current: SchemaVersion) -> None:
        for version in self.pending(current):
            logger.info("upgrading schema from %s to %s", current, version)
            try:
                self.migrations[version](tx)
                update_schema_version(tx, version)
            except MigrationError:
                raise
            except StorageError as e:
                raise MigrationError(f"upgrade to {version}", e) from e
            current = version

        create_tables(tx)
        try:
            update_schema_version(tx, self.latest)
        except StorageError as e:
            raise MigrationError("version update", e) from e

    def ensure_schema(self, tx: "Transaction") -> SchemaVersion:
        """
        Bring the store behind ``tx`` to the latest schema version.

        Returns the version the store was at before this call
        (SchemaVersion(0, 0, 0, 0) for a fresh store).
        """
        current = SchemaVersion()
        try:
            if tx.backend.table_exists(tx, "version"):
                current = current_schema_version(tx)
        except MigrationError:
            raise
        except StorageError as e:
            raise MigrationError("version check", e) from e

        # no version row: never initialised, or an earlier creation died
        # part-way through
        if current == SchemaVersion():
            create_schema(tx)
            return current

        if current == self.latest:
            return current

        if current > self.latest:
            raise MigrationError(
                "version check",
                f"database schema {current} is newer than supported {self.latest}",
            )

        self.apply_migrations(tx, current)
        return current


__all__ = [
    "MigrationManager",
]
