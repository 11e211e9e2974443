"""
DB-backed Setting Registry.

Arbitrary name/value configuration stored alongside the tags, e.g. the
``rootPath`` override written when a networked database is initialised.
"""

from __future__ import annotations

from typing import List, Optional

from .models import SettingRecord
from ..db.connection import Transaction


class SettingRegistry:
    """
    Registry for settings, bound to one transaction.

    Schema (canonical):
        setting(
            name VARCHAR(255) PRIMARY KEY,
            value VARCHAR(255) NOT NULL
        )
    """

    def __init__(self, tx: Transaction):
        self.tx = tx

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[SettingRecord]:
        row = self.tx.query_one(
            """
            SELECT name, value
            FROM setting
            WHERE name == ?1
            """,
            name,
        )
        return self._row_to_rec(row) if row else None

    def list_settings(self) -> List[SettingRecord]:
        rows = self.tx.query(
            """
            SELECT name, value
            FROM setting
            ORDER BY name
            """
        )
        return [self._row_to_rec(r) for r in rows]

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def update(self, name: str, value: str) -> SettingRecord:
        """
        Insert or overwrite a setting.
        """
        self.tx.execute(
            """
            INSERT OR REPLACE INTO setting (name, value)
            VALUES (?1, ?2)
            """,
            name,
            value,
        )
        return SettingRecord(name=name, value=value)

    # ------------------------------------------------------------------
    # Internal helper
    # ------------------------------------------------------------------

    def _row_to_rec(self, row) -> SettingRecord:
        return SettingRecord(name=row["name"], value=row["value"])
