"""
tmsu_db - Registry package.

This package provides:
    - Data model records (SettingRecord)
    - Transaction-bound registry implementations:
          * SettingRegistry

Registries sit above the database backend and issue SQLite-syntax
statements; the transaction translates them for MySQL or Postgres.
"""

from .models import SettingRecord, ROOT_PATH_SETTING
from .setting_registry import SettingRegistry

__all__ = [
    "SettingRecord",
    "ROOT_PATH_SETTING",
    "SettingRegistry",
]
