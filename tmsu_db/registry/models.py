from __future__ import annotations

from dataclasses import dataclass


# ----------------------------------------------------------------------
# Setting
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class SettingRecord:
    name: str
    value: str


ROOT_PATH_SETTING = "rootPath"
