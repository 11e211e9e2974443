"""
Global configuration settings for the TMSU storage layer.

This module centralizes configuration for:

    - database path override (local file or scheme-prefixed DSN)
    - root path used for relative paths in networked databases
    - logging switches

It provides:
    TmsuDBConfig       – structured config object
    load_config()      – load from environment variables or defaults
    configure_logging() – apply the logging switches
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class TmsuDBConfig:
    """
    Canonical configuration for the tmsu_db package.

    Attributes
    ----------
    database_path:
        Explicit database to use instead of ``<dir>/.tmsu/db``.
        May be a local file path or e.g. "mysql://user@tcp(host)/tags".

    root_path:
        Root path for relative paths; only stored for networked
        databases.

    enable_logging:
        Whether to configure logging at all.

    verbosity:
        1 logs connections and transactions (INFO); 2 or more also logs
        every translated statement (DEBUG).
    """

    database_path: Optional[str] = None
    root_path: Optional[str] = None

    enable_logging: bool = False
    verbosity: int = 1


def load_config() -> TmsuDBConfig:
    """
    Load TmsuDBConfig from environment variables, falling back to defaults.

    Recognized variables:
        TMSU_DB              (path or DSN)
        TMSU_ROOT_PATH       (directory path)
        TMSU_ENABLE_LOGGING  ("true" / "false" / "1" / "0")
        TMSU_VERBOSITY       (integer)

    Returns
    -------
    TmsuDBConfig
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    def _env_int(name: str, default: int) -> int:
        val = os.getenv(name)
        if val is None or not val.strip().isdigit():
            return default
        return int(val)

    return TmsuDBConfig(
        database_path=os.getenv("TMSU_DB") or None,
        root_path=os.getenv("TMSU_ROOT_PATH") or None,

        enable_logging=_env_flag("TMSU_ENABLE_LOGGING", default=False),
        verbosity=_env_int("TMSU_VERBOSITY", default=1),
    )


def configure_logging(config: TmsuDBConfig) -> None:
    if not config.enable_logging:
        return

    level = logging.DEBUG if config.verbosity >= 2 else logging.INFO
    logging.basicConfig(level=level, format="%(name)s: %(message)s")
