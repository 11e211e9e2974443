"""
tmsu_db.utils

Lightweight utility helpers shared across the storage stack.

    - paths: connection-path scheme detection and resolution

All public symbols are re-exported for convenience.
"""

from . import paths

from .paths import *       # noqa: F401,F403

__all__ = paths.__all__
