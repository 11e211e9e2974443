"""
Database initialization flow.

Initializes one store per target:

    - local directory  -> <dir>/.tmsu/db (the .tmsu directory is created)
    - networked path   -> the database itself; only one target is used

A failing target does not stop the batch: each failure is collected as a
human-readable warning and the remaining targets are still processed.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .core import create_at, open_at
from .db.registry import BackendRegistry
from .errors import DatabaseAccessError, StorageError
from .registry.models import ROOT_PATH_SETTING
from .registry.setting_registry import SettingRegistry
from .utils.paths import DB_DIR_NAME, database_path_for, has_scheme

logger = logging.getLogger(__name__)


@dataclass
class InitResult:
    initialized: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def initialize_database(path: str, registry: Optional[BackendRegistry] = None) -> str:
    """
    Create the store for one target and return its connection path.

    Raises
    ------
    DatabaseAccessError
        The .tmsu directory cannot be created.
    StorageError
        Anything create_at raises.
    """
    logger.info("%s: creating database", path)

    if has_scheme(path):
        db_path = path
    else:
        tmsu_dir = os.path.join(path, DB_DIR_NAME)
        try:
            os.mkdir(tmsu_dir, 0o755)
        except FileExistsError:
            pass
        except OSError as e:
            raise DatabaseAccessError(tmsu_dir, e) from e
        db_path = database_path_for(path)

    create_at(db_path, registry)
    return db_path


def insert_root_path(
    path: str,
    root_path: Optional[str],
    registry: Optional[BackendRegistry] = None,
) -> None:
    """
    Record ``root_path`` in a networked database's settings.

    Local stores resolve relative paths from their own location, so
    nothing is written for them.
    """
    if root_path is None or not has_scheme(path):
        return

    with open_at(path, registry) as db:
        with db.begin() as tx:
            SettingRegistry(tx).update(ROOT_PATH_SETTING, root_path)


def init_databases(
    paths: Sequence[str] = (),
    database_path: Optional[str] = None,
    root_path: Optional[str] = None,
    registry: Optional[BackendRegistry] = None,
) -> InitResult:
    """
    Initialize every target, collecting one warning per failure.

    Parameters
    ----------
    paths:
        Directories to initialize. Defaults to the working directory.
    database_path:
        Global database override. A networked override replaces
        ``paths`` as the sole target.
    root_path:
        Root path to store in networked databases.

    Raises
    ------
    StorageError
        The working directory cannot be determined.
    """
    targets = list(paths)

    if database_path is not None and has_scheme(database_path):
        targets = [database_path]
    elif not targets:
        try:
            targets = [os.getcwd()]
        except OSError as e:
            raise StorageError(f"could not identify working directory: {e}") from e

    result = InitResult()
    for target in targets:
        try:
            initialize_database(target, registry)
        except StorageError as e:
            result.warnings.append(f"{target}: could not initialize database: {e}")
            continue

        try:
            insert_root_path(target, root_path, registry)
        except StorageError as e:
            result.warnings.append(
                f"{target}: could not initialize database with root path: {e}"
            )
            continue

        result.initialized.append(target)

    return result


__all__ = [
    "InitResult",
    "initialize_database",
    "insert_root_path",
    "init_databases",
]
