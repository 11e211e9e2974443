"""
Backend registry and connection factory.

Backends are not registered as an import side effect. A BackendRegistry
maps connection-path schemes to backend factories; ``default_registry()``
builds the standard map once and callers (or tests) may pass their own:

    registry = default_registry()
    registry.register("fake", FakeBackend)
    conn = open_connection("fake://anything", registry)

Paths without a scheme always resolve to the "sqlite" entry.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional

from ..errors import DatabaseAccessError
from ..utils.paths import ResolvedPath, resolve
from .backend_base import BackendLike, ensure_backend
from .connection import DBConnection
from .mysql_backend import MySQLBackend
from .postgres_backend import PostgresBackend
from .sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)

BackendFactory = Callable[[str], BackendLike]


class BackendRegistry:
    """
    Explicit scheme → backend factory map.

    A factory takes the backend address (the connection path minus its
    scheme) and returns a backend object.
    """

    def __init__(self, factories: Optional[Mapping[str, BackendFactory]] = None):
        self._factories: Dict[str, BackendFactory] = {}
        for scheme, factory in (factories or {}).items():
            self.register(scheme, factory)

    def register(self, scheme: str, factory: BackendFactory) -> None:
        self._factories[scheme.lower()] = factory

    def schemes(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, scheme: str) -> bool:
        return scheme.lower() in self._factories

    def create(self, resolved: ResolvedPath) -> BackendLike:
        """
        Build the backend for a resolved path.

        Raises
        ------
        DatabaseAccessError
            No factory is registered for the path's scheme, or the
            factory rejected the address.
        """
        factory = self._factories.get(resolved.kind)
        if factory is None:
            raise DatabaseAccessError(
                resolved.original,
                f"no database driver registered for scheme '{resolved.kind}'",
            )

        try:
            backend = factory(resolved.address)
        except (TypeError, ValueError) as e:
            raise DatabaseAccessError(resolved.original, e) from e

        return ensure_backend(backend)


def default_registry() -> BackendRegistry:
    return BackendRegistry(
        {
            "sqlite": SQLiteBackend,
            "sqlite3": SQLiteBackend,
            "mysql": MySQLBackend,
            "postgres": PostgresBackend,
            "postgresql": PostgresBackend,
        }
    )


def open_connection(path: str, registry: Optional[BackendRegistry] = None) -> DBConnection:
    """
    Open a physical connection for a connection path.

    No existence checks are made here: opening a missing SQLite file
    creates it. See tmsu_db.core.open_at for the not-found check.

    Raises
    ------
    DatabaseAccessError
        Unknown scheme, malformed address, missing driver module or any
        driver-level connect failure.
    """
    resolved = resolve(path)
    backend = (registry or default_registry()).create(resolved)

    logger.info("connecting to %s database", backend.kind)
    try:
        raw = backend.connect()
    except Exception as e:
        raise DatabaseAccessError(path, e) from e

    return DBConnection(raw, backend, path)


__all__ = [
    "BackendFactory",
    "BackendRegistry",
    "default_registry",
    "open_connection",
]
