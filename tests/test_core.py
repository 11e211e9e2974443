import sqlite3

import pytest

from tmsu_db import create_at, open_at
from tmsu_db.db.migrations import MigrationManager
from tmsu_db.db.registry import open_connection
from tmsu_db.errors import DatabaseNotFoundError, MigrationError, QueryError
from tmsu_db.schema.version import (
    LATEST_SCHEMA_VERSION,
    SchemaVersion,
    current_schema_version,
    update_schema_version,
)


def _set_version(path, version):
    with open_connection(path) as conn:
        with conn.begin() as tx:
            update_schema_version(tx, version)


def test_open_missing_local_path(tmp_path):
    with pytest.raises(DatabaseNotFoundError) as excinfo:
        open_at(str(tmp_path / ".tmsu" / "db"))

    assert excinfo.value.path == str(tmp_path / ".tmsu" / "db")
    assert not (tmp_path / ".tmsu").exists()


def test_create_then_open(tmp_path):
    path = str(tmp_path / "db")
    create_at(path)

    with open_at(path) as db:
        assert db.kind == "sqlite"
        with db.begin() as tx:
            assert current_schema_version(tx) == LATEST_SCHEMA_VERSION
            assert tx.query("SELECT id, name FROM `value`") == [{"id": 0, "name": "dummy"}]


def test_create_twice_is_harmless(tmp_path):
    path = str(tmp_path / "db")
    create_at(path)
    create_at(path)

    with open_at(path) as db:
        with db.begin() as tx:
            assert tx.query_one("SELECT COUNT(*) AS count FROM version")["count"] == 1


def test_open_upgrades_stale_store(tmp_path):
    path = str(tmp_path / "db")
    create_at(path)
    _set_version(path, SchemaVersion(0, 6, 0, 0))

    applied = []
    manager = MigrationManager()
    manager.register(
        SchemaVersion(0, 7, 0, 0),
        lambda tx: applied.append(current_schema_version(tx)),
    )

    with open_at(path, migrations=manager) as db:
        with db.begin() as tx:
            assert current_schema_version(tx) == LATEST_SCHEMA_VERSION

    assert applied == [SchemaVersion(0, 6, 0, 0)]


def test_open_rejects_newer_store(tmp_path):
    path = str(tmp_path / "db")
    create_at(path)
    _set_version(path, SchemaVersion(1, 0, 0, 0))

    with pytest.raises(MigrationError):
        open_at(path)


def test_failed_upgrade_rolls_back(tmp_path):
    path = str(tmp_path / "db")
    create_at(path)
    _set_version(path, SchemaVersion(0, 6, 0, 0))

    def broken(tx):
        tx.execute("CREATE TABLE extra (id INTEGER)")
        tx.execute("SELECT * FROM no_such_table")

    manager = MigrationManager()
    manager.register(SchemaVersion(0, 7, 0, 0), broken)

    with pytest.raises(MigrationError):
        open_at(path, migrations=manager)

    with open_connection(path) as conn:
        with conn.begin() as tx:
            assert current_schema_version(tx) == SchemaVersion(0, 6, 0, 0)
            assert not tx.backend.table_exists(tx, "extra")


def test_pending_migrations_are_ordered():
    manager = MigrationManager(migrations={})
    noop = lambda tx: None
    manager.register(SchemaVersion(0, 7, 0, 0), noop)
    manager.register(SchemaVersion(0, 6, 1, 0), noop)
    manager.register(SchemaVersion(0, 5, 0, 0), noop)

    assert manager.pending(SchemaVersion(0, 6, 0, 0)) == [
        SchemaVersion(0, 6, 1, 0),
        SchemaVersion(0, 7, 0, 0),
    ]


def test_register_rejects_duplicates_and_future_versions():
    manager = MigrationManager()
    manager.register(SchemaVersion(0, 7, 0, 0), lambda tx: None)

    with pytest.raises(ValueError):
        manager.register(SchemaVersion(0, 7, 0, 0), lambda tx: None)
    with pytest.raises(ValueError):
        manager.register(SchemaVersion(9, 0, 0, 0), lambda tx: None)


def test_networked_path_skips_existence_check(tmp_path, registry):
    path = "netdb://" + str(tmp_path / "remote.db")

    with open_at(path, registry) as db:
        assert db.path == path
        with db.begin() as tx:
            assert current_schema_version(tx) == LATEST_SCHEMA_VERSION


def _make_legacy_store(path, major, minor, patch):
    create_at(path)
    conn = sqlite3.connect(path)
    try:
        conn.executescript(
            f"""
DROP TABLE version;
CREATE TABLE version (
    major INT NOT NULL,
    minor INT NOT NULL,
    patch INT NOT NULL,
    PRIMARY KEY (major, minor, patch)
);
INSERT INTO version (major, minor, patch) VALUES ({major}, {minor}, {patch});
"""
        )
    finally:
        conn.close()


def test_open_adds_revision_column_to_legacy_store(tmp_path):
    path = str(tmp_path / "db")
    _make_legacy_store(path, 0, 7, 0)

    with open_at(path) as db:
        with db.begin() as tx:
            assert current_schema_version(tx) == LATEST_SCHEMA_VERSION
            assert tx.query("SELECT * FROM version") == [
                {"major": 0, "minor": 7, "patch": 0, "revision": 1}
            ]


def test_legacy_store_runs_earlier_steps_before_revision_column(tmp_path):
    path = str(tmp_path / "db")
    _make_legacy_store(path, 0, 6, 0)

    seen = []
    manager = MigrationManager()
    manager.register(
        SchemaVersion(0, 7, 0, 0),
        lambda tx: seen.append(current_schema_version(tx)),
    )

    with open_at(path, migrations=manager) as db:
        with db.begin() as tx:
            assert current_schema_version(tx) == LATEST_SCHEMA_VERSION

    assert seen == [SchemaVersion(0, 6, 0, 0)]


def test_default_manager_ships_revision_step():
    assert MigrationManager().pending(SchemaVersion(0, 7, 0, 0)) == [LATEST_SCHEMA_VERSION]


def test_schema_check_failure_is_migration_error(tx, monkeypatch):
    def failing(tx, name):
        raise QueryError("SELECT ...", (name,), "catalog unavailable")

    monkeypatch.setattr(tx.backend, "table_exists", failing)

    with pytest.raises(MigrationError) as excinfo:
        MigrationManager().ensure_schema(tx)

    assert isinstance(excinfo.value.cause, QueryError)
