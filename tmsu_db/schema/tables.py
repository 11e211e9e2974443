"""
Canonical TMSU schema.

Every statement is idempotent (``CREATE ... IF NOT EXISTS``), so creating
the schema against an already initialised store is a no-op. Statements
are written in SQLite syntax; the transaction translates them for the
bound backend. ``value`` is always backtick-quoted because it is a
reserved word in MySQL.

Tables are created in dependency order:

    tag, file, value, file_tag, implication, query, setting, version

DDL runs inside the caller's transaction. On engines where DDL commits
implicitly (MySQL) a failed run can leave a partial table set behind;
re-running creation completes it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Sequence, Tuple

from ..errors import ConstraintError, MigrationError, StorageError
from .version import LATEST_SCHEMA_VERSION, stamp_schema_version

if TYPE_CHECKING:
    from ..db.connection import Transaction

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Table definitions
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Index:
    name: str
    table: str
    columns: Tuple[str, ...]


@dataclass(frozen=True)
class Table:
    name: str
    ddl: str
    primary_key: Tuple[str, ...]
    indexes: Tuple[Index, ...] = ()


TAG_TABLE = Table(
    name="tag",
    ddl="""
CREATE TABLE IF NOT EXISTS tag (
    id INTEGER PRIMARY KEY,
    name VARCHAR(255) NOT NULL
)""",
    primary_key=("id",),
    indexes=(Index("idx_tag_name", "tag", ("name",)),),
)

FILE_TABLE = Table(
    name="file",
    ddl="""
CREATE TABLE IF NOT EXISTS file (
    id INTEGER PRIMARY KEY,
    directory VARCHAR(255) NOT NULL,
    name VARCHAR(255) NOT NULL,
    fingerprint VARCHAR(255) NOT NULL,
    mod_time DATETIME NOT NULL,
    size INTEGER NOT NULL,
    is_dir BOOLEAN NOT NULL,
    CONSTRAINT con_file_path UNIQUE (directory, name)
)""",
    primary_key=("id",),
    indexes=(Index("idx_file_fingerprint", "file", ("fingerprint",)),),
)

VALUE_TABLE = Table(
    name="value",
    ddl="""
CREATE TABLE IF NOT EXISTS `value` (
    id INTEGER PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    CONSTRAINT con_value_name UNIQUE (name)
)""",
    primary_key=("id",),
)

FILE_TAG_TABLE = Table(
    name="file_tag",
    ddl="""
CREATE TABLE IF NOT EXISTS file_tag (
    file_id INTEGER NOT NULL,
    tag_id INTEGER NOT NULL,
    value_id INTEGER NOT NULL,
    PRIMARY KEY (file_id, tag_id, value_id),
    FOREIGN KEY (file_id) REFERENCES file(id),
    FOREIGN KEY (tag_id) REFERENCES tag(id),
    FOREIGN KEY (value_id) REFERENCES `value`(id)
)""",
    primary_key=("file_id", "tag_id", "value_id"),
    indexes=(
        Index("idx_file_tag_file_id", "file_tag", ("file_id",)),
        Index("idx_file_tag_tag_id", "file_tag", ("tag_id",)),
        Index("idx_file_tag_value_id", "file_tag", ("value_id",)),
    ),
)

IMPLICATION_TABLE = Table(
    name="implication",
    ddl="""
CREATE TABLE IF NOT EXISTS implication (
    tag_id INTEGER NOT NULL,
    value_id INTEGER NOT NULL,
    implied_tag_id INTEGER NOT NULL,
    implied_value_id INTEGER NOT NULL,
    PRIMARY KEY (tag_id, value_id, implied_tag_id, implied_value_id)
)""",
    primary_key=("tag_id", "value_id", "implied_tag_id", "implied_value_id"),
)

QUERY_TABLE = Table(
    name="query",
    ddl="""
CREATE TABLE IF NOT EXISTS query (
    text VARCHAR(255) PRIMARY KEY
)""",
    primary_key=("text",),
)

SETTING_TABLE = Table(
    name="setting",
    ddl="""
CREATE TABLE IF NOT EXISTS setting (
    name VARCHAR(255) PRIMARY KEY,
    value VARCHAR(255) NOT NULL
)""",
    primary_key=("name",),
)

VERSION_TABLE = Table(
    name="version",
    ddl="""
CREATE TABLE IF NOT EXISTS version (
    major INT NOT NULL,
    minor INT NOT NULL,
    patch INT NOT NULL,
    revision INT NOT NULL,
    PRIMARY KEY (major, minor, patch, revision)
)""",
    primary_key=("major", "minor", "patch", "revision"),
)

TABLES: Tuple[Table, ...] = (
    TAG_TABLE,
    FILE_TABLE,
    VALUE_TABLE,
    FILE_TAG_TABLE,
    IMPLICATION_TABLE,
    QUERY_TABLE,
    SETTING_TABLE,
    VERSION_TABLE,
)

PRIMARY_KEYS: Dict[str, Tuple[str, ...]] = {t.name: t.primary_key for t in TABLES}

# id 0 anchors file_tag / implication rows that carry no value
DEFAULT_VALUE_ID = 0
DEFAULT_VALUE_NAME = "dummy"


# ----------------------------------------------------------------------
# Creation
# ----------------------------------------------------------------------

def create_table(tx: "Transaction", table: Table) -> None:
    tx.execute(table.ddl)
    for index in table.indexes:
        create_index(tx, index)


def create_index(tx: "Transaction", index: Index) -> None:
    columns = ", ".join(index.columns)
    if tx.backend.supports_index_if_not_exists:
        tx.execute(
            f"""
CREATE INDEX IF NOT EXISTS {index.name}
ON {index.table}({columns})"""
        )
    elif not tx.backend.index_exists(tx, index.table, index.name):
        tx.execute(
            f"""
CREATE INDEX {index.name}
ON {index.table}({columns})"""
        )


def insert_default_value(tx: "Transaction") -> None:
    """
    Seed the sentinel value row (id 0, "dummy").

    Backends with foreign keys need a row for value_id 0 to point at.
    Skipped when the row already exists.
    """
    row = tx.query_one(
        "SELECT COUNT(*) AS count FROM `value` WHERE id = ?", DEFAULT_VALUE_ID
    )
    if row is not None and int(row["count"]) > 0:
        return

    rows = tx.execute(
        """
INSERT INTO `value` (id, name)
VALUES (?, ?)""",
        DEFAULT_VALUE_ID,
        DEFAULT_VALUE_NAME,
    )
    if rows != 1:
        raise ConstraintError("default value could not be inserted", rows)


def _run_step(step: str, fn: Callable, *args) -> None:
    try:
        fn(*args)
    except MigrationError:
        raise
    except (StorageError, ValueError) as e:
        raise MigrationError(step, e) from e


def create_tables(tx: "Transaction", tables: Sequence[Table] = TABLES) -> None:
    for table in tables:
        _run_step(f"creation of table '{table.name}'", create_table, tx, table)


def create_schema(tx: "Transaction") -> None:
    """
    Create every table and index, seed the sentinel value and stamp the
    latest schema version.

    Safe to call against an initialised store.

    Raises
    ------
    MigrationError
        Wrapping the first failure; later steps are not attempted.
    """
    logger.info("creating schema (%s)", LATEST_SCHEMA_VERSION)

    create_tables(tx)
    _run_step("default value seeding", insert_default_value, tx)
    _run_step("version stamp", stamp_schema_version, tx, LATEST_SCHEMA_VERSION)


__all__ = [
    "Index",
    "Table",
    "TABLES",
    "PRIMARY_KEYS",
    "DEFAULT_VALUE_ID",
    "DEFAULT_VALUE_NAME",
    "create_table",
    "create_index",
    "create_tables",
    "insert_default_value",
    "create_schema",
]
