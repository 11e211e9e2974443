"""
tmsu_db.schema

Schema definition and version bookkeeping:

    - tables:  table/index DDL, sentinel value seeding, create_schema()
    - version: SchemaVersion, LATEST_SCHEMA_VERSION and the version row
               read/insert/update helpers
    - upgrades: upgrade steps shipped with the package
"""

from .version import (
    SchemaVersion,
    LATEST_SCHEMA_VERSION,
    current_schema_version,
    has_revision_column,
    insert_schema_version,
    update_schema_version,
    stamp_schema_version,
)
from .tables import (
    TABLES,
    PRIMARY_KEYS,
    DEFAULT_VALUE_ID,
    DEFAULT_VALUE_NAME,
    create_schema,
    create_tables,
    insert_default_value,
)

__all__ = [
    # Version
    "SchemaVersion",
    "LATEST_SCHEMA_VERSION",
    "current_schema_version",
    "has_revision_column",
    "insert_schema_version",
    "update_schema_version",
    "stamp_schema_version",

    # Tables
    "TABLES",
    "PRIMARY_KEYS",
    "DEFAULT_VALUE_ID",
    "DEFAULT_VALUE_NAME",
    "create_schema",
    "create_tables",
    "insert_default_value",
]
