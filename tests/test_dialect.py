import pytest

from tmsu_db.db.dialect import get_dialect, translate


STATEMENTS = [
    "INSERT OR IGNORE INTO tag (id, name) VALUES (?, ?)",
    "INSERT OR REPLACE INTO setting (name, value) VALUES (?, ?)",
    "SELECT id FROM tag WHERE name == ?",
    "SELECT id FROM file WHERE directory = ?1 AND name = ?2",
]


def test_mysql_rewrites():
    assert translate("mysql", STATEMENTS[0]) == "INSERT IGNORE INTO tag (id, name) VALUES (?, ?)"
    assert translate("mysql", STATEMENTS[1]) == "REPLACE INTO setting (name, value) VALUES (?, ?)"
    assert translate("mysql", STATEMENTS[2]) == "SELECT id FROM tag WHERE name = ?"
    assert translate("mysql", STATEMENTS[3]) == "SELECT id FROM file WHERE directory = ? AND name = ?"


def test_mysql_handles_multiline_whitespace():
    stmt = "INSERT  OR\n    IGNORE INTO file_tag (file_id, tag_id, value_id)\nVALUES (?1, ?2, ?3)"
    assert translate("mysql", stmt) == (
        "INSERT IGNORE INTO file_tag (file_id, tag_id, value_id)\nVALUES (?, ?, ?)"
    )


@pytest.mark.parametrize("stmt", STATEMENTS)
def test_sqlite_is_identity(stmt):
    assert translate("sqlite", stmt) == stmt


def test_unknown_kind_is_identity():
    assert translate("oracle", STATEMENTS[0]) == STATEMENTS[0]


def test_translation_is_deterministic():
    dialect = get_dialect("mysql")
    assert dialect.translate(STATEMENTS[1]) == dialect.translate(STATEMENTS[1])


def test_postgres_insert_or_ignore():
    assert translate("postgres", "INSERT OR IGNORE INTO tag (id, name) VALUES (?1, ?2)") == (
        "INSERT INTO tag (id, name) VALUES (?, ?) ON CONFLICT DO NOTHING"
    )


def test_postgres_insert_or_replace_uses_primary_key():
    assert translate("postgres", STATEMENTS[1]) == (
        "INSERT INTO setting (name, value) VALUES (?, ?) "
        "ON CONFLICT (name) DO UPDATE SET value = EXCLUDED.value"
    )


def test_postgres_quotes_identifiers_and_types():
    out = translate("postgres", "CREATE TABLE IF NOT EXISTS `value` (mod_time DATETIME NOT NULL)")
    assert out == 'CREATE TABLE IF NOT EXISTS "value" (mod_time TIMESTAMP NOT NULL)'


def test_postgres_replace_into_key_only_table():
    assert translate("postgres", "INSERT OR REPLACE INTO query (text) VALUES (?)") == (
        "INSERT INTO query (text) VALUES (?) ON CONFLICT (text) DO NOTHING"
    )


def test_postgres_replace_unknown_table():
    with pytest.raises(ValueError):
        translate("postgres", "INSERT OR REPLACE INTO nowhere (a) VALUES (?)")
