import pytest

from tmsu_db.utils.paths import (
    database_path_for,
    get_scheme,
    has_scheme,
    resolve,
    split_path_from_scheme,
)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("mysql://host/db", True),
        ("postgres://u:p@host:5432/tags", True),
        ("/tmp/db", False),
        ("x://y", False),
        ("C://Users/me/.tmsu/db", False),
        ("relative/.tmsu/db", False),
        ("ab://z", True),
    ],
)
def test_has_scheme(path, expected):
    assert has_scheme(path) is expected


def test_get_scheme_and_remainder():
    assert get_scheme("mysql://user:pw@tcp(db:3306)/tags") == "mysql"
    assert split_path_from_scheme("mysql://user:pw@tcp(db:3306)/tags") == "user:pw@tcp(db:3306)/tags"
    assert get_scheme("/tmp/db") == ""
    assert split_path_from_scheme("/tmp/db") == "/tmp/db"


def test_remainder_keeps_later_separators():
    assert split_path_from_scheme("mysql://a://b") == "a://b"


def test_resolve_networked():
    resolved = resolve("MySQL://host/db")
    assert resolved.kind == "mysql"
    assert resolved.address == "host/db"
    assert resolved.original == "MySQL://host/db"
    assert resolved.is_networked


def test_resolve_local_and_single_letter_scheme():
    assert resolve("/home/me/.tmsu/db").kind == "sqlite"
    resolved = resolve("x://y")
    assert resolved.kind == "sqlite"
    assert resolved.address == "x://y"
    assert not resolved.is_networked


def test_database_path_for():
    assert database_path_for("/home/me") == "/home/me/.tmsu/db"
