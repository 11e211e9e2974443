import pytest

from tmsu_db.db.mysql_backend import parse_mysql_address


def test_go_driver_tcp_dsn():
    assert parse_mysql_address("tmsu:secret@tcp(db.local:3307)/tags?charset=utf8") == {
        "user": "tmsu",
        "password": "secret",
        "host": "db.local",
        "port": 3307,
        "database": "tags",
        "charset": "utf8",
    }


def test_go_driver_unix_dsn():
    kwargs = parse_mysql_address("tmsu@unix(/run/mysqld/mysqld.sock)/tags")
    assert kwargs["unix_socket"] == "/run/mysqld/mysqld.sock"
    assert kwargs["user"] == "tmsu"
    assert kwargs["password"] == ""
    assert "host" not in kwargs


def test_url_style_address_and_defaults():
    kwargs = parse_mysql_address("root@example.org/tags")
    assert kwargs["host"] == "example.org"
    assert kwargs["port"] == 3306
    assert kwargs["charset"] == "utf8mb4"

    kwargs = parse_mysql_address("/tags")
    assert kwargs["host"] == "localhost"
    assert "user" not in kwargs


def test_ipv6_host():
    kwargs = parse_mysql_address("u:p@tcp([::1]:3306)/tags")
    assert kwargs["host"] == "::1"
    assert kwargs["port"] == 3306


def test_password_may_contain_at_sign():
    kwargs = parse_mysql_address("u:p@ss@tcp(h)/tags")
    assert kwargs["user"] == "u"
    assert kwargs["password"] == "p@ss"


@pytest.mark.parametrize(
    "address",
    ["no-database", "u@udp(host)/tags", "u@tcp(host:port)/tags"],
)
def test_malformed_addresses(address):
    with pytest.raises(ValueError):
        parse_mysql_address(address)
