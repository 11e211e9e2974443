"""
MySQL backend (networked store), driven by PyMySQL.

Selected for connection paths of the form ``mysql://<address>``. The
address follows the go-sql-driver DSN layout used by existing TMSU
databases:

    [user[:password]@][net[(addr)]]/dbname[?param=value&...]

    e.g. "tmsu:secret@tcp(db.local:3306)/tags?charset=utf8mb4"
         "tmsu@unix(/run/mysqld/mysqld.sock)/tags"

A URL-style address ("user:pass@host:port/dbname") is accepted too.

MySQL has no ``CREATE INDEX IF NOT EXISTS``; index existence is checked
in information_schema instead.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Dict
from urllib.parse import parse_qsl

from .backend_base import DBBackend, count

if TYPE_CHECKING:
    from .connection import Transaction


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306
DEFAULT_CHARSET = "utf8mb4"

_NET_ADDR_RE = re.compile(r"^(\w+)\((.*)\)$")


# ----------------------------------------------------------------------
# Address parsing
# ----------------------------------------------------------------------

def _split_host_port(addr: str) -> Dict[str, Any]:
    if not addr:
        return {"host": DEFAULT_HOST, "port": DEFAULT_PORT}

    if addr.startswith("["):
        # [::1]:3306
        host, _, tail = addr[1:].partition("]")
        port = tail.lstrip(":")
    elif addr.count(":") == 1:
        host, _, port = addr.partition(":")
    else:
        host, port = addr, ""

    if port and not port.isdigit():
        raise ValueError(f"invalid port in MySQL address: {addr!r}")

    return {"host": host or DEFAULT_HOST, "port": int(port) if port else DEFAULT_PORT}


def parse_mysql_address(address: str) -> Dict[str, Any]:
    """
    Turn a MySQL address into ``pymysql.connect`` keyword arguments.

    Raises
    ------
    ValueError
        The address has no "/dbname" part or names an unsupported
        network.
    """
    rest, _, query = address.partition("?")

    slash = rest.rfind("/")
    if slash < 0:
        raise ValueError(f"MySQL address has no database name: {address!r}")
    head, database = rest[:slash], rest[slash + 1:]

    kwargs: Dict[str, Any] = {"database": database or None, "charset": DEFAULT_CHARSET}

    at = head.rfind("@")
    if at >= 0:
        credentials, head = head[:at], head[at + 1:]
        user, _, password = credentials.partition(":")
        kwargs["user"] = user or None
        kwargs["password"] = password

    match = _NET_ADDR_RE.match(head)
    net, addr = match.groups() if match else ("tcp", head)

    if net == "unix":
        kwargs["unix_socket"] = addr
    elif net == "tcp":
        kwargs.update(_split_host_port(addr))
    else:
        raise ValueError(f"unsupported MySQL network {net!r}")

    for key, value in parse_qsl(query):
        if key == "charset":
            kwargs["charset"] = value.split(",")[0]

    return kwargs


# ----------------------------------------------------------------------
# Backend
# ----------------------------------------------------------------------

class MySQLBackend(DBBackend):
    kind = "mysql"
    paramstyle = "format"
    supports_index_if_not_exists = False

    def connect(self) -> Any:
        """
        Create a PyMySQL connection with dict rows and explicit
        transactions.
        """
        import pymysql
        import pymysql.cursors

        return pymysql.connect(
            cursorclass=pymysql.cursors.DictCursor,
            autocommit=False,
            **parse_mysql_address(self.address),
        )

    def begin(self, raw_conn: Any) -> None:
        raw_conn.begin()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def table_exists(self, tx: "Transaction", name: str) -> bool:
        return count(
            tx,
            """
SELECT COUNT(*) AS count
FROM information_schema.tables
WHERE table_schema = DATABASE() AND table_name = ?""",
            name,
        ) > 0

    def index_exists(self, tx: "Transaction", table: str, name: str) -> bool:
        return count(
            tx,
            """
SELECT COUNT(*) AS count
FROM information_schema.statistics
WHERE table_schema = DATABASE() AND table_name = ? AND index_name = ?""",
            table,
            name,
        ) > 0
