import pytest

from tmsu_db.db.backend_base import DBBackend
from tmsu_db.db.registry import default_registry, open_connection
from tmsu_db.db.sqlite_backend import SQLiteBackend


class RecordingCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = -1

    def execute(self, query, params):
        self.conn.statements.append((query, params))
        self.rowcount = self.conn.rowcount

    def fetchall(self):
        return list(self.conn.rows)

    def close(self):
        pass


class RecordingConnection:
    """Stands in for a networked driver connection; records every statement."""

    def __init__(self):
        self.statements = []
        self.rows = []
        self.rowcount = 1
        self.began = 0
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return RecordingCursor(self)

    def begin(self):
        self.began += 1

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class RecordingBackend(DBBackend):
    kind = "mysql"
    paramstyle = "format"
    supports_index_if_not_exists = False

    def __init__(self, address):
        super().__init__(address)
        self.raw = RecordingConnection()

    def connect(self):
        return self.raw

    def begin(self, raw_conn):
        raw_conn.begin()

    def table_exists(self, tx, name):
        return False

    def index_exists(self, tx, table, name):
        return False


class NetworkedSQLiteBackend(SQLiteBackend):
    """A scheme-addressed store that is really a local SQLite file."""


@pytest.fixture
def registry():
    reg = default_registry()
    reg.register("recording", RecordingBackend)
    reg.register("netdb", NetworkedSQLiteBackend)
    return reg


@pytest.fixture
def sqlite_conn(tmp_path):
    conn = open_connection(str(tmp_path / "db"))
    yield conn
    conn.close()


@pytest.fixture
def tx(sqlite_conn):
    tx = sqlite_conn.begin()
    yield tx
    if tx.active:
        tx.rollback()
