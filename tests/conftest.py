"""
Shared test doubles: an in-memory stand-in for a DB-API connection pool
that understands the statements the repositories emit.
"""

import pytest


class FakeDatabase:
    """Tables as lists of (id, name) rows, plus call counters."""

    def __init__(self):
        self.tables: dict[str, list[tuple]] = {}
        self.statements: list[str] = []
        self.tables_created = 0
        self.commits = 0
        self.rollbacks = 0
        self.fail_on: dict[str, Exception] = {}
        self._next_id = 1

    def execute(self, sql: str, params=None):
        self.statements.append(sql)
        tokens = sql.replace("(", " ( ").split()
        verb = tokens[0].upper()
        if verb in self.fail_on:
            raise self.fail_on[verb]

        if verb == "CREATE":
            table = tokens[5]
            if table not in self.tables:
                self.tables[table] = []
                self.tables_created += 1
            return [], 0
        if verb == "INSERT":
            table = self._existing(tokens[2])
            self.tables[table].append((self._next_id, params[0]))
            self._next_id += 1
            return [], 1
        if verb == "SELECT":
            table = self._existing(tokens[tokens.index("FROM") + 1])
            return list(self.tables[table]), -1
        raise NotImplementedError(sql)

    def _existing(self, table: str) -> str:
        if table not in self.tables:
            raise RuntimeError(f'relation "{table}" does not exist')
        return table


class FakeCursor:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.rowcount = -1
        self._rows: list = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self._rows, self.rowcount = self.db.execute(sql, params)

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self.db = db

    def cursor(self):
        return FakeCursor(self.db)

    def commit(self):
        self.db.commits += 1

    def rollback(self):
        self.db.rollbacks += 1


class FakePool:
    """Same surface as psycopg2's SimpleConnectionPool."""

    def __init__(self, db: FakeDatabase):
        self.db = db
        self.borrowed = 0
        self.released = 0
        self.closed = False

    def getconn(self):
        self.borrowed += 1
        return FakeConnection(self.db)

    def putconn(self, conn):
        self.released += 1

    def closeall(self):
        self.closed = True


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_pool(fake_db):
    return FakePool(fake_db)
