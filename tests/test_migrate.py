"""
Tests for the column-description based table migration.
"""

from dataclasses import dataclass

import pytest

from db.dialects import MYSQL, POSTGRES
from db.migrate import (
    TableSchema,
    apply_schema,
    auto_migrate,
    column_type,
    create_table_sql,
    derive_schema,
    table_name,
)
from models.entity import Column, FieldType
from models.user import User
from utils.errors import SchemaError, StorageError


@dataclass
class Person:
    id: int = 0
    nickname: str = ""
    scratch: str = ""

    @classmethod
    def describe_columns(cls):
        return (
            Column("id", FieldType.INTEGER, primary=True),
            Column("nickname", FieldType.STRING),
            Column("", FieldType.STRING),
        )


@dataclass
class Unmapped:
    blob: bytes = b""

    @classmethod
    def describe_columns(cls):
        return (Column("blob", "bytes"),)


@dataclass
class NothingStored:
    cache: str = ""

    @classmethod
    def describe_columns(cls):
        return (Column("", FieldType.STRING),)


@dataclass
class Tag:
    slug: str = ""
    uses: int = 0

    @classmethod
    def describe_columns(cls):
        return (
            Column("slug", FieldType.STRING, primary=True),
            Column("uses", FieldType.INTEGER),
        )


class NotADataclass:
    @classmethod
    def describe_columns(cls):
        return (Column("id", FieldType.INTEGER, primary=True),)


@dataclass
class NoDescription:
    id: int = 0


@pytest.mark.parametrize(
    "dialect, field_type, primary, expected",
    [
        (POSTGRES, FieldType.INTEGER, True, "BIGSERIAL"),
        (POSTGRES, FieldType.INTEGER, False, "BIGINT"),
        (POSTGRES, FieldType.STRING, False, "TEXT"),
        (POSTGRES, FieldType.STRING, True, "TEXT"),
        (MYSQL, FieldType.INTEGER, True, "BIGINT AUTO_INCREMENT"),
        (MYSQL, FieldType.INTEGER, False, "BIGINT"),
        (MYSQL, FieldType.STRING, False, "TEXT"),
        (MYSQL, FieldType.STRING, True, "VARCHAR(255)"),
    ],
)
def test_column_type_mapping(dialect, field_type, primary, expected):
    assert column_type(field_type, dialect, primary) == expected


@pytest.mark.parametrize("bad_type", ["uuid", None, ["integer"]])
def test_column_type_rejects_unsupported(bad_type):
    with pytest.raises(SchemaError, match="unsupported field type"):
        column_type(bad_type, POSTGRES)


def test_derive_user_schema_postgres():
    schema = derive_schema(User, POSTGRES)

    assert schema == TableSchema(
        table="users",
        columns=("id BIGSERIAL PRIMARY KEY", "name TEXT"),
    )


def test_derive_user_schema_mysql():
    schema = derive_schema(User, MYSQL)

    assert schema.columns == ("id BIGINT AUTO_INCREMENT PRIMARY KEY", "name TEXT")


@pytest.mark.parametrize(
    "dialect, expected",
    [
        (POSTGRES, ("slug TEXT PRIMARY KEY", "uses BIGINT")),
        (MYSQL, ("slug VARCHAR(255) PRIMARY KEY", "uses BIGINT")),
    ],
)
def test_derive_schema_string_primary_key(dialect, expected):
    schema = derive_schema(Tag, dialect)

    assert schema.table == "tags"
    assert schema.columns == expected


def test_derive_schema_accepts_instances():
    assert derive_schema(User(name="x"), POSTGRES) == derive_schema(User, POSTGRES)


def test_derive_schema_skips_unnamed_columns_and_keeps_order():
    schema = derive_schema(Person, POSTGRES)

    assert schema.table == "persons"
    assert schema.columns == ("id BIGSERIAL PRIMARY KEY", "nickname TEXT")


def test_derive_schema_is_deterministic():
    assert derive_schema(User, MYSQL) == derive_schema(User, MYSQL)


@pytest.mark.parametrize("entity", [42, "users", NotADataclass, NoDescription])
def test_derive_schema_rejects_non_entities(entity):
    with pytest.raises(SchemaError, match="is not an entity"):
        derive_schema(entity, POSTGRES)


def test_derive_schema_unsupported_type_is_schema_error():
    with pytest.raises(SchemaError, match="'bytes'"):
        derive_schema(Unmapped, POSTGRES)


def test_derive_schema_requires_a_persisted_column():
    with pytest.raises(SchemaError, match="no persisted columns"):
        derive_schema(NothingStored, POSTGRES)


def test_table_name_is_naive_plural():
    assert table_name(User) == "users"
    assert table_name(Person) == "persons"


def test_create_table_sql():
    schema = TableSchema(table="users", columns=("id BIGSERIAL PRIMARY KEY", "name TEXT"))

    assert create_table_sql(schema) == (
        "CREATE TABLE IF NOT EXISTS users (id BIGSERIAL PRIMARY KEY, name TEXT);"
    )


def test_apply_schema_is_idempotent(fake_pool, fake_db):
    schema = derive_schema(User, POSTGRES)

    apply_schema(fake_pool, schema)
    apply_schema(fake_pool, schema)

    assert fake_db.tables_created == 1
    assert list(fake_db.tables) == ["users"]
    assert fake_db.commits == 2
    assert fake_pool.borrowed == fake_pool.released == 2


def test_apply_schema_failure_is_surfaced(fake_pool, fake_db):
    cause = RuntimeError("permission denied for schema public")
    fake_db.fail_on["CREATE"] = cause

    with pytest.raises(StorageError, match="permission denied") as excinfo:
        apply_schema(fake_pool, derive_schema(User, POSTGRES))

    assert excinfo.value.__cause__ is cause
    assert fake_db.rollbacks == 1
    assert fake_pool.released == 1


def test_auto_migrate_returns_applied_schema(fake_pool, fake_db):
    schema = auto_migrate(fake_pool, User, MYSQL)

    assert schema.table == "users"
    assert fake_db.statements == [
        "CREATE TABLE IF NOT EXISTS users "
        "(id BIGINT AUTO_INCREMENT PRIMARY KEY, name TEXT);"
    ]


def test_auto_migrate_does_not_touch_db_on_schema_error(fake_pool, fake_db):
    with pytest.raises(SchemaError):
        auto_migrate(fake_pool, Unmapped, POSTGRES)

    assert fake_db.statements == []
    assert fake_pool.borrowed == 0
