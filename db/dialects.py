"""
db/dialects.py
--------------
Per-backend SQL differences: column type tokens and the parameter
placeholder understood by the driver.

Both psycopg2 and PyMySQL follow the DB-API "format" paramstyle, so the
placeholder is `%s` for either backend; it is still kept on the dialect
so statements are never assembled with a hard-coded marker.
"""

from dataclasses import dataclass, field

from models.entity import FieldType


@dataclass(frozen=True)
class Dialect:
    """
    SQL flavour of one backend.

    Attributes:
        name: Short backend name used in log lines.
        placeholder: Parameter marker for the driver.
        primary_key_types: Column type per field type for primary keys
            (auto-incrementing where the field is an integer).
        column_types: Column type per field type for all other columns.
    """
    name: str
    placeholder: str
    primary_key_types: dict = field(default_factory=dict)
    column_types: dict = field(default_factory=dict)


POSTGRES = Dialect(
    name="postgres",
    placeholder="%s",
    primary_key_types={
        FieldType.INTEGER: "BIGSERIAL",
        FieldType.STRING: "TEXT",
    },
    column_types={
        FieldType.INTEGER: "BIGINT",
        FieldType.STRING: "TEXT",
    },
)

MYSQL = Dialect(
    name="mysql",
    placeholder="%s",
    primary_key_types={
        FieldType.INTEGER: "BIGINT AUTO_INCREMENT",
        # MySQL cannot index an unbounded TEXT column as a key.
        FieldType.STRING: "VARCHAR(255)",
    },
    column_types={
        FieldType.INTEGER: "BIGINT",
        FieldType.STRING: "TEXT",
    },
)
