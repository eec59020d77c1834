"""
models/entity.py
----------------
Column descriptions for storage-backed records.

An entity is a dataclass that implements the classmethod
`describe_columns()`, returning one `Column` per field in declaration
order. The schema translator in `db/migrate.py` reads nothing else, so the
table layout is fixed in code rather than inferred from type annotations.
"""

from dataclasses import dataclass
from enum import Enum


class FieldType(str, Enum):
    """Semantic type of a persisted field."""
    INTEGER = "integer"
    STRING = "string"


@dataclass(frozen=True)
class Column:
    """
    Storage metadata for one entity field.

    Attributes:
        name: Column name in the table. An empty name keeps the field out
            of the schema.
        type: Semantic type, mapped to a backend column type on migration.
        primary: Whether the column is the table's primary key.
    """
    name: str
    type: FieldType
    primary: bool = False
