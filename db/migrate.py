"""
db/migrate.py
-------------
Creates an entity's table from its column description.

    schema = derive_schema(User, POSTGRES)
    # TableSchema(table='users', columns=('id BIGSERIAL PRIMARY KEY', 'name TEXT'))
    apply_schema(pool, schema)
    # CREATE TABLE IF NOT EXISTS users (id BIGSERIAL PRIMARY KEY, name TEXT);

The statement uses IF NOT EXISTS, so applying the same schema again is a
no-op. Existing tables are never altered.

Run this module directly to migrate the configured database:
    python -m db.migrate
"""

import dataclasses
from dataclasses import dataclass

from db.connection import pooled_connection
from db.dialects import Dialect
from models.entity import Column
from utils.errors import SchemaError, StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TableSchema:
    """Table name plus its column definitions, in declaration order."""
    table: str
    columns: tuple[str, ...]


def column_type(field_type, dialect: Dialect, primary: bool = False) -> str:
    """
    Map a semantic field type to the backend's column type.

    Raises:
        SchemaError: If the dialect has no mapping for `field_type`.
    """
    types = dialect.primary_key_types if primary else dialect.column_types
    try:
        return types[field_type]
    except (KeyError, TypeError):
        raise SchemaError(
            f"unsupported field type {field_type!r} for {dialect.name}"
        ) from None


def table_name(entity_type: type) -> str:
    # Naive plural: 'User' -> 'users', 'Person' -> 'persons'.
    return entity_type.__name__.lower() + "s"


def _entity_columns(entity) -> tuple[type, tuple[Column, ...]]:
    entity_type = entity if isinstance(entity, type) else type(entity)
    describe = getattr(entity_type, "describe_columns", None)
    if not dataclasses.is_dataclass(entity_type) or not callable(describe):
        raise SchemaError(
            f"{entity_type.__name__} is not an entity: expected a dataclass "
            "implementing describe_columns()"
        )
    return entity_type, tuple(describe())


def derive_schema(entity, dialect: Dialect) -> TableSchema:
    """
    Build the table definition for an entity class (or instance).

    Columns with an empty name are left out. Primary columns get the
    dialect's key type followed by PRIMARY KEY.

    Raises:
        SchemaError: If `entity` is not an entity, a column type is
            unsupported, or no column is left to persist.
    """
    entity_type, columns = _entity_columns(entity)

    definitions = []
    for col in columns:
        if not col.name:
            continue
        definition = f"{col.name} {column_type(col.type, dialect, col.primary)}"
        if col.primary:
            definition += " PRIMARY KEY"
        definitions.append(definition)

    if not definitions:
        raise SchemaError(f"{entity_type.__name__} has no persisted columns")

    return TableSchema(table=table_name(entity_type), columns=tuple(definitions))


def create_table_sql(schema: TableSchema) -> str:
    return f"CREATE TABLE IF NOT EXISTS {schema.table} ({', '.join(schema.columns)});"


def apply_schema(db_pool, schema: TableSchema) -> None:
    """
    Execute the CREATE TABLE IF NOT EXISTS statement for `schema`.

    Raises:
        StorageError: If the statement fails; the transaction is rolled back
            and the driver error is kept as `__cause__`.
    """
    sql = create_table_sql(schema)
    with pooled_connection(db_pool) as conn:
        try:
            with conn.cursor() as cur:
                cur.execute(sql)
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to migrate table '{schema.table}': {e}")
            raise StorageError(f"failed to migrate {schema.table}: {e}") from e
    logger.info(f"Table '{schema.table}' is up to date.")


def auto_migrate(db_pool, entity, dialect: Dialect) -> TableSchema:
    """Derive the entity's schema and apply it. Returns the applied schema."""
    schema = derive_schema(entity, dialect)
    apply_schema(db_pool, schema)
    return schema


if __name__ == "__main__":
    import config
    from db.connection import BackendKind, DatabaseConfig, open_pool
    from models.user import User
    from repositories import DIALECTS

    kind = BackendKind.parse(config.DB_BACKEND)
    db_pool = open_pool(kind, DatabaseConfig.from_env())
    try:
        applied = auto_migrate(db_pool, User, DIALECTS[kind])
    finally:
        db_pool.closeall()
    print(f"Migrated table '{applied.table}' on {kind.value}.")
