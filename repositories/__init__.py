"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL for a domain entity and returns
domain model objects. `build_user_repository` picks the implementation
for the configured backend.
"""

from db.connection import BackendKind
from db.dialects import MYSQL, POSTGRES
from repositories.mysql_repo import MySQLUserRepository
from repositories.postgres_repo import PostgresUserRepository
from repositories.user_repo import SQLUserRepository, UserRepository

DIALECTS = {
    BackendKind.POSTGRES: POSTGRES,
    BackendKind.MYSQL: MYSQL,
}

_REPOSITORIES = {
    BackendKind.POSTGRES: PostgresUserRepository,
    BackendKind.MYSQL: MySQLUserRepository,
}


def build_user_repository(kind: BackendKind, db_pool) -> UserRepository:
    """Construct (and migrate) the user repository for `kind`."""
    return _REPOSITORIES[kind](db_pool)


__all__ = [
    "DIALECTS",
    "MySQLUserRepository",
    "PostgresUserRepository",
    "SQLUserRepository",
    "UserRepository",
    "build_user_repository",
]
