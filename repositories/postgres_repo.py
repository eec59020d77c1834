"""
repositories/postgres_repo.py
------------------------------
User repository backed by PostgreSQL (psycopg2).
"""

from db.dialects import POSTGRES
from repositories.user_repo import SQLUserRepository


class PostgresUserRepository(SQLUserRepository):
    """Users table on PostgreSQL; ids come from a BIGSERIAL column."""

    dialect = POSTGRES
