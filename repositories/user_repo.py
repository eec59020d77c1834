"""
repositories/user_repo.py
--------------------------
Data access layer for user records.

`UserRepository` is the contract the service layer depends on.
`SQLUserRepository` implements it for any DB-API backend; the Postgres and
MySQL subclasses only choose the dialect.
"""

from abc import ABC, abstractmethod

from db.connection import pooled_connection
from db.dialects import Dialect
from db.migrate import auto_migrate
from models.user import User
from utils.errors import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository(ABC):
    """Storage operations the user service needs."""

    @abstractmethod
    def create(self, user: User) -> None:
        """Persist a new user. The backend assigns the id."""

    @abstractmethod
    def get_all(self) -> list[User]:
        """Return every stored user, in the backend's default order."""


class SQLUserRepository(UserRepository):
    """
    Repository for the users table over a connection pool.

    The table is migrated when the repository is built; if that fails the
    constructor raises and no repository exists.
    """

    dialect: Dialect

    def __init__(self, db_pool):
        self.pool = db_pool
        self.table = auto_migrate(db_pool, User, self.dialect).table

    # ── CREATE ────────────────────────────────────────────

    def create(self, user: User) -> None:
        """
        Insert a new user row.

        Raises:
            StorageError: If the insert fails (the transaction is rolled back).
        """
        sql = f"INSERT INTO {self.table} (name) VALUES ({self.dialect.placeholder})"
        with pooled_connection(self.pool) as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql, (user.name,))
                    inserted = cur.rowcount
                conn.commit()
            except Exception as e:
                conn.rollback()
                logger.error(f"Failed to insert user '{user.name}': {e}")
                raise StorageError(f"failed to insert user: {e}") from e
        logger.info(f"Inserted rows: {inserted}")

    # ── READ ──────────────────────────────────────────────

    def get_all(self) -> list[User]:
        """
        Fetch all users.

        Returns:
            List of User objects; empty if the table has no rows.

        Raises:
            StorageError: If the query fails or any row cannot be decoded.
                No partial list is returned.
        """
        sql = f"SELECT id, name FROM {self.table}"
        with pooled_connection(self.pool) as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(sql)
                    rows = cur.fetchall()
            except Exception as e:
                logger.error(f"Failed to query users: {e}")
                raise StorageError(f"failed to query users: {e}") from e

        try:
            return [self._row_to_user(r) for r in rows]
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to scan user: {e}")
            raise StorageError(f"failed to scan user: {e}") from e

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_user(row: tuple) -> User:
        """Convert an (id, name) row into a User, rejecting malformed rows."""
        if len(row) != 2:
            raise ValueError(f"expected 2 columns, got {len(row)}")
        user_id, name = row
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise TypeError(f"id must be an integer, got {user_id!r}")
        if not isinstance(name, str):
            raise TypeError(f"name must be a string, got {name!r}")
        return User(id=user_id, name=name)
