"""
repositories/mysql_repo.py
---------------------------
User repository backed by MySQL (PyMySQL).
"""

from db.dialects import MYSQL
from repositories.user_repo import SQLUserRepository


class MySQLUserRepository(SQLUserRepository):
    """Users table on MySQL; ids come from an AUTO_INCREMENT column."""

    dialect = MYSQL
