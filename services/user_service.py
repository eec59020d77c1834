"""
services/user_service.py
-------------------------
Business logic for registering and listing users.
"""

from models.user import User
from repositories.user_repo import UserRepository
from utils.errors import StorageError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class UserService:
    """
    Validates input and forwards to whichever repository it was built with.
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def register_user(self, name: str) -> None:
        """
        Register a new user.

        Raises:
            ValidationError: If `name` is empty (nothing is written).
            StorageError: If the repository fails to store the user.
        """
        if not name:
            raise ValidationError("user name cannot be empty")

        try:
            self.repo.create(User(name=name))
        except Exception as e:
            raise StorageError(f"failed to register user: {e}") from e
        logger.info(f"Registered user '{name}'")

    def list_users(self) -> list[User]:
        """Return all registered users."""
        try:
            return self.repo.get_all()
        except Exception as e:
            raise StorageError(f"failed to list users: {e}") from e
