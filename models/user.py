"""
models/user.py
--------------
Domain model for registered users.
"""

from dataclasses import dataclass
from typing import Optional

from models.entity import Column, FieldType


@dataclass
class User:
    """
    Represents a registered user.

    Attributes:
        id: Database primary key, assigned by the backend (None for new records).
        name: Display name.
    """
    id: Optional[int] = None
    name: str = ""

    @classmethod
    def describe_columns(cls) -> tuple[Column, ...]:
        return (
            Column("id", FieldType.INTEGER, primary=True),
            Column("name", FieldType.STRING),
        )
