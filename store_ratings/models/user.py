"""
Domain model (plain Python dataclass) representing a User row from the DB.
This is the internal representation used across service and repository layers.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    ADMIN = "admin"
    OWNER = "owner"
    USER = "user"


# Roles an admin may hand out when creating or re-assigning an account.
ASSIGNABLE_ROLES = frozenset({Role.USER, Role.OWNER})


@dataclass
class User:
    id: int
    name: str
    email: str
    password_hash: str
    role: Role
    created_at: datetime
    address: Optional[str] = None
    reset_token: Optional[str] = None
    reset_token_expiry: Optional[int] = None

    def __post_init__(self) -> None:
        import logging

        logger = logging.getLogger(__name__)
        logger.trace("Initialized User model id=%s", self.id)

    @classmethod
    def from_row(cls, row) -> "User":
        """Build a User from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            password_hash=row["password_hash"],
            address=row["address"],
            role=Role(row["role"]),
            reset_token=row["reset_token"],
            reset_token_expiry=row["reset_token_expiry"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


@dataclass(frozen=True)
class Identity:
    """Who is calling, as resolved from a verified access token."""

    id: int
    role: Role
