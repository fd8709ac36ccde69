"""
Domain model representing a Store row.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Store:
    id: int
    name: str
    email: str
    created_at: datetime
    address: Optional[str] = None
    owner_id: Optional[int] = None

    def __post_init__(self) -> None:
        """Log the creation of the Store model instance."""
        import logging

        logger = logging.getLogger(__name__)
        logger.trace("Initialized Store model id=%s", self.id)

    @classmethod
    def from_row(cls, row) -> "Store":
        """Build a Store from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            address=row["address"],
            owner_id=row["owner_id"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
