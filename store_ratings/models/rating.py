"""
Domain model representing a Rating row.
A rating belongs to exactly one (user, store) pair.
"""
from dataclasses import dataclass
from datetime import datetime

MIN_RATING = 1
MAX_RATING = 5


@dataclass
class Rating:
    id: int
    user_id: int
    store_id: int
    rating: int
    rated_at: datetime

    @classmethod
    def from_row(cls, row) -> "Rating":
        """Build a Rating from a sqlite3.Row object."""
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            store_id=row["store_id"],
            rating=row["rating"],
            rated_at=datetime.fromisoformat(row["rated_at"]),
        )
