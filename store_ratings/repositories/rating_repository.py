"""
Repository layer for Rating persistence.
All SQL for the `ratings` table lives here.

Design rules enforced at DB level:
  - (user_id, store_id) is UNIQUE  →  one rating per user per store.
  - 1 <= rating <= 5                →  enforced by a CHECK constraint.
"""
import sqlite3
from datetime import datetime, timezone
from typing import Optional
import logging

from store_ratings.core.exceptions import NotFound
from store_ratings.core.logging_config import log_db_timing
from store_ratings.models.rating import Rating

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="microseconds")


class RatingRepository:
    """Data access layer for rating records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing RatingRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get(self, user_id: int, store_id: int) -> Optional[Rating]:
        """Return the rating *user_id* gave *store_id*, if any."""
        row = self._conn.execute(
            "SELECT * FROM ratings WHERE user_id = ? AND store_id = ?",
            (user_id, store_id),
        ).fetchone()
        return Rating.from_row(row) if row else None

    @log_db_timing
    def list_for_store(self, store_id: int) -> list[dict]:
        """Ratings for a store with the rater's name, newest first."""
        rows = self._conn.execute(
            """
            SELECT
                r.id        AS id,
                r.user_id   AS user_id,
                u.name      AS user_name,
                u.email     AS user_email,
                r.rating    AS rating,
                r.rated_at  AS rated_at
            FROM ratings r
            JOIN users u ON u.id = r.user_id
            WHERE r.store_id = ?
            ORDER BY r.rated_at DESC, r.id DESC
            """,
            (store_id,),
        ).fetchall()
        return [dict(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) AS n FROM ratings").fetchone()["n"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def upsert(self, user_id: int, store_id: int, rating: int) -> tuple[Rating, bool]:
        """
        Insert the rating or, if the pair already rated, overwrite the value
        and refresh the timestamp.

        Returns the stored rating and whether this call inserted it. The
        insert reports that itself, so of two concurrent first ratings for
        the same pair exactly one counts as created.
        """
        logger.info("Upserting rating user_id=%s store_id=%s", user_id, store_id)
        rated_at = _timestamp()
        try:
            cursor = self._conn.execute(
                """
                INSERT INTO ratings (user_id, store_id, rating, rated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id, store_id) DO NOTHING
                """,
                (user_id, store_id, rating, rated_at),
            )
        except sqlite3.IntegrityError as exc:
            if "FOREIGN KEY" in str(exc):
                raise NotFound("User or store not found") from exc
            raise

        created = cursor.rowcount == 1
        if not created:
            self._conn.execute(
                """
                UPDATE ratings SET rating = ?, rated_at = ?
                WHERE user_id = ? AND store_id = ?
                """,
                (rating, rated_at, user_id, store_id),
            )
        return self.get(user_id, store_id), created  # type: ignore[return-value]
