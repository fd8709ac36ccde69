"""
Repository layer for Store persistence and the rating aggregates shown
alongside stores.

Averages are always ``ROUND(AVG(rating), 1)`` coalesced to 0 so a store
without ratings reports 0 instead of NULL.
"""
import sqlite3
from typing import Optional
import logging

from store_ratings.core.exceptions import Conflict
from store_ratings.core.logging_config import log_db_timing
from store_ratings.db.database import like_pattern
from store_ratings.models.store import Store

logger = logging.getLogger(__name__)

AVERAGE_SQL = "COALESCE(ROUND(AVG(r.rating), 1), 0)"


class StoreRepository:
    """Data access layer for store records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing StoreRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, store_id: int) -> Optional[Store]:
        row = self._conn.execute(
            "SELECT * FROM stores WHERE id = ?", (store_id,)
        ).fetchone()
        return Store.from_row(row) if row else None

    @log_db_timing
    def get_by_owner(self, owner_id: int) -> Optional[Store]:
        """Return the store assigned to *owner_id*, if any."""
        row = self._conn.execute(
            "SELECT * FROM stores WHERE owner_id = ?", (owner_id,)
        ).fetchone()
        return Store.from_row(row) if row else None

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) AS n FROM stores").fetchone()["n"]

    @log_db_timing
    def rating_summary(self, store_id: int) -> dict:
        """Return ``{"average_rating", "total_ratings"}`` for one store."""
        row = self._conn.execute(
            f"""
            SELECT {AVERAGE_SQL} AS average_rating,
                   COUNT(r.id)   AS total_ratings
            FROM ratings r
            WHERE r.store_id = ?
            """,
            (store_id,),
        ).fetchone()
        return {
            "average_rating": float(row["average_rating"]),
            "total_ratings": row["total_ratings"],
        }

    @log_db_timing
    def list_with_owner(self, search: Optional[str] = None) -> list[dict]:
        """
        Every store with its average rating, rating count and owner.

        Each dict has: id, name, email, address, average_rating,
        total_ratings, owner (dict with id/name/email, or None).
        """
        sql = f"""
            SELECT
                s.id            AS id,
                s.name          AS name,
                s.email         AS email,
                s.address       AS address,
                {AVERAGE_SQL}   AS average_rating,
                COUNT(r.id)     AS total_ratings,
                u.id            AS owner_id,
                u.name          AS owner_name,
                u.email         AS owner_email
            FROM stores s
            LEFT JOIN ratings r ON r.store_id = s.id
            LEFT JOIN users   u ON u.id       = s.owner_id
        """
        params: list = []
        if search:
            sql += " WHERE LOWER(s.name) LIKE ? ESCAPE '\\' OR LOWER(s.email) LIKE ? ESCAPE '\\'"
            pattern = like_pattern(search)
            params.extend([pattern, pattern])
        sql += " GROUP BY s.id ORDER BY s.id"

        result = []
        for r in self._conn.execute(sql, params).fetchall():
            owner = None
            if r["owner_id"] is not None:
                owner = {"id": r["owner_id"], "name": r["owner_name"], "email": r["owner_email"]}
            result.append(
                {
                    "id": r["id"],
                    "name": r["name"],
                    "email": r["email"],
                    "address": r["address"],
                    "average_rating": float(r["average_rating"]),
                    "total_ratings": r["total_ratings"],
                    "owner": owner,
                }
            )
        return result

    @log_db_timing
    def list_for_user(self, user_id: int, search: Optional[str] = None) -> list[dict]:
        """
        Every store with the overall average and *user_id*'s own rating.

        The caller's rating is a correlated subquery and plays no special
        part in the average.
        """
        sql = f"""
            SELECT
                s.id            AS id,
                s.name          AS name,
                s.address       AS address,
                {AVERAGE_SQL}   AS average_rating,
                COUNT(r.id)     AS total_ratings,
                (
                    SELECT mine.rating FROM ratings mine
                    WHERE mine.store_id = s.id AND mine.user_id = ?
                )               AS my_rating
            FROM stores s
            LEFT JOIN ratings r ON r.store_id = s.id
        """
        params: list = [user_id]
        if search:
            sql += (
                " WHERE LOWER(s.name) LIKE ? ESCAPE '\\'"
                " OR LOWER(COALESCE(s.address, '')) LIKE ? ESCAPE '\\'"
            )
            pattern = like_pattern(search)
            params.extend([pattern, pattern])
        sql += " GROUP BY s.id ORDER BY s.name, s.id"

        return [
            {
                "id": r["id"],
                "name": r["name"],
                "address": r["address"],
                "average_rating": float(r["average_rating"]),
                "total_ratings": r["total_ratings"],
                "my_rating": r["my_rating"],
            }
            for r in self._conn.execute(sql, params).fetchall()
        ]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        name: str,
        email: str,
        owner_id: int,
        address: Optional[str] = None,
    ) -> Store:
        """Insert a store. Duplicate email or an already-assigned owner raises Conflict."""
        logger.info("Creating store email=%s owner_id=%s", email, owner_id)
        try:
            cursor = self._conn.execute(
                """
                INSERT INTO stores (name, email, address, owner_id)
                VALUES (?, ?, ?, ?)
                """,
                (name, email, address, owner_id),
            )
        except sqlite3.IntegrityError as exc:
            message = str(exc)
            if "stores.email" in message:
                raise Conflict("Store email already exists") from exc
            if "stores.owner_id" in message:
                raise Conflict("Owner already has a store") from exc
            raise
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def unassign_owner(self, owner_id: int) -> int:
        cursor = self._conn.execute(
            "UPDATE stores SET owner_id = NULL WHERE owner_id = ?", (owner_id,)
        )
        return cursor.rowcount

    @log_db_timing
    def delete(self, store_id: int) -> bool:
        """Delete a store; its ratings go with it (ON DELETE CASCADE)."""
        logger.info("Deleting store id=%s", store_id)
        cursor = self._conn.execute("DELETE FROM stores WHERE id = ?", (store_id,))
        return cursor.rowcount > 0
