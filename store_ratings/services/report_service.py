"""
Admin reporting: platform totals and CSV exports of users and stores.
"""
import csv
import io
import sqlite3
import logging

from store_ratings.repositories.rating_repository import RatingRepository
from store_ratings.repositories.store_repository import StoreRepository
from store_ratings.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

USER_REPORT_HEADER = ["ID", "Name", "Email", "Role"]
STORE_REPORT_HEADER = ["ID", "Store Name", "Owner", "Rating"]


def _to_csv(header: list[str], rows: list[list]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


class ReportService:
    """Read-only aggregates for the admin console."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ReportService")
        self._user_repo = UserRepository(conn)
        self._store_repo = StoreRepository(conn)
        self._rating_repo = RatingRepository(conn)

    def dashboard_totals(self) -> dict:
        totals = {
            "total_users": self._user_repo.count(),
            "total_stores": self._store_repo.count(),
            "total_ratings": self._rating_repo.count(),
        }
        logger.info("Dashboard totals %s", totals)
        return totals

    def users_csv(self) -> str:
        """Every account, owners and admins included."""
        users = self._user_repo.list_users()
        logger.info("Exporting %s users to CSV", len(users))
        return _to_csv(
            USER_REPORT_HEADER,
            [[u.id, u.name, u.email, u.role.value] for u in users],
        )

    def stores_csv(self) -> str:
        """Every store with its owner name (``N/A`` if unassigned) and average."""
        stores = self._store_repo.list_with_owner()
        logger.info("Exporting %s stores to CSV", len(stores))
        return _to_csv(
            STORE_REPORT_HEADER,
            [
                [
                    s["id"],
                    s["name"],
                    s["owner"]["name"] if s["owner"] else "N/A",
                    s["average_rating"],
                ]
                for s in stores
            ],
        )
