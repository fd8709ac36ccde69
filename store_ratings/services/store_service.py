"""
Store management and the store-facing read models.

Business rules:
  - A store needs an existing owner account (role `owner`).
  - An owner holds at most one store.
  - Store emails are unique.
"""
import sqlite3
from typing import Optional
import logging

from store_ratings.core.exceptions import Conflict, NotFound, ValidationError
from store_ratings.models.store import Store
from store_ratings.models.user import Role
from store_ratings.repositories.rating_repository import RatingRepository
from store_ratings.repositories.store_repository import StoreRepository
from store_ratings.repositories.user_repository import UserRepository
from store_ratings.schemas.store import StoreCreate

logger = logging.getLogger(__name__)


class StoreService:
    """Business logic for stores."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing StoreService")
        self._repo = StoreRepository(conn)
        self._user_repo = UserRepository(conn)
        self._rating_repo = RatingRepository(conn)

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def create_store(self, data: StoreCreate) -> Store:
        logger.info("Creating store email=%s owner_id=%s", data.email, data.owner_id)
        owner = self._user_repo.get_by_id(data.owner_id)
        if owner is None:
            logger.warning("Owner id=%s not found for new store", data.owner_id)
            raise NotFound(f"Owner with id={data.owner_id} not found")
        if owner.role != Role.OWNER:
            logger.warning("User id=%s is not an owner", data.owner_id)
            raise ValidationError("Assigned user is not a store owner")
        if self._repo.get_by_owner(owner.id) is not None:
            logger.warning("Owner id=%s already has a store", owner.id)
            raise Conflict("Owner already has a store")

        store = self._repo.create(
            name=data.name,
            email=data.email,
            owner_id=owner.id,
            address=data.address,
        )
        logger.info("Store created id=%s", store.id)
        return store

    def list_stores_admin(self, search: Optional[str] = None) -> list[dict]:
        logger.info("Listing stores for admin search=%s", search)
        return self._repo.list_with_owner(search=search)

    def delete_store(self, store_id: int) -> None:
        if not self._repo.delete(store_id):
            logger.warning("Store id=%s not found for deletion", store_id)
            raise NotFound(f"Store with id={store_id} not found")
        logger.info("Store deleted id=%s", store_id)

    # ------------------------------------------------------------------
    # User / owner views
    # ------------------------------------------------------------------

    def list_stores_for_user(self, user_id: int, search: Optional[str] = None) -> list[dict]:
        logger.info("Listing stores for user id=%s", user_id)
        return self._repo.list_for_user(user_id, search=search)

    def owner_dashboard(self, owner_id: int) -> dict:
        """The owner's store, its ratings (newest first) and the average."""
        store = self._repo.get_by_owner(owner_id)
        if store is None:
            logger.warning("No store found for owner id=%s", owner_id)
            raise NotFound("No store found for this owner")

        summary = self._repo.rating_summary(store.id)
        return {
            "store": store,
            "average_rating": summary["average_rating"],
            "total_ratings": summary["total_ratings"],
            "ratings": self._rating_repo.list_for_store(store.id),
        }
