"""Rating submission: one rating per user per store, later submissions overwrite."""
import sqlite3
import logging

from store_ratings.core.exceptions import NotFound, ValidationError
from store_ratings.models.rating import MAX_RATING, MIN_RATING, Rating
from store_ratings.repositories.rating_repository import RatingRepository
from store_ratings.repositories.store_repository import StoreRepository

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing RatingService")
        self._repo = RatingRepository(conn)
        self._store_repo = StoreRepository(conn)

    def rate_store(self, user_id: int, store_id: int, rating: int) -> tuple[Rating, bool]:
        """
        Record *rating* for (user, store).

        Returns the stored rating and ``True`` when this was the user's first
        rating for the store, ``False`` when an earlier one was overwritten.
        """
        if isinstance(rating, bool) or not MIN_RATING <= rating <= MAX_RATING:
            logger.warning("Rejected rating %s from user id=%s", rating, user_id)
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")

        if self._store_repo.get_by_id(store_id) is None:
            logger.warning("Rating for missing store id=%s", store_id)
            raise NotFound(f"Store with id={store_id} not found")

        stored, created = self._repo.upsert(user_id, store_id, rating)
        logger.info(
            "Rating %s by user id=%s for store id=%s value=%s",
            "created" if created else "updated",
            user_id,
            store_id,
            rating,
        )
        return stored, created
