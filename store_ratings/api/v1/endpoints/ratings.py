"""
Regular user endpoints:
  GET  /user/stores    – All stores with average rating and the caller's own rating
  POST /user/ratings   – Rate a store (201 first time, 200 when updating)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from store_ratings.core.dependencies import db_dependency, require_user
from store_ratings.models.user import Identity
from store_ratings.schemas.rating import RatingResponse, RatingSubmit
from store_ratings.schemas.store import UserStoreResponse
from store_ratings.services.rating_service import RatingService
from store_ratings.services.store_service import StoreService

router = APIRouter(prefix="/user", tags=["User"])


@router.get(
    "/stores",
    response_model=list[UserStoreResponse],
    summary="Browse stores",
)
def list_stores(
    search: Optional[str] = Query(None, max_length=100, description="Match name or address"),
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_user),
):
    return StoreService(conn).list_stores_for_user(identity.id, search=search)


@router.post(
    "/ratings",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={200: {"description": "Existing rating updated"}},
    summary="Submit or update a rating",
)
def rate_store(
    data: RatingSubmit,
    response: Response,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_user),
):
    """
    One rating per user per store: submitting again overwrites the value
    and refreshes its timestamp.
    """
    rating, created = RatingService(conn).rate_store(identity.id, data.store_id, data.rating)
    if not created:
        response.status_code = status.HTTP_200_OK
    return RatingResponse(
        message="Rating submitted successfully" if created else "Rating updated successfully",
        store_id=rating.store_id,
        rating=rating.rating,
        rated_at=rating.rated_at,
    )
