"""
Store owner endpoints:
  GET /owner/dashboard   – The owner's store, its ratings and average rating
"""
from fastapi import APIRouter, Depends

from store_ratings.core.dependencies import db_dependency, require_owner
from store_ratings.models.user import Identity
from store_ratings.schemas.rating import OwnerDashboardResponse
from store_ratings.services.store_service import StoreService

router = APIRouter(prefix="/owner", tags=["Owner"])


@router.get(
    "/dashboard",
    response_model=OwnerDashboardResponse,
    summary="Owner dashboard",
)
def owner_dashboard(
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_owner),
):
    """
    Ratings are listed newest first with the rater's name. The average is
    rounded to one decimal and is 0 while the store has no ratings.
    """
    return StoreService(conn).owner_dashboard(identity.id)
