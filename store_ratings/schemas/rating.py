"""
Pydantic schemas for ratings and the owner dashboard.
"""
from pydantic import BaseModel, Field
from datetime import datetime

from store_ratings.models.rating import MAX_RATING, MIN_RATING
from store_ratings.schemas.store import StoreResponse


class RatingSubmit(BaseModel):
    store_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING, strict=True)


class RatingResponse(BaseModel):
    message: str
    store_id: int
    rating: int
    rated_at: datetime


class StoreRatingEntry(BaseModel):
    id: int
    user_id: int
    user_name: str
    user_email: str
    rating: int
    rated_at: datetime


class OwnerDashboardResponse(BaseModel):
    store: StoreResponse
    average_rating: float
    total_ratings: int
    ratings: list[StoreRatingEntry]


class AdminDashboardResponse(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int
