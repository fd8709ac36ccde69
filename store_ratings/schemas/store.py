"""
Pydantic schemas for Store request/response validation.
"""
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import Optional

from store_ratings.schemas.user import ADDRESS_MAX_LENGTH


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    address: Optional[str] = Field(None, max_length=ADDRESS_MAX_LENGTH)
    owner_id: int = Field(..., gt=0)


class StoreResponse(BaseModel):
    id: int
    name: str
    email: str
    address: Optional[str]
    owner_id: Optional[int]
    created_at: datetime

    model_config = {"from_attributes": True}


class StoreOwner(BaseModel):
    id: int
    name: str
    email: str


class AdminStoreResponse(BaseModel):
    """Store row in the admin listing."""

    id: int
    name: str
    email: str
    address: Optional[str]
    average_rating: float
    total_ratings: int
    owner: Optional[StoreOwner]


class UserStoreResponse(BaseModel):
    """Store row as seen by a regular user, with their own rating if any."""

    id: int
    name: str
    address: Optional[str]
    average_rating: float
    total_ratings: int
    my_rating: Optional[int]
