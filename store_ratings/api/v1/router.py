"""
Central v1 API router – registers all endpoint sub-routers.
"""
from fastapi import APIRouter
import logging

from store_ratings.api.v1.endpoints import auth, owner, ratings, reports, stores, users

logger = logging.getLogger(__name__)

api_router = APIRouter(prefix="/api/v1")


@api_router.get("/health", tags=["Health"], summary="Liveness probe")
def health() -> dict:
    return {"status": "OK", "message": "Store Ratings API is running"}


logger.info("Registering v1 API routers")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(stores.router)
api_router.include_router(reports.router)
api_router.include_router(owner.router)
api_router.include_router(ratings.router)
