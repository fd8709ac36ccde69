"""
Admin store management endpoints:
  POST   /admin/stores        – Create a store and assign its owner
  GET    /admin/stores        – List stores with average rating and owner
  DELETE /admin/stores/{id}   – Delete a store and its ratings
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from store_ratings.core.dependencies import db_dependency, require_admin
from store_ratings.models.user import Identity
from store_ratings.schemas.store import AdminStoreResponse, StoreCreate, StoreResponse
from store_ratings.services.store_service import StoreService

router = APIRouter(prefix="/admin/stores", tags=["Admin: Stores"])


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a store",
)
def create_store(
    data: StoreCreate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    """
    `owner_id` must reference an account with role `owner` that does not
    already have a store. Store emails are unique.
    """
    return StoreService(conn).create_store(data)


@router.get(
    "",
    response_model=list[AdminStoreResponse],
    summary="List stores",
)
def list_stores(
    search: Optional[str] = Query(None, max_length=100, description="Match name or email"),
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return StoreService(conn).list_stores_admin(search=search)


@router.delete(
    "/{store_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a store",
)
def delete_store(
    store_id: int,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    StoreService(conn).delete_store(store_id)
