"""
Admin user management endpoints:
  POST   /admin/users              – Create a `user` or `owner` account
  GET    /admin/users              – List accounts (owners only with ?role=owner)
  GET    /admin/users/{id}         – User detail, plus store summary for owners
  PATCH  /admin/users/{id}/role    – Move a user between `user` and `owner`
  DELETE /admin/users/{id}         – Delete a user (not yourself, not the last admin)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from store_ratings.core.dependencies import db_dependency, require_admin
from store_ratings.models.user import Identity, Role
from store_ratings.schemas.user import (
    AdminUserCreate,
    RoleUpdate,
    UserDetailResponse,
    UserResponse,
)
from store_ratings.services.user_service import UserService

router = APIRouter(prefix="/admin/users", tags=["Admin: Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user or store owner",
)
def create_user(
    data: AdminUserCreate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    """`role` must be `user` or `owner`; admin accounts cannot be created here."""
    return UserService(conn).create_user(data)


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List user accounts",
)
def list_users(
    role: Optional[Role] = Query(None, description="Only return accounts with this role"),
    search: Optional[str] = Query(None, max_length=100, description="Match name or email"),
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    """
    Without `role`, store owners are omitted (they are listed with their
    stores). Pass `?role=owner` to pick an owner for a new store.
    """
    return UserService(conn).list_users(role=role, search=search)


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    summary="Get a user's details",
)
def get_user(
    user_id: int,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return UserService(conn).get_user_detail(user_id)


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    summary="Change a user's role (user <-> owner)",
)
def change_role(
    user_id: int,
    data: RoleUpdate,
    conn=Depends(db_dependency),
    _: Identity = Depends(require_admin),
):
    return UserService(conn).change_role(user_id, data.role)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(
    user_id: int,
    conn=Depends(db_dependency),
    identity: Identity = Depends(require_admin),
):
    """
    Permanently removes the account and its ratings. Refused for the
    caller's own account and for the last remaining admin.
    """
    UserService(conn).delete_user(user_id, deleted_by=identity)
