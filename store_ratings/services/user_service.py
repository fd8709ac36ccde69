"""
Admin user management: creation, listing, detail, role changes and deletion.

Business rules enforced here:
- Admins create only `user` or `owner` accounts; admins come from the seeder.
- Role changes are limited to user <-> owner and never touch an admin.
- An admin cannot delete their own account.
- The last remaining admin cannot be deleted.
"""
import sqlite3
from typing import Optional
import logging

from store_ratings.core.exceptions import InvalidOperation, NotFound, ValidationError
from store_ratings.core.security import hash_password
from store_ratings.models.user import ASSIGNABLE_ROLES, Identity, Role, User
from store_ratings.repositories.store_repository import StoreRepository
from store_ratings.repositories.user_repository import UserRepository
from store_ratings.schemas.user import AdminUserCreate

logger = logging.getLogger(__name__)


def _check_assignable(role: Role) -> None:
    if role not in ASSIGNABLE_ROLES:
        logger.warning("Rejected role assignment to %s", role.value)
        raise ValidationError("Invalid role")


class UserService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)
        self._store_repo = StoreRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        """Return a user or raise NotFound."""
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFound(f"User with id={user_id} not found")
        return user

    def get_user_detail(self, user_id: int) -> dict:
        """User fields plus, for owners, their store and its rating summary."""
        user = self.get_user(user_id)
        detail = {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "address": user.address,
            "role": user.role,
            "created_at": user.created_at,
            "store": None,
        }
        if user.role == Role.OWNER:
            store = self._store_repo.get_by_owner(user.id)
            if store is not None:
                detail["store"] = {
                    "id": store.id,
                    "name": store.name,
                    "email": store.email,
                    "address": store.address,
                    **self._store_repo.rating_summary(store.id),
                }
        return detail

    def list_users(
        self, role: Optional[Role] = None, search: Optional[str] = None
    ) -> list[User]:
        """
        List accounts for the admin console. Without *role* owners are left
        out (they are managed from the stores view); with *role* only that
        role is returned.
        """
        logger.info("Listing users role=%s search=%s", role, search)
        if role is None:
            return self._repo.list_users(exclude_role=Role.OWNER, search=search)
        return self._repo.list_users(role=role, search=search)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def create_user(self, data: AdminUserCreate) -> User:
        _check_assignable(data.role)
        user = self._repo.create(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            address=data.address,
        )
        logger.info("Admin created user id=%s role=%s", user.id, user.role.value)
        return user

    def change_role(self, user_id: int, role: Role) -> User:
        """
        Move a user between ``user`` and ``owner``. An owner demoted to
        ``user`` loses their store assignment in the same transaction.
        """
        _check_assignable(role)
        target = self.get_user(user_id)
        if target.role == Role.ADMIN:
            logger.warning("Refused role change on admin id=%s", user_id)
            raise InvalidOperation("Admin roles cannot be changed")
        if target.role == role:
            return target

        if target.role == Role.OWNER:
            released = self._store_repo.unassign_owner(user_id)
            logger.info("Unassigned %s store(s) from former owner id=%s", released, user_id)

        updated = self._repo.update_role(user_id, role)
        if updated is None:
            raise NotFound(f"User with id={user_id} not found")
        logger.info("User id=%s role changed to %s", user_id, role.value)
        return updated

    def delete_user(self, user_id: int, deleted_by: Identity) -> None:
        """Hard-delete a user; their ratings cascade, their store becomes unassigned."""
        if deleted_by.id == user_id:
            logger.warning("Admin id=%s attempted to delete themselves", user_id)
            raise InvalidOperation("You cannot delete your own account")

        target = self.get_user(user_id)
        if not self._repo.delete_unless_last_admin(user_id):
            if target.role == Role.ADMIN:
                logger.warning("Refused to delete last admin id=%s", user_id)
                raise InvalidOperation("Cannot delete the last remaining admin")
            raise NotFound(f"User with id={user_id} not found")
        logger.info("User id=%s deleted by admin id=%s", user_id, deleted_by.id)
