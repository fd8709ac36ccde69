"""
FastAPI dependency injection helpers for authentication and authorisation.
"""
from typing import Generator, Optional
import sqlite3

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
import logging

from store_ratings.core.exceptions import Forbidden, InvalidToken, Unauthorized
from store_ratings.core.security import decode_token
from store_ratings.models.user import Identity, Role
from store_ratings.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency(request: Request) -> Generator[sqlite3.Connection, None, None]:
    """Yield a connection from the app's database handle for one request."""
    logger.trace("Creating database dependency connection")
    with request.app.state.database.session() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Auth dependencies
# ---------------------------------------------------------------------------

def identity_from_token(token: str) -> Identity:
    """
    Verify *token* and return the identity it carries.
    Raises InvalidToken on a bad signature, expiry or malformed claims.
    """
    try:
        payload = decode_token(token)
    except JWTError:
        logger.warning("Access token failed verification")
        raise InvalidToken()

    user_id = payload.get("id")
    role = payload.get("role")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        logger.warning("Access token missing a usable id claim")
        raise InvalidToken()
    try:
        return Identity(id=user_id, role=Role(role))
    except ValueError:
        logger.warning("Access token carries unknown role %r", role)
        raise InvalidToken()


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    conn=Depends(db_dependency),
) -> Identity:
    """
    Resolve the caller from the ``Authorization: Bearer`` header.

    A missing or non-Bearer header is Unauthorized. A bad token, or one whose
    user no longer exists, is InvalidToken. The role comes from the stored
    user, so role changes apply to tokens already issued.
    """
    if credentials is None or not credentials.credentials:
        logger.warning("Request without bearer token")
        raise Unauthorized()
    claimed = identity_from_token(credentials.credentials)

    user = UserRepository(conn).get_by_id(claimed.id)
    if user is None:
        logger.warning("Token subject id=%s no longer exists", claimed.id)
        raise InvalidToken()
    if user.role is not claimed.role:
        logger.info(
            "User id=%s token role %s superseded by %s",
            user.id,
            claimed.role.value,
            user.role.value,
        )
    identity = Identity(id=user.id, role=user.role)
    logger.info("Authenticated user id=%s role=%s", identity.id, identity.role.value)
    return identity


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_role(role: Role):
    """
    Factory for a dependency that admits only callers holding exactly *role*.
    There is no hierarchy: an admin is refused on owner and user routes.

    Usage::
        @router.get("/stores")
        def stores(identity: Identity = Depends(require_role(Role.USER))):
            ...
    """
    def _check(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role is not role:
            logger.warning(
                "User id=%s with role %s denied, %s required",
                identity.id,
                identity.role.value,
                role.value,
            )
            raise Forbidden()
        return identity
    return _check


# Convenience shortcuts
require_admin = require_role(Role.ADMIN)
require_owner = require_role(Role.OWNER)
require_user = require_role(Role.USER)
