"""
Authentication service: signup, login and the password lifecycle
(forgot / reset / change).
"""
import sqlite3
import logging

from store_ratings.core.config import settings
from store_ratings.core.exceptions import (
    IncorrectPassword,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
)
from store_ratings.core.security import (
    create_access_token,
    generate_reset_token,
    hash_password,
    now_ms,
    reset_token_expiry_ms,
    verify_password,
)
from store_ratings.models.user import Role, User
from store_ratings.repositories.user_repository import UserRepository
from store_ratings.schemas.auth import (
    ForgotPasswordResponse,
    LoginResponse,
    SignupRequest,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._user_repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Signup / login
    # ------------------------------------------------------------------

    def signup(self, data: SignupRequest) -> User:
        """Register a regular user. The role is always ``user``."""
        logger.info("Signup requested for email=%s", data.email)
        user = self._user_repo.create(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=Role.USER,
            address=data.address,
        )
        logger.info("User signed up id=%s", user.id)
        return user

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Verify credentials and issue an access token.
        Unknown email and wrong password fail identically.
        """
        logger.info("Authenticating '%s'", email)
        user = self._user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Invalid login attempt for '%s'", email)
            raise InvalidCredentials()

        logger.info("Login successful for user id=%s", user.id)
        return LoginResponse(
            access_token=create_access_token(user.id, user.role.value),
            role=user.role,
        )

    def get_profile(self, user_id: int) -> User:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    # ------------------------------------------------------------------
    # Password lifecycle
    # ------------------------------------------------------------------

    def forgot_password(self, email: str) -> ForgotPasswordResponse:
        """
        Issue a reset token valid for RESET_TOKEN_EXPIRE_MINUTES.

        Issuing again replaces any earlier token. The token is returned to
        the caller only while RESET_TOKEN_IN_RESPONSE is enabled.
        """
        token = generate_reset_token()
        if not self._user_repo.set_reset_token(email, token, reset_token_expiry_ms()):
            logger.warning("Reset token requested for unknown email=%s", email)
            raise NotFound("User not found")

        logger.info("Reset token issued for email=%s", email)
        if settings.RESET_TOKEN_IN_RESPONSE:
            return ForgotPasswordResponse(reset_token=token)
        logger.trace("Reset token for %s: %s", email, token)
        return ForgotPasswordResponse()

    def reset_password(self, token: str, new_password: str) -> None:
        """Consume a reset token. Unknown and expired tokens fail the same way."""
        consumed = self._user_repo.consume_reset_token(
            token, hash_password(new_password), now_ms()
        )
        if not consumed:
            logger.warning("Rejected invalid or expired reset token")
            raise InvalidOrExpiredToken()
        logger.info("Password reset completed")

    def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            logger.warning("Password change for missing user id=%s", user_id)
            raise NotFound("User not found")
        if not verify_password(old_password, user.password_hash):
            logger.warning("Incorrect old password for user id=%s", user_id)
            raise IncorrectPassword()

        self._user_repo.update_password(user_id, hash_password(new_password))
        logger.info("Password changed for user id=%s", user_id)
