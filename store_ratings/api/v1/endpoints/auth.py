"""
Authentication endpoints:
  POST  /auth/signup           – Self-service registration (role is always `user`)
  POST  /auth/login            – Email + password, returns a bearer token
  POST  /auth/forgot-password  – Issue a short-lived password reset token
  POST  /auth/reset-password   – Consume a reset token and set a new password
  PATCH /auth/change-password  – Change the current user's password
  GET   /auth/me               – Return the current user's profile
"""
from fastapi import APIRouter, Depends, status
import logging

from store_ratings.core.dependencies import db_dependency, get_current_identity
from store_ratings.models.user import Identity
from store_ratings.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ResetPasswordRequest,
    SignupRequest,
)
from store_ratings.schemas.user import UserResponse
from store_ratings.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
def signup(data: SignupRequest, conn=Depends(db_dependency)):
    """
    Create a **user** account. A `role` in the body is ignored.

    Password rules: >= 8 characters, at least one uppercase letter and one digit.
    """
    return AuthService(conn).signup(data)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login with email and password",
)
def login(data: LoginRequest, conn=Depends(db_dependency)):
    """Returns an access token valid for one day and the account's role."""
    logger.info("Login requested for email=%s", data.email)
    return AuthService(conn).login(data.email, data.password)


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    response_model_exclude_none=True,
    summary="Generate a password reset token",
)
def forgot_password(data: ForgotPasswordRequest, conn=Depends(db_dependency)):
    """
    Generate a reset token valid for 15 minutes. While no mail channel is
    configured the token is returned in the response body.
    """
    return AuthService(conn).forgot_password(data.email)


@router.post(
    "/reset-password",
    response_model=MessageResponse,
    summary="Reset a password using a reset token",
)
def reset_password(data: ResetPasswordRequest, conn=Depends(db_dependency)):
    AuthService(conn).reset_password(data.token, data.new_password)
    return MessageResponse(message="Password reset successful")


@router.patch(
    "/change-password",
    response_model=MessageResponse,
    summary="Change the current user's password",
)
def change_password(
    data: ChangePasswordRequest,
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    """Available to every role; requires the current password."""
    AuthService(conn).change_password(identity.id, data.old_password, data.new_password)
    return MessageResponse(message="Password updated successfully")


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user's profile",
)
def get_me(
    conn=Depends(db_dependency),
    identity: Identity = Depends(get_current_identity),
):
    return AuthService(conn).get_profile(identity.id)
