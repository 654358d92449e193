"""
Authentication Endpoints.

Registration, login, the caller's identity and the password reset flow.
Tokens are HS256 JWTs sent back as ``Authorization: Bearer <token>``.
"""

import uuid
from typing import List

from fastapi import APIRouter, status

from agrilink.core.logging_config import get_logger
from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenValidity,
    UserRead,
    ValidateResetTokenRequest,
)
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.auth import to_user_read
from agrilink.server.services.deps import AuthServiceDep, PasswordResetServiceDep

logger = get_logger(__name__)

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If the email is registered, a password reset link has been sent"


@router.post(
    "/register",
    response_model=ApiResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="Create a new account. Roles default to CUSTOMER when none are given.",
    response_description="The created user.",
    responses={
        201: {"description": "User registered"},
        400: {"description": "Email or phone already registered, or unknown role"},
    },
)
async def register(request: RegisterRequest, service: AuthServiceDep):
    """
    Register a new user.

    - **email**: Unique login e-mail; stored lower-cased.
    - **password**: At least 6 characters.
    - **phone**: Optional, unique when given.
    - **roles**: Any of FARMER, CUSTOMER, BUYER, MANAGER, ADMIN (case-insensitive).
    """
    user = await service.register(request)
    return ApiResponse.ok(to_user_read(user), "User registered successfully")


@router.post(
    "/login",
    response_model=ApiResponse[AuthResponse],
    summary="Login",
    description="Exchange credentials for a bearer token.",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(request: LoginRequest, service: AuthServiceDep):
    return ApiResponse.ok(await service.login(request), "Login successful")


@router.get(
    "/me",
    response_model=ApiResponse[UserRead],
    summary="Current User",
    description="Return the account behind the bearer token.",
    responses={401: {"description": "Missing or invalid token"}},
)
async def me(user: CurrentUserDep, service: AuthServiceDep):
    return ApiResponse.ok(to_user_read(await service.get_current_user(user.id)))


@router.get(
    "/farmers",
    response_model=ApiResponse[List[UserRead]],
    summary="List Farmers",
    description="List every enabled account holding the FARMER role.",
)
async def list_farmers(service: AuthServiceDep):
    return ApiResponse.ok([to_user_read(u) for u in await service.get_farmers()])


@router.get(
    "/farmers/ids",
    response_model=ApiResponse[List[uuid.UUID]],
    summary="List Farmer Ids",
)
async def list_farmer_ids(service: AuthServiceDep):
    return ApiResponse.ok(await service.get_farmer_ids())


@router.post(
    "/forgot-password",
    response_model=ApiResponse[None],
    summary="Request Password Reset",
    description=(
        "Issue a reset link for the given e-mail. The answer is the same whether or not the address is "
        "registered."
    ),
)
async def forgot_password(request: ForgotPasswordRequest, service: PasswordResetServiceDep):
    await service.forgot_password(request.email)
    return ApiResponse.ok(message=RESET_REQUESTED_MESSAGE)


@router.post(
    "/validate-reset-token",
    response_model=ApiResponse[TokenValidity],
    summary="Validate Reset Token",
)
async def validate_reset_token(request: ValidateResetTokenRequest, service: PasswordResetServiceDep):
    valid = await service.validate_reset_token(request.token)
    return ApiResponse.ok(TokenValidity(valid=valid), "Token is valid" if valid else "Token is invalid or expired")


@router.post(
    "/reset-password",
    response_model=ApiResponse[None],
    summary="Reset Password",
    description="Set a new password using a valid reset token. The token is consumed.",
    responses={400: {"description": "Passwords do not match, or the token is invalid or expired"}},
)
async def reset_password(request: ResetPasswordRequest, service: PasswordResetServiceDep):
    await service.reset_password(request.token, request.new_password, request.confirm_password)
    return ApiResponse.ok(message="Password has been reset successfully")
