"""
api/routes/auth.py
------------------
Authentication endpoints.

POST /api/auth/register  - Create an account; returns the user and a token.
POST /api/auth/login     - Exchange email + password for a token.
GET  /api/auth/me        - Return the authenticated user's public fields.

Login failures return one generic 400 whether the email is unknown or the
password is wrong.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from accounts.dependencies import CurrentPrincipal, get_auth_service
from accounts.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from accounts.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    result = await auth.register(body.username, body.email, body.password)
    return AuthResponse(user=UserPublic.model_validate(result.user), token=result.token)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and receive a bearer token",
)
async def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    result = await auth.login(body.email, body.password)
    return AuthResponse(user=UserPublic.model_validate(result.user), token=result.token)


@router.get(
    "/me",
    response_model=UserPublic,
    summary="Get the currently authenticated user",
)
async def get_me(principal: CurrentPrincipal) -> UserPublic:
    return UserPublic.model_validate(principal)
