from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core import security
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.auth import AuthResponse, LoginRequest, RefreshTokenRequest, SignupRequest
from app.schemas.responses import SuccessResponse

router = APIRouter()


def _auth_response(user: User, refresh_token: str) -> AuthResponse:
    return AuthResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        access_token=security.create_access_token(data={"sub": str(user.id)}),
        refresh_token=refresh_token,
        token_type="bearer",
        created_at=user.created_at,
    )


@router.post("/signup", response_model=SuccessResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def signup(
    signup_in: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Create an owner account and sign it in.
    """
    user = await UserService.create_user(
        db, name=signup_in.name, email=signup_in.email, password=signup_in.password
    )
    refresh = await UserService.issue_refresh_token(db, user.id, deps.get_client_ip(request))
    return SuccessResponse(
        data=_auth_response(user, refresh.token),
        message="Account created successfully"
    )


@router.post("/login", response_model=SuccessResponse[AuthResponse])
async def login(
    login_data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Returns a JWT access token and a rotating refresh token.
    Stale refresh tokens of the account are purged on every login.
    """
    user = await UserService.authenticate_user(db, email=login_data.email, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    await UserService.purge_stale_tokens(db, user.id)
    refresh = await UserService.issue_refresh_token(db, user.id, deps.get_client_ip(request))
    return SuccessResponse(
        data=_auth_response(user, refresh.token),
        message="Login successful"
    )


@router.post("/refresh-token", response_model=SuccessResponse[AuthResponse])
async def refresh_token(
    token_in: RefreshTokenRequest,
    request: Request,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    """
    Exchange a refresh token for a new access/refresh pair. The presented
    token is revoked.
    """
    user, replacement = await UserService.rotate_refresh_token(
        db, token_in.refresh_token, deps.get_client_ip(request)
    )
    return SuccessResponse(
        data=_auth_response(user, replacement.token),
        message="Token refreshed"
    )


@router.post("/revoke-token", response_model=SuccessResponse)
async def revoke_token(
    token_in: RefreshTokenRequest,
    request: Request,
    db: AsyncSession = Depends(deps.get_db)
) -> Any:
    await UserService.revoke_refresh_token(db, token_in.refresh_token, deps.get_client_ip(request))
    return SuccessResponse(message="Token revoked")
