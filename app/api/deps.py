"""API Dependencies"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.core.security import decode_token
from app.services.user_service import UserService
from app.models.user import User

# Security scheme for bearer token
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is gone/inactive
    """
    payload = decode_token(credentials.credentials)
    if not payload:
        raise _unauthorized("Could not validate credentials")

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    user_id_str: Optional[str] = payload.get("sub")
    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        raise _unauthorized("Invalid user ID")

    user = await UserService.get_user_by_id(db, user_id)
    if not user or not user.is_active:
        raise _unauthorized("Could not validate credentials")

    return user


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"
