"""User Service - accounts and refresh-token bookkeeping"""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import select, delete, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import ConflictError, ValidationError
from app.core.security import (
    get_password_hash,
    verify_password,
    generate_refresh_token,
    refresh_token_expiry,
)
from app.models.user import User, RefreshToken
from app.utils.time import get_utc_now

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: int) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def create_user(db: AsyncSession, name: str, email: str, password: str) -> User:
        """
        Create a new account.

        Raises:
            ConflictError: email already registered
        """
        if await UserService.get_user_by_email(db, email):
            raise ConflictError("Email already exists")

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            is_active=True,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info("User created", extra={"user_id": user.id})
        return user

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match an active account."""
        user = await UserService.get_user_by_email(db, email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    async def issue_refresh_token(
        db: AsyncSession,
        user_id: int,
        ip_address: str,
        auto_commit: bool = True,
    ) -> RefreshToken:
        now = get_utc_now()
        token = RefreshToken(
            token=generate_refresh_token(),
            user_id=user_id,
            created_at=now,
            expires_at=refresh_token_expiry(now),
            created_by_ip=ip_address,
        )
        db.add(token)
        if auto_commit:
            await db.commit()
        return token

    @staticmethod
    async def purge_stale_tokens(db: AsyncSession, user_id: int) -> None:
        """Drop revoked/expired tokens older than one refresh lifetime."""
        now = get_utc_now()
        cutoff = now - timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        await db.execute(
            delete(RefreshToken).where(
                and_(
                    RefreshToken.user_id == user_id,
                    RefreshToken.created_at <= cutoff,
                    or_(RefreshToken.revoked_at.isnot(None), RefreshToken.expires_at <= now),
                )
            )
        )

    @staticmethod
    async def get_refresh_token(db: AsyncSession, token: str) -> Optional[RefreshToken]:
        result = await db.execute(select(RefreshToken).where(RefreshToken.token == token))
        return result.scalar_one_or_none()

    @staticmethod
    async def rotate_refresh_token(
        db: AsyncSession,
        token: str,
        ip_address: str,
    ) -> Tuple[User, RefreshToken]:
        """
        Exchange an active refresh token for a new one.

        The old row is revoked and points at its replacement so a stolen,
        already-rotated token can be traced.
        """
        current = await UserService.get_refresh_token(db, token)
        if current is None or not current.is_active:
            raise ValidationError("Invalid or expired refresh token")

        user = current.user
        if user is None or not user.is_active:
            raise ValidationError("Invalid or expired refresh token")

        replacement = await UserService.issue_refresh_token(
            db, current.user_id, ip_address, auto_commit=False
        )
        current.revoke(ip_address, replaced_by=replacement.token)
        await db.commit()
        return user, replacement

    @staticmethod
    async def revoke_refresh_token(db: AsyncSession, token: str, ip_address: str) -> None:
        current = await UserService.get_refresh_token(db, token)
        if current is None or not current.is_active:
            raise ValidationError("Token is already inactive")
        current.revoke(ip_address)
        await db.commit()
