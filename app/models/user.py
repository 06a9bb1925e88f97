"""Users & Authentication Models"""

from typing import Optional

from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.utils.time import get_utc_now


class User(BaseModel):
    """
    Restaurant account. Owns its catalog, bills and expenses.
    """
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(200), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class RefreshToken(BaseModel):
    """
    Server-side refresh token with revocation and replacement-chain tracking.
    All timestamps are naive UTC.
    """
    __tablename__ = "refresh_tokens"

    token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_by_ip = Column(String(64), nullable=False, default="")
    revoked_at = Column(DateTime, nullable=True)
    revoked_by_ip = Column(String(64), nullable=True)
    replaced_by_token = Column(String(255), nullable=True)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user = relationship("User", back_populates="refresh_tokens", lazy="joined")

    @property
    def is_expired(self) -> bool:
        return get_utc_now() >= self.expires_at

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None and not self.is_expired

    def revoke(self, ip_address: str, replaced_by: Optional[str] = None) -> None:
        self.revoked_at = get_utc_now()
        self.revoked_by_ip = ip_address
        if replaced_by:
            self.replaced_by_token = replaced_by

    def __repr__(self) -> str:
        return f"<RefreshToken user={self.user_id} active={self.is_active}>"
