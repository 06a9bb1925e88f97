"""Base Models and Mixins for DRY principles"""

from sqlalchemy import Column, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.orm import declared_attr

from app.database import Base
from app.utils.time import get_utc_now


class BaseModel(Base):
    """
    Base model class with common fields for all models.

    Provides:
    - integer primary key
    - created_at timestamp (naive UTC unless a model overrides it)
    - updated_at timestamp
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class OwnedMixin:
    """
    Mixin for records owned by a single user.

    Deleting the user removes everything it owns at the database level.
    """

    @declared_attr
    def user_id(cls):
        return Column(
            Integer,
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )


class StatusMixin:
    """
    Mixin for models with active/inactive status.

    ``is_active = False`` is the soft-delete marker for catalog rows.
    """
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    def soft_delete(self) -> None:
        self.is_active = False
