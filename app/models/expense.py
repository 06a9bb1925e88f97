"""Expense Tracking Models"""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, ForeignKey
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, OwnedMixin, StatusMixin


class ExpenseCategory(BaseModel, OwnedMixin, StatusMixin):
    """
    Expense bucket (Rent, Vegetables, ...). Only ever soft-deleted, so
    expenses keep pointing at it.
    """
    __tablename__ = "expense_categories"

    name = Column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<ExpenseCategory {self.name}>"


class Expense(BaseModel, OwnedMixin):
    """Money paid out. ``date`` is local wall-clock time."""
    __tablename__ = "expenses"

    date = Column(DateTime, nullable=False, index=True)
    amount = Column(Numeric(18, 2), nullable=False)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False, index=True)
    payment_method = Column(String(50), nullable=False)
    description = Column(String(500), nullable=True)
    vendor_name = Column(String(100), nullable=True)
    receipt_image_path = Column(String(500), nullable=True)

    category = relationship("ExpenseCategory", lazy="selectin")

    @property
    def category_name(self) -> str:
        return self.category.name if self.category is not None else "Unknown"

    def __repr__(self) -> str:
        return f"<Expense {self.amount} {self.payment_method}>"
