"""Billing Models"""

from sqlalchemy import Column, DateTime, Integer, Numeric, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.models.base import BaseModel, OwnedMixin


class Bill(BaseModel, OwnedMixin):
    """
    Completed sale. Immutable once written.

    ``created_at`` holds local wall-clock time in the restaurant zone, which is
    what the daily token and the report windows are computed against.
    The (user_id, bill_number) constraint is what serializes token allocation.
    """
    __tablename__ = "bills"
    __table_args__ = (
        UniqueConstraint("user_id", "bill_number", name="uq_bills_user_bill_number"),
    )

    token_number = Column(Integer, nullable=False)
    bill_number = Column(String(50), nullable=False, index=True)

    subtotal = Column(Numeric(18, 2), nullable=False)
    gst = Column(Numeric(18, 2), nullable=False)
    service_charge = Column(Numeric(18, 2), nullable=False)
    total = Column(Numeric(18, 2), nullable=False)

    payment_method = Column(String(20), nullable=False)
    platform = Column(String(20), nullable=False, default="Direct")

    customer_name = Column(String(100), nullable=True)
    customer_phone = Column(String(20), nullable=True)

    created_at = Column(DateTime, nullable=False, index=True)

    items = relationship(
        "BillItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="BillItem.id",
    )

    def __repr__(self) -> str:
        return f"<Bill {self.bill_number} {self.total}>"


class BillItem(BaseModel):
    """
    Line item snapshot taken at sale time. ``product_id`` is kept for reference
    only; later product edits or deletions never touch it.
    """
    __tablename__ = "bill_items"

    bill_id = Column(Integer, ForeignKey("bills.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    product_name = Column(String(200), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    total = Column(Numeric(18, 2), nullable=False)

    bill = relationship("Bill", back_populates="items")

    def __repr__(self) -> str:
        return f"<BillItem {self.product_name} x{self.quantity}>"
