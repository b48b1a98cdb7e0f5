import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String

from pos_analytics.database.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class OperatingExpenseCategory(Base):
    __tablename__ = "operating_expense_categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    description = Column(String)


class OperatingExpense(Base):
    __tablename__ = "operating_expenses"

    id = Column(String(36), primary_key=True, default=_new_id)
    amount = Column(Float, nullable=False)
    description = Column(String, nullable=False, default="")
    category_id = Column(
        String(36),
        ForeignKey("operating_expense_categories.id", ondelete="SET NULL"),
    )
    payment_date = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_operating_expenses_payment_date", "payment_date"),
    )


__all__ = ["OperatingExpense", "OperatingExpenseCategory"]
