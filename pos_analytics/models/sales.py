import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from pos_analytics.database.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(36), primary_key=True, default=_new_id)
    total = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    payment_method = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(DateTime(timezone=True))

    sale_items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItem.position",
    )

    __table_args__ = (
        Index("idx_sales_created_at", "created_at"),
    )


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    sale_id = Column(String(36), ForeignKey("sales.id", ondelete="CASCADE"), nullable=False)
    # Plain column: sale history outlives deleted products.
    product_id = Column(String(36), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    quantity = Column(Float, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)

    sale = relationship("Sale", back_populates="sale_items")

    __table_args__ = (
        Index("idx_sale_items_sale", "sale_id"),
        Index("idx_sale_items_product", "product_id"),
    )


__all__ = ["Sale", "SaleItem"]
