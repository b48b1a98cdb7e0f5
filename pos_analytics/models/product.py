import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String

from pos_analytics.database.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Category(Base):
    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True))


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    barcode = Column(String)

    price = Column(Float, nullable=False, default=0)
    purchase_price = Column(Float)
    stock = Column(Float, nullable=False, default=0)
    min_stock = Column(Float, nullable=False, default=0)

    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_products_category", "category_id"),
        Index("idx_products_barcode", "barcode"),
    )


__all__ = ["Category", "Product"]
