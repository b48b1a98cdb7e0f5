from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pos_analytics.core.dates import parse_datetime
from pos_analytics.core.numbers import to_float


def _coerce_id(value):
    if value is None:
        return None
    value_text = str(value).strip()
    return value_text or None


def _coerce_text(value):
    return "" if value is None else str(value)


class RecordBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class CategoryRecord(RecordBase):
    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        return _coerce_id(value)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, value):
        return _coerce_text(value)


class ProductRecord(RecordBase):
    id: str
    name: str = ""
    price: float = 0.0
    purchase_price: float = 0.0
    stock: float = 0.0
    min_stock: float = 0.0
    category_id: Optional[str] = None
    barcode: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "category_id", mode="before")
    @classmethod
    def coerce_ids(cls, value):
        return _coerce_id(value)

    @field_validator("price", "purchase_price", "stock", "min_stock", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return to_float(value)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, value):
        return _coerce_text(value)

    @field_validator("barcode", mode="before")
    @classmethod
    def coerce_barcode(cls, value):
        return None if value is None else str(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value):
        return parse_datetime(value)


class SaleItemRecord(RecordBase):
    product_id: Optional[str] = None
    quantity: float = 0.0
    price: float = 0.0
    discount: float = 0.0

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, value):
        return _coerce_id(value)

    @field_validator("quantity", "price", "discount", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return to_float(value)


class SaleRecord(RecordBase):
    """A sale and its line items.

    The sale id is optional and unreadable line items are dropped one by one,
    so a damaged row still contributes its readable items.
    """

    id: Optional[str] = None
    total: float = 0.0
    payment_method: Optional[str] = None
    created_at: Optional[datetime] = None
    sale_items: List[SaleItemRecord] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        return _coerce_id(value)

    @field_validator("total", mode="before")
    @classmethod
    def coerce_total(cls, value):
        return to_float(value)

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_created_at(cls, value):
        return parse_datetime(value)

    @field_validator("payment_method", mode="before")
    @classmethod
    def coerce_payment_method(cls, value):
        return None if value is None else str(value)

    @field_validator("sale_items", mode="before")
    @classmethod
    def coerce_items(cls, value):
        if not isinstance(value, (list, tuple)):
            return []
        return as_records(SaleItemRecord, value)


class ExpenseCategoryRecord(RecordBase):
    id: str
    name: str = ""
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        return _coerce_id(value)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, value):
        return _coerce_text(value)


class ExpenseRecord(RecordBase):
    id: str
    amount: float = 0.0
    description: str = ""
    category_id: Optional[str] = None
    payment_date: Optional[datetime] = None

    @field_validator("id", "category_id", mode="before")
    @classmethod
    def coerce_ids(cls, value):
        return _coerce_id(value)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value):
        return to_float(value)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, value):
        return _coerce_text(value)

    @field_validator("payment_date", mode="before")
    @classmethod
    def coerce_payment_date(cls, value):
        return parse_datetime(value)


def as_records(model, rows):
    """Validate mappings or ORM rows into ``model`` instances.

    Rows that cannot be read at all (no id, wrong shape) are dropped, and
    anything that is not a sequence of rows reads as no rows.
    """
    if not isinstance(rows, (list, tuple)):
        return []
    records = []
    for row in rows:
        if isinstance(row, model):
            records.append(row)
            continue
        try:
            records.append(model.model_validate(row))
        except ValidationError:
            continue
    return records


__all__ = [
    "CategoryRecord",
    "ExpenseCategoryRecord",
    "ExpenseRecord",
    "ProductRecord",
    "SaleItemRecord",
    "SaleRecord",
    "as_records",
]
