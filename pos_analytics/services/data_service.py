import logging
from datetime import timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from pos_analytics.config import get_settings
from pos_analytics.core.constants import GLOBAL_SETTINGS_TYPE
from pos_analytics.core.dates import parse_datetime
from pos_analytics.core.formatting import DisplaySettings
from pos_analytics.models.expense import OperatingExpense, OperatingExpenseCategory
from pos_analytics.models.product import Category, Product
from pos_analytics.models.sales import Sale, SaleItem
from pos_analytics.models.settings import AppSetting
from pos_analytics.schemas.records import (
    CategoryRecord,
    ExpenseCategoryRecord,
    ExpenseRecord,
    ProductRecord,
    SaleRecord,
    as_records,
)

logger = logging.getLogger(__name__)


def fetch_paginated(db: Session, stmt, page_size=None):
    """Read every row of ``stmt`` one page at a time until a short page comes back."""
    page_size = max(1, int(page_size or get_settings().PAGE_SIZE))
    rows = []
    page = 0
    while True:
        batch = db.execute(stmt.offset(page * page_size).limit(page_size)).scalars().all()
        rows.extend(batch)
        logger.debug(
            "Fetched %d row(s) (page %d).",
            len(batch),
            page + 1,
            extra={"rows": len(batch), "page": page + 1},
        )
        if len(batch) < page_size:
            break
        page += 1
    return rows


def _utc_naive(value):
    moment = parse_datetime(value)
    if moment is None:
        return None
    return moment.astimezone(timezone.utc).replace(tzinfo=None)


def load_products(db: Session, page_size=None):
    rows = fetch_paginated(db, select(Product).order_by(Product.id), page_size)
    logger.info("Loaded %d product(s).", len(rows))
    return as_records(ProductRecord, rows)


def load_categories(db: Session):
    rows = db.execute(select(Category).order_by(Category.name)).scalars().all()
    return as_records(CategoryRecord, rows)


def load_sales(db: Session, start=None, end=None, page_size=None):
    stmt = select(Sale).options(selectinload(Sale.sale_items))
    start_at = _utc_naive(start)
    end_at = _utc_naive(end)
    if start_at is not None:
        stmt = stmt.where(Sale.created_at >= start_at)
    if end_at is not None:
        stmt = stmt.where(Sale.created_at <= end_at)
    stmt = stmt.order_by(Sale.created_at, Sale.id)

    rows = fetch_paginated(db, stmt, page_size)
    logger.info("Loaded %d sale(s) between %s and %s.", len(rows), start_at, end_at)
    return as_records(SaleRecord, rows)


def load_sold_product_ids(db: Session):
    rows = db.execute(select(SaleItem.product_id).distinct()).scalars().all()
    return {str(product_id) for product_id in rows if product_id}


def load_expense_categories(db: Session):
    rows = db.execute(
        select(OperatingExpenseCategory).order_by(OperatingExpenseCategory.name)
    ).scalars().all()
    return as_records(ExpenseCategoryRecord, rows)


def load_expenses(db: Session, start=None, end=None, page_size=None):
    stmt = select(OperatingExpense)
    start_at = _utc_naive(start)
    end_at = _utc_naive(end)
    if start_at is not None:
        stmt = stmt.where(OperatingExpense.payment_date >= start_at)
    if end_at is not None:
        stmt = stmt.where(OperatingExpense.payment_date <= end_at)
    stmt = stmt.order_by(OperatingExpense.payment_date.desc(), OperatingExpense.id)

    rows = fetch_paginated(db, stmt, page_size)
    return as_records(ExpenseRecord, rows)


def load_display_settings(db: Session) -> DisplaySettings:
    settings = get_settings()
    default = DisplaySettings(
        currency=settings.DEFAULT_CURRENCY,
        language=settings.DEFAULT_LANGUAGE,
    )
    try:
        row = (
            db.execute(select(AppSetting).where(AppSetting.type == GLOBAL_SETTINGS_TYPE))
            .scalars()
            .first()
        )
    except SQLAlchemyError:
        logger.exception("Error fetching currency setting; using %s.", default.currency)
        return default

    if row is None:
        return default
    currency = row.currency if isinstance(row.currency, str) and row.currency.strip() else default.currency
    language = row.language if isinstance(row.language, str) and row.language.strip() else default.language
    return DisplaySettings(currency=currency.strip().upper(), language=language.strip())


__all__ = [
    "fetch_paginated",
    "load_categories",
    "load_display_settings",
    "load_expense_categories",
    "load_expenses",
    "load_products",
    "load_sales",
    "load_sold_product_ids",
]
