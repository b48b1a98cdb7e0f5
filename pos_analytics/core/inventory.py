"""Stock valuation and low-stock reporting.

Both reducers read products as they are now. A product counts as active when
any sale item references it, so callers pass the set of sold product ids.
"""

from __future__ import annotations

import logging

from pos_analytics.core.constants import (
    UNCATEGORIZED,
    UNCATEGORIZED_ID,
    URGENCY_CRITICAL,
    URGENCY_FILTERS,
    URGENCY_HIGH,
    URGENCY_MEDIUM,
)
from pos_analytics.core.metrics import index_by_id
from pos_analytics.core.numbers import round_half_up
from pos_analytics.schemas.inventory import (
    CategoryStock,
    LowStockItem,
    LowStockReport,
    StockSummary,
)
from pos_analytics.schemas.records import CategoryRecord, ProductRecord, as_records

logger = logging.getLogger(__name__)

OVERSTOCK_MULTIPLIER = 3
HIGH_URGENCY_RATIO = 0.3
DEFAULT_LOW_STOCK_LIMIT = 50

_URGENCY_RANK = {URGENCY_CRITICAL: 0, URGENCY_HIGH: 1, URGENCY_MEDIUM: 2}


def _category_name(category_id, categories_by_id):
    category = categories_by_id.get(category_id) if category_id else None
    return category.name if category is not None and category.name else UNCATEGORIZED


def stock_summary(products, categories=(), sold_product_ids=()) -> StockSummary:
    records = as_records(ProductRecord, products)
    categories_by_id = index_by_id(as_records(CategoryRecord, categories))
    sold = set(sold_product_ids or ())

    summary = StockSummary(total_products=len(records))
    by_category: dict[str, CategoryStock] = {}

    for product in records:
        retail_value = product.price * product.stock
        cost_value = product.purchase_price * product.stock
        profit_potential = retail_value - cost_value
        has_sales = product.id in sold

        summary.total_units += product.stock
        summary.total_retail_value += retail_value
        summary.total_cost_value += cost_value
        summary.total_profit_potential += profit_potential

        if has_sales:
            summary.active_inventory_value += retail_value
            summary.active_cost_value += cost_value
            summary.active_profit_potential += profit_potential
            summary.active_product_count += 1
            summary.active_unit_count += product.stock
        else:
            summary.inactive_inventory_value += retail_value

        if 0 < product.stock <= product.min_stock:
            summary.low_stock_value += retail_value
        elif product.stock > product.min_stock * OVERSTOCK_MULTIPLIER:
            summary.high_stock_value += retail_value

        category_id = product.category_id or UNCATEGORIZED_ID
        category = by_category.get(category_id)
        if category is None:
            category = CategoryStock(
                id=category_id,
                name=_category_name(product.category_id, categories_by_id),
            )
            by_category[category_id] = category

        category.product_count += 1
        category.total_value += retail_value
        category.total_cost += cost_value
        if has_sales:
            category.has_sold_products = True
            category.active_product_count += 1
            category.active_total_value += retail_value
            category.active_total_cost += cost_value

    summary.categories = sorted(by_category.values(), key=lambda row: row.total_value, reverse=True)
    return summary


def urgency_level(stock: float, min_stock: float) -> str:
    if stock == 0:
        return URGENCY_CRITICAL
    if stock < min_stock * HIGH_URGENCY_RATIO:
        return URGENCY_HIGH
    return URGENCY_MEDIUM


def _low_stock_item(product: ProductRecord, categories_by_id) -> LowStockItem:
    deficit = product.min_stock - product.stock
    percentage = (
        round_half_up(product.stock / product.min_stock * 100) if product.min_stock > 0 else 0
    )
    return LowStockItem(
        id=product.id,
        name=product.name,
        barcode=product.barcode,
        current_stock=product.stock,
        min_stock=product.min_stock,
        price=product.price,
        purchase_price=product.purchase_price,
        category=_category_name(product.category_id, categories_by_id),
        stock_deficit=deficit,
        urgency_level=urgency_level(product.stock, product.min_stock),
        stock_percentage=percentage,
        restock_value=product.purchase_price * deficit,
    )


def low_stock_report(
    products,
    categories=(),
    *,
    urgency: str = "all",
    limit: int = DEFAULT_LOW_STOCK_LIMIT,
) -> LowStockReport:
    """List products below their minimum stock, most urgent first.

    Urgency is Critical at zero stock, High under 30% of the minimum and
    Medium otherwise. The counts cover every low-stock product regardless of
    ``urgency``; ``total_restock_value`` covers only the returned items.
    """
    urgency_key = (urgency or "all").strip().lower()
    if urgency_key != "all" and urgency_key not in URGENCY_FILTERS:
        raise ValueError(f"Unknown urgency filter {urgency!r}.")
    if limit < 1:
        raise ValueError("limit must be at least 1.")

    categories_by_id = index_by_id(as_records(CategoryRecord, categories))
    low_stock = [
        _low_stock_item(product, categories_by_id)
        for product in as_records(ProductRecord, products)
        if product.stock < product.min_stock
    ]

    selected = low_stock
    if urgency_key != "all":
        selected = [item for item in low_stock if item.urgency_level == URGENCY_FILTERS[urgency_key]]
    selected = sorted(selected, key=lambda item: (_URGENCY_RANK[item.urgency_level], item.stock_percentage))
    shown = selected[:limit]

    report = LowStockReport(
        items=shown,
        total_count=len(low_stock),
        showing_count=len(shown),
        critical_count=sum(1 for item in low_stock if item.urgency_level == URGENCY_CRITICAL),
        high_priority_count=sum(1 for item in low_stock if item.urgency_level == URGENCY_HIGH),
        medium_priority_count=sum(1 for item in low_stock if item.urgency_level == URGENCY_MEDIUM),
        total_restock_value=round(sum(item.restock_value for item in shown), 2),
        urgency_filter=urgency_key,
    )
    logger.info(
        "Low-stock report: %d product(s), showing %d (%d critical, %d high, %d medium).",
        report.total_count,
        report.showing_count,
        report.critical_count,
        report.high_priority_count,
        report.medium_priority_count,
    )
    return report


__all__ = [
    "DEFAULT_LOW_STOCK_LIMIT",
    "low_stock_report",
    "stock_summary",
    "urgency_level",
]
