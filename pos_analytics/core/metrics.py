"""Per-product, per-category and overall sales performance.

Everything here is a pure reduction over already-fetched rows: the same
inputs and the same ``now`` always give the same result, nothing is
persisted, and malformed values degrade to zero instead of raising.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime

from pos_analytics.core.constants import DAYS_PER_YEAR, SECONDS_PER_DAY, UNCATEGORIZED
from pos_analytics.core.dates import parse_datetime, utc_now
from pos_analytics.core.numbers import safe_ratio
from pos_analytics.schemas.analytics import (
    AnalyticsResult,
    CategoryPerformance,
    OrphanedSales,
    OverallMetrics,
    ProductPerformance,
)
from pos_analytics.schemas.records import (
    CategoryRecord,
    ProductRecord,
    SaleRecord,
    as_records,
)

logger = logging.getLogger(__name__)


def category_name(category_id, categories_by_id) -> str:
    if not category_id:
        return UNCATEGORIZED
    category = categories_by_id.get(category_id)
    if category is None or not category.name:
        return UNCATEGORIZED
    return category.name


def compute_days_in_stock(created_at, now=None) -> int:
    created = parse_datetime(created_at)
    if created is None:
        return 0
    now = parse_datetime(now) or utc_now()
    elapsed = abs((now - created).total_seconds())
    return int(math.ceil(elapsed / SECONDS_PER_DAY))


def compute_turnover(quantity_sold: float, stock_level: float, days_in_stock: float) -> float:
    """Annualized units sold over average inventory.

    Current stock stands in for both opening and closing inventory, so the
    average inventory is simply the current stock level.
    """
    if stock_level <= 0 or days_in_stock <= 0:
        return 0.0
    annualized_sales = quantity_sold * (DAYS_PER_YEAR / days_in_stock)
    average_inventory = (stock_level + stock_level) / 2
    return annualized_sales / average_inventory


def item_revenue(price: float, quantity: float, discount: float) -> float:
    return price * quantity * (1 - discount / 100)


def weighted_average_margin(performances) -> float:
    total_sales = sum(perf.total_sales for perf in performances)
    if total_sales <= 0:
        return 0.0
    return sum(perf.profit_margin * (perf.total_sales / total_sales) for perf in performances)


def total_inventory_value(products) -> float:
    return sum((product.stock or 0) * (product.purchase_price or 0) for product in products)


def average_stock_turnover(performances) -> float:
    stocked = [perf for perf in performances if perf.stock_level > 0]
    if not stocked:
        return 0.0
    return sum(perf.stock_turnover for perf in stocked) / len(stocked)


def index_by_id(records) -> dict:
    indexed = {}
    for record in records:
        indexed.setdefault(record.id, record)
    return indexed


def _seed_performance(product: ProductRecord, categories_by_id, now: datetime) -> ProductPerformance:
    return ProductPerformance(
        product_id=product.id,
        product_name=product.name,
        category_id=product.category_id,
        category_name=category_name(product.category_id, categories_by_id),
        barcode=product.barcode,
        cost=product.purchase_price or 0.0,
        price=product.price or 0.0,
        stock_level=product.stock or 0.0,
        days_in_stock=compute_days_in_stock(product.created_at, now),
    )


def _rollup_categories(performances) -> list[CategoryPerformance]:
    categories: dict[str, CategoryPerformance] = {}
    for perf in performances:
        if not perf.category_id:
            continue
        category = categories.get(perf.category_id)
        if category is None:
            category = CategoryPerformance(
                category_id=perf.category_id,
                category_name=perf.category_name or UNCATEGORIZED,
            )
            categories[perf.category_id] = category
        category.product_count += 1
        category.total_quantity += perf.total_quantity
        category.total_sales += perf.total_sales
        category.total_cost += perf.total_cost
        category.total_profit += perf.total_profit

    for category in categories.values():
        category.profit_margin = safe_ratio(category.total_profit, category.total_sales)
    return list(categories.values())


def compute_metrics(sales, products, categories, *, now=None) -> AnalyticsResult:
    now = parse_datetime(now) or utc_now()
    product_records = as_records(ProductRecord, products)
    category_records = as_records(CategoryRecord, categories)
    sale_records = as_records(SaleRecord, sales)

    products_by_id = index_by_id(product_records)
    categories_by_id = index_by_id(category_records)

    performance = {
        product_id: _seed_performance(product, categories_by_id, now)
        for product_id, product in products_by_id.items()
    }

    orphaned = OrphanedSales()
    orphaned_ids = set()

    for sale in sale_records:
        for item in sale.sale_items:
            revenue = item_revenue(item.price, item.quantity, item.discount)
            product = products_by_id.get(item.product_id)
            if product is None:
                orphaned.item_count += 1
                orphaned.total_quantity += item.quantity
                orphaned.total_revenue += revenue
                orphaned_ids.add(item.product_id or "")
                continue

            cost = product.purchase_price * item.quantity
            perf = performance[product.id]
            perf.total_quantity += item.quantity
            perf.total_sales += revenue
            perf.total_cost += cost
            perf.total_profit += revenue - cost

    if orphaned.item_count:
        orphaned.product_ids = sorted(orphaned_ids)
        logger.warning(
            "Excluded %d orphaned sale item(s) worth %.2f from product metrics.",
            orphaned.item_count,
            orphaned.total_revenue,
        )

    product_performance = list(performance.values())
    for perf in product_performance:
        perf.profit_margin = safe_ratio(perf.total_profit, perf.total_sales)
        perf.stock_turnover = compute_turnover(
            perf.total_quantity, perf.stock_level, perf.days_in_stock
        )

    overall = OverallMetrics(
        total_sales=sum(perf.total_sales for perf in product_performance),
        total_cost=sum(perf.total_cost for perf in product_performance),
        total_profit=sum(perf.total_profit for perf in product_performance),
        total_quantity=sum(perf.total_quantity for perf in product_performance),
        average_profit_margin=weighted_average_margin(product_performance),
        total_inventory_value=total_inventory_value(product_records),
        average_stock_turnover=average_stock_turnover(product_performance),
    )

    return AnalyticsResult(
        product_performance=product_performance,
        category_performance=_rollup_categories(product_performance),
        overall_metrics=overall,
        orphaned_sales=orphaned,
    )


__all__ = [
    "average_stock_turnover",
    "category_name",
    "compute_days_in_stock",
    "compute_metrics",
    "compute_turnover",
    "index_by_id",
    "item_revenue",
    "total_inventory_value",
    "weighted_average_margin",
]
