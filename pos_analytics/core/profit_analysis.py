from __future__ import annotations

import logging

from pos_analytics.core.dates import (
    day_key,
    day_label,
    month_key,
    month_label,
    week_key,
    week_label,
)
from pos_analytics.core.metrics import index_by_id, item_revenue
from pos_analytics.core.numbers import safe_ratio
from pos_analytics.schemas.profit import (
    CategoryProfit,
    HourBucket,
    PeriodSummary,
    ProductProfit,
    ProfitAnalysis,
    TimeBucket,
)
from pos_analytics.schemas.records import (
    CategoryRecord,
    ProductRecord,
    SaleRecord,
    as_records,
)

logger = logging.getLogger(__name__)


def sale_cogs(sale: SaleRecord, products_by_id) -> float:
    cogs = 0.0
    for item in sale.sale_items:
        product = products_by_id.get(item.product_id)
        if product is not None:
            cogs += product.purchase_price * item.quantity
    return cogs


def summarize_period(sales, products_by_id) -> PeriodSummary:
    revenue = sum(sale.total for sale in sales)
    cogs = sum(sale_cogs(sale, products_by_id) for sale in sales)
    profit = revenue - cogs
    return PeriodSummary(
        total_revenue=revenue,
        total_cogs=cogs,
        total_profit=profit,
        profit_margin=safe_ratio(profit, revenue),
        total_orders=len(sales),
    )


def profit_growth(current_profit: float, previous_profit: float) -> float:
    if previous_profit == 0:
        return 0.0
    return (current_profit - previous_profit) / abs(previous_profit)


def _add_to_bucket(buckets, key, label, revenue, cogs):
    bucket = buckets.get(key)
    if bucket is None:
        bucket = TimeBucket(key=key, label=label)
        buckets[key] = bucket
    bucket.revenue += revenue
    bucket.cogs += cogs
    bucket.profit += revenue - cogs
    bucket.orders += 1
    bucket.profit_margin = safe_ratio(bucket.profit, bucket.revenue)


def _sorted_buckets(buckets):
    return [buckets[key] for key in sorted(buckets)]


def _hour_label(hour: int) -> str:
    return "{:02d}:00 - {:02d}:00".format(hour, (hour + 1) % 24)


def _time_series(sales, products_by_id):
    daily, weekly, monthly, hourly = {}, {}, {}, {}
    hour_days = {}
    for sale in sales:
        moment = sale.created_at
        if moment is None:
            continue
        revenue = sale.total
        cogs = sale_cogs(sale, products_by_id)
        _add_to_bucket(daily, day_key(moment), day_label(moment), revenue, cogs)
        _add_to_bucket(weekly, week_key(moment), week_label(moment), revenue, cogs)
        _add_to_bucket(monthly, month_key(moment), month_label(moment), revenue, cogs)

        hour = moment.hour
        bucket = hourly.get(hour)
        if bucket is None:
            bucket = HourBucket(hour=hour, label=_hour_label(hour))
            hourly[hour] = bucket
        bucket.revenue += revenue
        bucket.profit += revenue - cogs
        bucket.orders += 1
        hour_days.setdefault(hour, set()).add(moment.date())

    for hour, bucket in hourly.items():
        bucket.days = len(hour_days[hour])

    return (
        _sorted_buckets(daily),
        _sorted_buckets(weekly),
        _sorted_buckets(monthly),
        [hourly[hour] for hour in sorted(hourly)],
    )


def _product_and_category_profit(sales, products_by_id, categories_by_id):
    product_map: dict[str, ProductProfit] = {}
    category_map: dict[str, CategoryProfit] = {}

    for sale in sales:
        for item in sale.sale_items:
            product = products_by_id.get(item.product_id)
            if product is None:
                continue
            revenue = item_revenue(item.price, item.quantity, item.discount)
            cogs = product.purchase_price * item.quantity
            profit = revenue - cogs

            entry = product_map.get(product.id)
            if entry is None:
                entry = ProductProfit(
                    id=product.id,
                    name=product.name or "Product {}".format(product.id),
                )
                product_map[product.id] = entry
            entry.revenue += revenue
            entry.cogs += cogs
            entry.profit += profit
            entry.quantity_sold += item.quantity

            if not product.category_id:
                continue
            category = category_map.get(product.category_id)
            if category is None:
                known = categories_by_id.get(product.category_id)
                category = CategoryProfit(
                    id=product.category_id,
                    name=known.name if known and known.name else "Category {}".format(product.category_id),
                )
                category_map[product.category_id] = category
            category.revenue += revenue
            category.cogs += cogs
            category.profit += profit
            category.items_sold += item.quantity

    for entry in product_map.values():
        entry.profit_margin = safe_ratio(entry.profit, entry.revenue)
    for category in category_map.values():
        category.profit_margin = safe_ratio(category.profit, category.revenue)

    return list(product_map.values()), list(category_map.values())


def analyze_profit(sales, products, categories, *, previous_sales=(), top_n=10) -> ProfitAnalysis:
    sale_records = as_records(SaleRecord, sales)
    previous_records = as_records(SaleRecord, previous_sales)
    products_by_id = index_by_id(as_records(ProductRecord, products))
    categories_by_id = index_by_id(as_records(CategoryRecord, categories))

    current = summarize_period(sale_records, products_by_id)
    previous = summarize_period(previous_records, products_by_id)

    daily, weekly, monthly, hourly = _time_series(sale_records, products_by_id)
    product_list, category_list = _product_and_category_profit(
        sale_records, products_by_id, categories_by_id
    )
    sold = [entry for entry in product_list if entry.quantity_sold > 0]

    logger.debug(
        "Profit analysis over %d sale(s), %d product(s), %d category(s).",
        len(sale_records),
        len(product_list),
        len(category_list),
    )

    return ProfitAnalysis(
        total_revenue=current.total_revenue,
        total_cogs=current.total_cogs,
        total_profit=current.total_profit,
        profit_margin=current.profit_margin,
        profit_growth=profit_growth(current.total_profit, previous.total_profit),
        average_order_value=safe_ratio(current.total_revenue, current.total_orders),
        total_orders=current.total_orders,
        daily_data=daily,
        weekly_data=weekly,
        monthly_data=monthly,
        hourly_data=hourly,
        category_data=sorted(category_list, key=lambda entry: entry.profit, reverse=True),
        top_products=sorted(product_list, key=lambda entry: entry.profit, reverse=True)[:top_n],
        low_margin_products=sorted(sold, key=lambda entry: entry.profit_margin)[:top_n],
        high_margin_products=sorted(sold, key=lambda entry: entry.profit_margin, reverse=True)[:top_n],
        previous_period=previous,
    )


__all__ = ["analyze_profit", "profit_growth", "sale_cogs", "summarize_period"]
