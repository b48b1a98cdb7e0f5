"""Adapters from aggregation results to chart view models."""

from __future__ import annotations

from operator import attrgetter

from pos_analytics.core.constants import UNCATEGORIZED
from pos_analytics.core.dates import day_label, each_day, normalize_date
from pos_analytics.core.metrics import index_by_id, item_revenue
from pos_analytics.schemas.analytics import AnalyticsResult
from pos_analytics.schemas.charts import (
    BarChart,
    CategoryChartRow,
    ChartPoint,
    MetricCards,
    SalesOverTimePoint,
)
from pos_analytics.schemas.records import ProductRecord, SaleRecord, as_records

CHART_METRICS = ("profit", "revenue", "quantity")

_METRIC_FIELDS = {
    "profit": "total_profit",
    "revenue": "total_sales",
    "quantity": "total_quantity",
}

_SERIES_LABELS = {
    "profit": "Profit",
    "revenue": "Revenue",
    "quantity": "Units Sold",
}


def _check_metric(metric: str) -> str:
    if metric not in CHART_METRICS:
        raise ValueError(
            "Unknown chart metric {!r}; expected one of {}".format(metric, ", ".join(CHART_METRICS))
        )
    return metric


def top_products_chart(result: AnalyticsResult, metric: str = "profit", limit: int = 5) -> BarChart:
    value_of = attrgetter(_METRIC_FIELDS[_check_metric(metric)])
    ranked = sorted(result.product_performance, key=value_of, reverse=True)[:limit]
    return BarChart(
        title="Top products by {}".format(metric),
        series_label=_SERIES_LABELS[metric],
        points=[ChartPoint(label=perf.product_name, value=value_of(perf)) for perf in ranked],
    )


def category_chart(result: AnalyticsResult, metric: str = "profit", limit: int = 10):
    metric = _check_metric(metric)
    ranked = sorted(
        result.category_performance,
        key=attrgetter(_METRIC_FIELDS[metric]),
        reverse=True,
    )[:limit]
    return [
        CategoryChartRow(
            name=category.category_name or UNCATEGORIZED,
            sales=round(category.total_sales, 2),
            quantity=round(category.total_quantity),
            profit=round(category.total_profit, 2),
            margin=round(category.profit_margin * 100, 1),
        )
        for category in ranked
    ]


def sales_over_time(sales, products, start, end):
    start_day = normalize_date(start)
    end_day = normalize_date(end)
    if start_day is None or end_day is None:
        return []

    products_by_id = index_by_id(as_records(ProductRecord, products))
    points = {
        day: SalesOverTimePoint(date=day.isoformat(), label=day_label(day))
        for day in each_day(start_day, end_day)
    }

    for sale in as_records(SaleRecord, sales):
        if sale.created_at is None:
            continue
        point = points.get(sale.created_at.date())
        if point is None:
            continue
        point.revenue += sale.total
        for item in sale.sale_items:
            product = products_by_id.get(item.product_id)
            cost = product.purchase_price if product is not None else 0.0
            point.profit += item_revenue(item.price, item.quantity, item.discount) - cost * item.quantity

    return [points[day] for day in sorted(points)]


def metric_cards(result: AnalyticsResult) -> MetricCards:
    overall = result.overall_metrics
    return MetricCards(
        profit_margin_percent=round(overall.average_profit_margin * 100, 1),
        total_inventory_value=round(overall.total_inventory_value, 2),
        total_units_in_stock=sum(perf.stock_level for perf in result.product_performance),
        average_stock_turnover=round(overall.average_stock_turnover, 1),
    )


__all__ = [
    "CHART_METRICS",
    "category_chart",
    "metric_cards",
    "sales_over_time",
    "top_products_chart",
]
