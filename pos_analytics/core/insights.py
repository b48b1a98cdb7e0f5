"""Advisory heuristics derived from a :class:`ProfitAnalysis`.

Day and hour rankings are measured from the sales series. Product
combinations and pricing suggestions are estimates built from fixed
weights, and their output records carry ``estimated=True`` so callers do
not present them as observed figures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from pos_analytics.core.constants import WEEKDAY_NAMES
from pos_analytics.core.numbers import round_half_up
from pos_analytics.schemas.profit import (
    DayInsight,
    HourInsight,
    InventoryInsight,
    PricingOpportunity,
    ProductCombination,
    ProductOpportunity,
    ProfitAnalysis,
    ProfitInsights,
)


@dataclass(frozen=True)
class CombinationWeight:
    first: int
    second: int
    occurrence_weight: float
    value_weight: float


def _default_combinations():
    return (
        CombinationWeight(0, 1, 0.3, 0.2),
        CombinationWeight(0, 2, 0.2, 0.15),
        CombinationWeight(1, 3, 0.15, 0.1),
    )


@dataclass(frozen=True)
class InsightSettings:
    combinations: tuple = field(default_factory=_default_combinations)

    pricing_margin_threshold: float = 0.30
    pricing_demand_share: float = 0.10
    price_uplift: float = 0.10
    max_pricing_suggestions: int = 5

    high_margin_threshold: float = 0.40
    low_demand_share: float = 0.10
    popular_demand_share: float = 0.20
    max_product_opportunities: int = 3

    category_margin_gap: float = 0.15


def _pick_extremes(candidates):
    """Return (best, worst) by average revenue; earlier candidates win ties."""
    best = worst = None
    for candidate in candidates:
        if best is None or candidate.revenue > best.revenue:
            best = candidate
        if worst is None or candidate.revenue < worst.revenue:
            worst = candidate
    return best, worst


def best_and_worst_day(daily_data):
    totals = {}
    for bucket in daily_data:
        try:
            weekday = date.fromisoformat(bucket.key).weekday()
        except ValueError:
            continue
        stats = totals.setdefault(weekday, {"revenue": 0.0, "profit": 0.0, "orders": 0.0, "count": 0})
        stats["revenue"] += bucket.revenue
        stats["profit"] += bucket.profit
        stats["orders"] += bucket.orders
        stats["count"] += 1

    candidates = [
        DayInsight(
            day=WEEKDAY_NAMES[weekday],
            revenue=stats["revenue"] / stats["count"],
            profit=stats["profit"] / stats["count"],
            orders=stats["orders"] / stats["count"],
        )
        for weekday, stats in sorted(totals.items())
    ]
    return _pick_extremes(candidates)


def best_and_worst_hour(hourly_data):
    candidates = []
    for bucket in sorted(hourly_data, key=lambda entry: entry.hour):
        days = bucket.days or 1
        candidates.append(
            HourInsight(
                hour=bucket.label,
                revenue=bucket.revenue / days,
                profit=bucket.profit / days,
                orders=bucket.orders / days,
            )
        )
    return _pick_extremes(candidates)


def estimate_product_combinations(top_products, settings: InsightSettings | None = None):
    settings = settings or InsightSettings()
    combinations = []
    for weight in settings.combinations:
        if max(weight.first, weight.second) >= len(top_products):
            continue
        first = top_products[weight.first]
        second = top_products[weight.second]
        combinations.append(
            ProductCombination(
                products=[first.name, second.name],
                occurrences=round_half_up(first.quantity_sold * weight.occurrence_weight),
                revenue=round_half_up(
                    first.revenue * weight.value_weight + second.revenue * weight.value_weight
                ),
                profit=round_half_up(
                    first.profit * weight.value_weight + second.profit * weight.value_weight
                ),
            )
        )
    return combinations


def pricing_opportunities(top_products, total_orders, settings: InsightSettings | None = None):
    settings = settings or InsightSettings()
    demand_floor = total_orders * settings.pricing_demand_share
    suggestions = []
    for product in top_products:
        if len(suggestions) >= settings.max_pricing_suggestions:
            break
        if product.profit_margin >= settings.pricing_margin_threshold:
            continue
        if product.quantity_sold <= demand_floor or product.quantity_sold <= 0:
            continue
        current_price = product.revenue / product.quantity_sold
        suggested_price = current_price * (1 + settings.price_uplift)
        unit_cost = product.cogs / product.quantity_sold
        potential_profit = (suggested_price - unit_cost) * product.quantity_sold - product.profit
        suggestions.append(
            PricingOpportunity(
                id=product.id,
                name=product.name,
                current_price=current_price,
                suggested_price=suggested_price,
                potential_profit=potential_profit,
                reason="High demand allows for price optimization",
            )
        )
    return suggestions


def product_opportunities(analysis: ProfitAnalysis, settings: InsightSettings | None = None):
    settings = settings or InsightSettings()
    limit = settings.max_product_opportunities

    high_margin_low_sales = [
        product
        for product in analysis.high_margin_products
        if product.quantity_sold < analysis.total_orders * settings.low_demand_share
        and product.profit_margin > settings.high_margin_threshold
    ][:limit]
    popular_low_margin = [
        product
        for product in analysis.top_products
        if product.quantity_sold > analysis.total_orders * settings.popular_demand_share
        and product.profit_margin < analysis.profit_margin
    ][:limit]

    opportunities = [
        ProductOpportunity(
            id=product.id,
            name=product.name,
            metric="Profit Margin",
            value=product.profit_margin,
            recommendation="High margin but low sales. Consider better placement or promotion.",
        )
        for product in high_margin_low_sales
    ]
    opportunities.extend(
        ProductOpportunity(
            id=product.id,
            name=product.name,
            metric="Profit Margin",
            value=product.profit_margin,
            recommendation="Popular but below average margin. Consider slight price increase.",
        )
        for product in popular_low_margin
    )
    return opportunities


def inventory_insights(analysis: ProfitAnalysis, settings: InsightSettings | None = None):
    settings = settings or InsightSettings()
    insights = []

    if len(analysis.category_data) > 1:
        top = analysis.category_data[0]
        bottom = analysis.category_data[-1]
        if top.profit_margin > bottom.profit_margin + settings.category_margin_gap:
            insights.append(
                InventoryInsight(
                    id="cat-1",
                    name=top.name,
                    insight="{} has a {:.1f}% margin vs {}'s {:.1f}%".format(
                        top.name,
                        top.profit_margin * 100,
                        bottom.name,
                        bottom.profit_margin * 100,
                    ),
                    recommendation="Allocate more shelf space and inventory to {} products".format(top.name),
                    impact="high",
                )
            )

    if analysis.low_margin_products:
        worst = analysis.low_margin_products[0]
        insights.append(
            InventoryInsight(
                id="prod-1",
                name=worst.name,
                insight="{} has only {:.1f}% margin but sells {:g} units".format(
                    worst.name, worst.profit_margin * 100, worst.quantity_sold
                ),
                recommendation="Consider finding alternative supplier or reformulating pricing",
                impact="medium",
            )
        )
    return insights


def generate_insights(analysis: ProfitAnalysis, settings: InsightSettings | None = None) -> ProfitInsights:
    settings = settings or InsightSettings()
    best_day, worst_day = best_and_worst_day(analysis.daily_data)
    best_hour, worst_hour = best_and_worst_hour(analysis.hourly_data)
    return ProfitInsights(
        best_day=best_day,
        worst_day=worst_day,
        best_hour=best_hour,
        worst_hour=worst_hour,
        top_product_combinations=estimate_product_combinations(analysis.top_products, settings),
        product_opportunities=product_opportunities(analysis, settings),
        pricing_opportunities=pricing_opportunities(
            analysis.top_products, analysis.total_orders, settings
        ),
        inventory_insights=inventory_insights(analysis, settings),
    )


__all__ = [
    "CombinationWeight",
    "InsightSettings",
    "best_and_worst_day",
    "best_and_worst_hour",
    "estimate_product_combinations",
    "generate_insights",
    "inventory_insights",
    "pricing_opportunities",
    "product_opportunities",
]
