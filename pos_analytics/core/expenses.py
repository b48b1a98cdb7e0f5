from __future__ import annotations

from datetime import datetime, timezone

from pos_analytics.core.constants import UNCATEGORIZED
from pos_analytics.core.dates import day_key, day_label
from pos_analytics.core.metrics import index_by_id, item_revenue
from pos_analytics.core.numbers import safe_ratio
from pos_analytics.schemas.expenses import (
    DashboardStats,
    ExpenseLine,
    ExpenseSummary,
    NetProfit,
    NetProfitDay,
)
from pos_analytics.schemas.records import (
    ExpenseCategoryRecord,
    ExpenseRecord,
    ProductRecord,
    SaleRecord,
    as_records,
)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def summarize_expenses(expenses, categories) -> ExpenseSummary:
    categories_by_id = index_by_id(as_records(ExpenseCategoryRecord, categories))
    summary = ExpenseSummary()

    for expense in as_records(ExpenseRecord, expenses):
        category = categories_by_id.get(expense.category_id) if expense.category_id else None
        name = category.name if category is not None and category.name else UNCATEGORIZED

        summary.total_expenses += expense.amount
        summary.expenses_by_category[name] = summary.expenses_by_category.get(name, 0.0) + expense.amount
        if expense.payment_date is not None:
            key = day_key(expense.payment_date)
            summary.expenses_by_day[key] = summary.expenses_by_day.get(key, 0.0) + expense.amount

        summary.expenses.append(
            ExpenseLine(
                id=expense.id,
                amount=expense.amount,
                description=expense.description,
                category_id=expense.category_id,
                category_name=name,
                payment_date=expense.payment_date,
            )
        )

    summary.expenses.sort(key=lambda line: line.payment_date or _OLDEST, reverse=True)
    return summary


def compute_net_profit(sales, products, expenses, expense_categories) -> NetProfit:
    products_by_id = index_by_id(as_records(ProductRecord, products))
    expense_summary = summarize_expenses(expenses, expense_categories)

    revenue_by_day: dict[str, float] = {}
    cogs_by_day: dict[str, float] = {}
    total_revenue = 0.0
    total_cogs = 0.0

    for sale in as_records(SaleRecord, sales):
        sale_revenue = 0.0
        sale_cogs = 0.0
        for item in sale.sale_items:
            product = products_by_id.get(item.product_id)
            if product is None:
                continue
            sale_revenue += item_revenue(item.price, item.quantity, item.discount)
            sale_cogs += product.purchase_price * item.quantity
        total_revenue += sale_revenue
        total_cogs += sale_cogs
        if sale.created_at is not None:
            key = day_key(sale.created_at)
            revenue_by_day[key] = revenue_by_day.get(key, 0.0) + sale_revenue
            cogs_by_day[key] = cogs_by_day.get(key, 0.0) + sale_cogs

    gross_profit = total_revenue - total_cogs
    net_profit = gross_profit - expense_summary.total_expenses

    daily = []
    all_days = set(revenue_by_day) | set(cogs_by_day) | set(expense_summary.expenses_by_day)
    for key in sorted(all_days):
        revenue = revenue_by_day.get(key, 0.0)
        cogs = cogs_by_day.get(key, 0.0)
        operating = expense_summary.expenses_by_day.get(key, 0.0)
        daily.append(
            NetProfitDay(
                date=key,
                label=day_label(datetime.fromisoformat(key)),
                revenue=revenue,
                cogs=cogs,
                gross_profit=revenue - cogs,
                operating_expenses=operating,
                net_profit=revenue - cogs - operating,
            )
        )

    return NetProfit(
        total_revenue=total_revenue,
        total_cogs=total_cogs,
        gross_profit=gross_profit,
        gross_margin=safe_ratio(gross_profit, total_revenue),
        total_operating_expenses=expense_summary.total_expenses,
        operating_expenses_by_category=expense_summary.expenses_by_category,
        net_profit=net_profit,
        net_margin=safe_ratio(net_profit, total_revenue),
        daily_data=daily,
    )


def dashboard_stats(sales, expenses, products) -> DashboardStats:
    sale_records = as_records(SaleRecord, sales)
    expense_records = as_records(ExpenseRecord, expenses)
    product_records = as_records(ProductRecord, products)

    total_sales = sum(sale.total for sale in sale_records)
    total_expenses = sum(expense.amount for expense in expense_records)

    return DashboardStats(
        total_sales=round(total_sales, 2),
        total_expenses=round(total_expenses, 2),
        profit=round(total_sales - total_expenses, 2),
        sales_count=len(sale_records),
        expenses_count=len(expense_records),
        total_products=len(product_records),
        low_stock_count=sum(1 for product in product_records if product.stock < product.min_stock),
        out_of_stock_count=sum(1 for product in product_records if product.stock == 0),
    )


__all__ = ["compute_net_profit", "dashboard_stats", "summarize_expenses"]
