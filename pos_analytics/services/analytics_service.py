import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.config import get_settings
from pos_analytics.core.dates import get_date_range, get_previous_period_range
from pos_analytics.core.expenses import compute_net_profit, dashboard_stats, summarize_expenses
from pos_analytics.core.generations import ReportStore
from pos_analytics.core.insights import InsightSettings, generate_insights
from pos_analytics.core.inventory import DEFAULT_LOW_STOCK_LIMIT, low_stock_report, stock_summary
from pos_analytics.core.metrics import compute_metrics
from pos_analytics.core.profit_analysis import analyze_profit
from pos_analytics.services import data_service

logger = logging.getLogger(__name__)

PRODUCT_ANALYTICS = "product-analytics"
PROFIT_ANALYSIS = "profit-analysis"
PROFIT_INSIGHTS = "profit-insights"
EXPENSE_SUMMARY = "expense-summary"
NET_PROFIT = "net-profit"
DASHBOARD_STATS = "dashboard-stats"
STOCK_SUMMARY = "stock-summary"
LOW_STOCK = "low-stock"

report_store = ReportStore()


def run_report(key, build, *, store=None):
    """Build a report under a fresh generation token and publish it if still current.

    The caller always gets its own result back; only the shared latest
    result is protected from being overwritten by a superseded run.
    """
    store = store or report_store
    token = store.begin(key)
    try:
        result = build()
    except SQLAlchemyError:
        logger.exception("Failed to build %s report.", key)
        raise
    store.publish(key, token, result)
    return result


def latest_report(key, *, store=None):
    return (store or report_store).latest(key)


def build_product_analytics(db: Session, start, end, *, now=None):
    def build():
        products = data_service.load_products(db)
        categories = data_service.load_categories(db)
        sales = data_service.load_sales(db, start, end)
        return compute_metrics(sales, products, categories, now=now)

    return run_report(PRODUCT_ANALYTICS, build)


def load_profit_analysis(db: Session, period=None, start=None, end=None, *, now=None):
    settings = get_settings()
    if not period:
        period = "custom" if start is not None or end is not None else settings.DEFAULT_PERIOD
    range_start, range_end = get_date_range(period, start, end, now)
    previous_start, previous_end = get_previous_period_range(range_start, range_end, now)

    products = data_service.load_products(db)
    categories = data_service.load_categories(db)
    sales = data_service.load_sales(db, range_start, range_end)
    previous_sales = data_service.load_sales(db, previous_start, previous_end)
    return analyze_profit(
        sales,
        products,
        categories,
        previous_sales=previous_sales,
        top_n=settings.TOP_PRODUCTS_LIMIT,
    )


def build_profit_analysis(db: Session, period=None, start=None, end=None, *, now=None):
    return run_report(
        PROFIT_ANALYSIS,
        lambda: load_profit_analysis(db, period, start, end, now=now),
    )


def build_profit_insights(
    db: Session,
    period=None,
    start=None,
    end=None,
    *,
    insight_settings: InsightSettings | None = None,
    now=None,
):
    def build():
        analysis = load_profit_analysis(db, period, start, end, now=now)
        return generate_insights(analysis, insight_settings)

    return run_report(PROFIT_INSIGHTS, build)


def build_expense_summary(db: Session, start, end):
    def build():
        expenses = data_service.load_expenses(db, start, end)
        categories = data_service.load_expense_categories(db)
        return summarize_expenses(expenses, categories)

    return run_report(EXPENSE_SUMMARY, build)


def build_net_profit(db: Session, start, end):
    def build():
        products = data_service.load_products(db)
        sales = data_service.load_sales(db, start, end)
        expenses = data_service.load_expenses(db, start, end)
        categories = data_service.load_expense_categories(db)
        return compute_net_profit(sales, products, expenses, categories)

    return run_report(NET_PROFIT, build)


def build_dashboard_stats(db: Session, start=None, end=None):
    def build():
        sales = data_service.load_sales(db, start, end)
        expenses = data_service.load_expenses(db, start, end)
        products = data_service.load_products(db)
        return dashboard_stats(sales, expenses, products)

    return run_report(DASHBOARD_STATS, build)


def build_stock_summary(db: Session):
    def build():
        products = data_service.load_products(db)
        categories = data_service.load_categories(db)
        sold = data_service.load_sold_product_ids(db)
        return stock_summary(products, categories, sold)

    return run_report(STOCK_SUMMARY, build)


def build_low_stock_report(db: Session, urgency="all", limit=DEFAULT_LOW_STOCK_LIMIT):
    def build():
        products = data_service.load_products(db)
        categories = data_service.load_categories(db)
        return low_stock_report(products, categories, urgency=urgency, limit=limit)

    return run_report(LOW_STOCK, build)

__all__ = [
    "DASHBOARD_STATS",
    "EXPENSE_SUMMARY",
    "LOW_STOCK",
    "NET_PROFIT",
    "PRODUCT_ANALYTICS",
    "PROFIT_ANALYSIS",
    "PROFIT_INSIGHTS",
    "STOCK_SUMMARY",
    "build_dashboard_stats",
    "build_expense_summary",
    "build_low_stock_report",
    "build_net_profit",
    "build_product_analytics",
    "build_profit_analysis",
    "build_profit_insights",
    "build_stock_summary",
    "latest_report",
    "load_profit_analysis",
    "report_store",
    "run_report",
]
