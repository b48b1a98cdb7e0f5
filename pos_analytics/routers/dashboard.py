from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.core.dates import day_bounds, normalize_date
from pos_analytics.core.formatting import DisplaySettings, format_currency, format_percent
from pos_analytics.core.numbers import safe_ratio
from pos_analytics.dependencies import get_db, get_display_settings, require_auth
from pos_analytics.schemas.expenses import DashboardStats
from pos_analytics.services.analytics_service import build_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(require_auth)])


def _optional_bounds(start, end):
    """Unbounded on either side when the caller leaves a day out."""
    start_day = normalize_date(start)
    end_day = normalize_date(end)
    if start_day is not None and end_day is not None and start_day > end_day:
        raise HTTPException(status_code=400, detail="start must not be after end.")
    range_start = day_bounds(start_day, start_day)[0] if start_day else None
    range_end = day_bounds(end_day, end_day)[1] if end_day else None
    return range_start, range_end


def _stats(db, start, end) -> DashboardStats:
    range_start, range_end = _optional_bounds(start, end)
    try:
        return build_dashboard_stats(db, range_start, range_end)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load dashboard data.") from exc


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    return _stats(db, start, end)


@router.get("/summary")
def dashboard_summary(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
    display: DisplaySettings = Depends(get_display_settings),
):
    stats = _stats(db, start, end)
    return {
        "currency": display.currency,
        "total_sales": format_currency(stats.total_sales, display),
        "total_expenses": format_currency(stats.total_expenses, display),
        "profit": format_currency(stats.profit, display),
        "profit_margin": format_percent(safe_ratio(stats.profit, stats.total_sales)),
        "sales_count": stats.sales_count,
        "low_stock_count": stats.low_stock_count,
        "out_of_stock_count": stats.out_of_stock_count,
    }


__all__ = ["router"]
