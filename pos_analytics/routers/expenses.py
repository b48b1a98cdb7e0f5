from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.core.dates import resolve_day_range
from pos_analytics.dependencies import get_db, require_auth
from pos_analytics.schemas.expenses import ExpenseSummary, NetProfit
from pos_analytics.services.analytics_service import build_expense_summary, build_net_profit

router = APIRouter(prefix="/expenses", tags=["Expenses"], dependencies=[Depends(require_auth)])


def _day_range(start, end):
    try:
        return resolve_day_range(start, end)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/summary", response_model=ExpenseSummary)
def expense_summary(
    start: date | None = Query(None, description="First day (inclusive)"),
    end: date | None = Query(None, description="Last day (inclusive)"),
    db: Session = Depends(get_db),
):
    range_start, range_end = _day_range(start, end)
    try:
        return build_expense_summary(db, range_start, range_end)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load expenses.") from exc


@router.get("/net-profit", response_model=NetProfit)
def net_profit(
    start: date | None = Query(None, description="First day (inclusive)"),
    end: date | None = Query(None, description="Last day (inclusive)"),
    db: Session = Depends(get_db),
):
    range_start, range_end = _day_range(start, end)
    try:
        return build_net_profit(db, range_start, range_end)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load net profit data.") from exc


__all__ = ["router"]
