from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.core.constants import PERIOD_OPTIONS
from pos_analytics.core.dates import parse_datetime
from pos_analytics.dependencies import get_db, require_auth
from pos_analytics.schemas.profit import ProfitAnalysis, ProfitInsights
from pos_analytics.services.analytics_service import build_profit_analysis, build_profit_insights

router = APIRouter(prefix="/profit", tags=["Profit"], dependencies=[Depends(require_auth)])


def _check_period(period: str | None, start: datetime | None, end: datetime | None) -> None:
    if period is not None and period not in PERIOD_OPTIONS:
        raise HTTPException(
            status_code=400,
            detail="Unknown period; expected one of {}.".format(", ".join(PERIOD_OPTIONS)),
        )
    start, end = parse_datetime(start), parse_datetime(end)
    if start is not None and end is not None and start > end:
        raise HTTPException(status_code=400, detail="start must not be after end.")


@router.get("/analysis", response_model=ProfitAnalysis)
def profit_analysis(
    period: str | None = Query(None, description="Named period, or 'custom' with start/end"),
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
    db: Session = Depends(get_db),
):
    _check_period(period, start, end)
    try:
        return build_profit_analysis(db, period, start, end)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load profit data.") from exc


@router.get("/insights", response_model=ProfitInsights)
def profit_insights(
    period: str | None = Query(None, description="Named period, or 'custom' with start/end"),
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
    db: Session = Depends(get_db),
):
    _check_period(period, start, end)
    try:
        return build_profit_insights(db, period, start, end)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load profit data.") from exc


__all__ = ["router"]
