from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.core.inventory import DEFAULT_LOW_STOCK_LIMIT
from pos_analytics.dependencies import get_db, require_auth
from pos_analytics.schemas.inventory import LowStockReport, StockSummary
from pos_analytics.services.analytics_service import build_low_stock_report, build_stock_summary

router = APIRouter(prefix="/inventory", tags=["Inventory"], dependencies=[Depends(require_auth)])


@router.get("/stock-summary", response_model=StockSummary)
def stock_summary(db: Session = Depends(get_db)):
    try:
        return build_stock_summary(db)
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load inventory.") from exc


@router.get("/low-stock", response_model=LowStockReport)
def low_stock(
    urgency: str = Query("all", description="all, critical, high or medium"),
    limit: int = Query(DEFAULT_LOW_STOCK_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
):
    try:
        return build_low_stock_report(db, urgency, limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load inventory.") from exc


__all__ = ["router"]
