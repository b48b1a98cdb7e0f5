import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pos_analytics.core.charts import category_chart, metric_cards, sales_over_time, top_products_chart
from pos_analytics.core.dates import resolve_day_range
from pos_analytics.dependencies import get_db, require_auth
from pos_analytics.schemas.analytics import AnalyticsResult
from pos_analytics.services import data_service
from pos_analytics.services.analytics_service import (
    PRODUCT_ANALYTICS,
    build_product_analytics,
    latest_report,
)
from pos_analytics.services.export_service import (
    CSV_MEDIA_TYPE,
    XLSX_MEDIA_TYPE,
    export_filename,
    to_csv,
    to_xlsx,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"], dependencies=[Depends(require_auth)])

_REPORT_NAME = "product-analytics"


def _bounds(start, end):
    try:
        return resolve_day_range(start, end)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _metrics(db, start, end):
    range_start, range_end = _bounds(start, end)
    try:
        return build_product_analytics(db, range_start, range_end), range_start, range_end
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail="Failed to load analytics data.") from exc


@router.get("/metrics", response_model=AnalyticsResult)
def product_metrics(
    start: date | None = Query(None, description="First day (inclusive)"),
    end: date | None = Query(None, description="Last day (inclusive)"),
    db: Session = Depends(get_db),
):
    result, _, _ = _metrics(db, start, end)
    return result


@router.get("/latest", response_model=AnalyticsResult)
def latest_metrics():
    result = latest_report(PRODUCT_ANALYTICS)
    if result is None:
        raise HTTPException(status_code=404, detail="No analytics computed yet.")
    return result


@router.get("/charts/top-products")
def top_products(
    metric: str = Query("profit", description="profit, revenue or quantity"),
    limit: int = Query(5, ge=1, le=50),
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    result, _, _ = _metrics(db, start, end)
    try:
        return top_products_chart(result, metric=metric, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/charts/categories")
def categories(
    metric: str = Query("profit", description="profit, revenue or quantity"),
    limit: int = Query(10, ge=1, le=100),
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    result, _, _ = _metrics(db, start, end)
    try:
        return category_chart(result, metric=metric, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get("/charts/sales-over-time")
def sales_trend(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    range_start, range_end = _bounds(start, end)
    try:
        products = data_service.load_products(db)
        sales = data_service.load_sales(db, range_start, range_end)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load sales trend.")
        raise HTTPException(status_code=503, detail="Failed to load sales data.") from exc
    return sales_over_time(sales, products, range_start, range_end)


@router.get("/cards")
def cards(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    result, _, _ = _metrics(db, start, end)
    return metric_cards(result)


@router.get("/export.csv")
def export_csv(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    result, range_start, range_end = _metrics(db, start, end)
    if not result.product_performance:
        raise HTTPException(status_code=404, detail="No data to export.")
    filename = export_filename(_REPORT_NAME, range_start, range_end)
    return Response(
        content=to_csv(result.product_performance).encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


@router.get("/export.xlsx")
def export_xlsx(
    start: date | None = Query(None),
    end: date | None = Query(None),
    db: Session = Depends(get_db),
):
    result, range_start, range_end = _metrics(db, start, end)
    if not result.product_performance:
        raise HTTPException(status_code=404, detail="No data to export.")
    filename = export_filename(_REPORT_NAME, range_start, range_end, ext="xlsx")
    return Response(
        content=to_xlsx(result.product_performance, sheet_name="Product Analytics"),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


__all__ = ["router"]
