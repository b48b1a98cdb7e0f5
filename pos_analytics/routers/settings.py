from fastapi import APIRouter, Depends

from pos_analytics.core.formatting import DisplaySettings, supported_currencies
from pos_analytics.dependencies import get_display_settings

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("/display")
def display_settings(display: DisplaySettings = Depends(get_display_settings)):
    return {
        "currency": display.currency,
        "language": display.language,
        "supported_currencies": supported_currencies(),
    }


__all__ = ["router"]
