import importlib

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from pos_analytics.config import Settings, get_settings
from pos_analytics.core.logging import setup_logging
from pos_analytics.database import Base, engine
from pos_analytics.routers import (
    analytics_router,
    dashboard_router,
    expenses_router,
    health_router,
    inventory_router,
    profit_router,
    settings_router,
)


def _import_models():
    for module_name in (
        "pos_analytics.models.expense",
        "pos_analytics.models.product",
        "pos_analytics.models.sales",
        "pos_analytics.models.settings",
    ):
        importlib.import_module(module_name)


setup_logging()
settings: Settings = get_settings()

_import_models()
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME)

app.include_router(health_router)
app.include_router(analytics_router)
app.include_router(profit_router)
app.include_router(expenses_router)
app.include_router(dashboard_router)
app.include_router(inventory_router)
app.include_router(settings_router)


@app.get("/")
def root():
    return RedirectResponse(url="/docs", status_code=302)


__all__ = ["app", "root"]
