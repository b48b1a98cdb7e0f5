from pos_analytics.routers.analytics import router as analytics_router
from pos_analytics.routers.dashboard import router as dashboard_router
from pos_analytics.routers.expenses import router as expenses_router
from pos_analytics.routers.health import router as health_router
from pos_analytics.routers.inventory import router as inventory_router
from pos_analytics.routers.profit import router as profit_router
from pos_analytics.routers.settings import router as settings_router

__all__ = [
    "analytics_router",
    "dashboard_router",
    "expenses_router",
    "health_router",
    "inventory_router",
    "profit_router",
    "settings_router",
]
