from pos_analytics.services.analytics_service import (
    build_dashboard_stats,
    build_expense_summary,
    build_net_profit,
    build_product_analytics,
    build_profit_analysis,
    build_profit_insights,
)
from pos_analytics.services.export_service import export_filename, to_csv, to_xlsx

__all__ = [
    "build_dashboard_stats",
    "build_expense_summary",
    "build_net_profit",
    "build_product_analytics",
    "build_profit_analysis",
    "build_profit_insights",
    "export_filename",
    "to_csv",
    "to_xlsx",
]
