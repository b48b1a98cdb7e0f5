from typing import List, Optional

from pydantic import BaseModel, Field


class ProductPerformance(BaseModel):
    product_id: str
    product_name: str
    category_id: Optional[str] = None
    category_name: str
    barcode: Optional[str] = None
    cost: float = 0.0
    price: float = 0.0
    total_quantity: float = 0.0
    total_sales: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0
    stock_level: float = 0.0
    days_in_stock: int = 0
    stock_turnover: float = 0.0


class CategoryPerformance(BaseModel):
    category_id: str
    category_name: str
    product_count: int = 0
    total_quantity: float = 0.0
    total_sales: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0


class OverallMetrics(BaseModel):
    total_sales: float = 0.0
    total_cost: float = 0.0
    total_profit: float = 0.0
    total_quantity: float = 0.0
    average_profit_margin: float = 0.0
    total_inventory_value: float = 0.0
    average_stock_turnover: float = 0.0


class OrphanedSales(BaseModel):
    """Sale items whose product is missing from the loaded product set."""

    item_count: int = 0
    total_quantity: float = 0.0
    total_revenue: float = 0.0
    product_ids: List[str] = Field(default_factory=list)


class AnalyticsResult(BaseModel):
    product_performance: List[ProductPerformance] = Field(default_factory=list)
    category_performance: List[CategoryPerformance] = Field(default_factory=list)
    overall_metrics: OverallMetrics = Field(default_factory=OverallMetrics)
    orphaned_sales: OrphanedSales = Field(default_factory=OrphanedSales)
