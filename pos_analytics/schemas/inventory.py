from typing import List, Optional

from pydantic import BaseModel, Field


class CategoryStock(BaseModel):
    id: str
    name: str
    product_count: int = 0
    total_value: float = 0.0
    total_cost: float = 0.0
    has_sold_products: bool = False
    active_product_count: int = 0
    active_total_value: float = 0.0
    active_total_cost: float = 0.0


class StockSummary(BaseModel):
    total_retail_value: float = 0.0
    total_cost_value: float = 0.0
    total_profit_potential: float = 0.0
    total_products: int = 0
    total_units: float = 0.0
    categories: List[CategoryStock] = Field(default_factory=list)
    low_stock_value: float = 0.0
    high_stock_value: float = 0.0
    active_inventory_value: float = 0.0
    inactive_inventory_value: float = 0.0
    active_product_count: int = 0
    active_unit_count: float = 0.0
    active_cost_value: float = 0.0
    active_profit_potential: float = 0.0


class LowStockItem(BaseModel):
    id: str
    name: str
    barcode: Optional[str] = None
    current_stock: float
    min_stock: float
    price: float
    purchase_price: float
    category: str
    stock_deficit: float
    urgency_level: str
    stock_percentage: int
    restock_value: float


class LowStockReport(BaseModel):
    items: List[LowStockItem] = Field(default_factory=list)
    total_count: int = 0
    showing_count: int = 0
    critical_count: int = 0
    high_priority_count: int = 0
    medium_priority_count: int = 0
    total_restock_value: float = 0.0
    urgency_filter: str = "all"
