from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ExpenseLine(BaseModel):
    id: str
    amount: float
    description: str = ""
    category_id: Optional[str] = None
    category_name: str
    payment_date: Optional[datetime] = None


class ExpenseSummary(BaseModel):
    total_expenses: float = 0.0
    expenses_by_category: Dict[str, float] = Field(default_factory=dict)
    expenses_by_day: Dict[str, float] = Field(default_factory=dict)
    expenses: List[ExpenseLine] = Field(default_factory=list)


class NetProfitDay(BaseModel):
    date: str
    label: str
    revenue: float = 0.0
    cogs: float = 0.0
    gross_profit: float = 0.0
    operating_expenses: float = 0.0
    net_profit: float = 0.0


class NetProfit(BaseModel):
    total_revenue: float = 0.0
    total_cogs: float = 0.0
    gross_profit: float = 0.0
    gross_margin: float = 0.0
    total_operating_expenses: float = 0.0
    operating_expenses_by_category: Dict[str, float] = Field(default_factory=dict)
    net_profit: float = 0.0
    net_margin: float = 0.0
    daily_data: List[NetProfitDay] = Field(default_factory=list)


class DashboardStats(BaseModel):
    total_sales: float = 0.0
    total_expenses: float = 0.0
    profit: float = 0.0
    sales_count: int = 0
    expenses_count: int = 0
    total_products: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
