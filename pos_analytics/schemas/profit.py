from typing import List, Optional

from pydantic import BaseModel, Field


class PeriodSummary(BaseModel):
    total_revenue: float = 0.0
    total_cogs: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0
    total_orders: int = 0


class TimeBucket(BaseModel):
    key: str
    label: str
    revenue: float = 0.0
    cogs: float = 0.0
    profit: float = 0.0
    profit_margin: float = 0.0
    orders: int = 0


class HourBucket(BaseModel):
    hour: int
    label: str
    revenue: float = 0.0
    profit: float = 0.0
    orders: int = 0
    days: int = 0


class ProductProfit(BaseModel):
    id: str
    name: str
    revenue: float = 0.0
    cogs: float = 0.0
    profit: float = 0.0
    profit_margin: float = 0.0
    quantity_sold: float = 0.0


class CategoryProfit(BaseModel):
    id: str
    name: str
    revenue: float = 0.0
    cogs: float = 0.0
    profit: float = 0.0
    profit_margin: float = 0.0
    items_sold: float = 0.0


class ProfitAnalysis(BaseModel):
    total_revenue: float = 0.0
    total_cogs: float = 0.0
    total_profit: float = 0.0
    profit_margin: float = 0.0
    profit_growth: float = 0.0
    average_order_value: float = 0.0
    total_orders: int = 0

    daily_data: List[TimeBucket] = Field(default_factory=list)
    weekly_data: List[TimeBucket] = Field(default_factory=list)
    monthly_data: List[TimeBucket] = Field(default_factory=list)
    hourly_data: List[HourBucket] = Field(default_factory=list)

    category_data: List[CategoryProfit] = Field(default_factory=list)
    top_products: List[ProductProfit] = Field(default_factory=list)
    low_margin_products: List[ProductProfit] = Field(default_factory=list)
    high_margin_products: List[ProductProfit] = Field(default_factory=list)

    previous_period: PeriodSummary = Field(default_factory=PeriodSummary)


class DayInsight(BaseModel):
    day: str
    revenue: float = 0.0
    profit: float = 0.0
    orders: float = 0.0


class HourInsight(BaseModel):
    hour: str
    revenue: float = 0.0
    profit: float = 0.0
    orders: float = 0.0


class ProductCombination(BaseModel):
    products: List[str]
    occurrences: int = 0
    revenue: float = 0.0
    profit: float = 0.0
    estimated: bool = True
    basis: str = "heuristic"


class ProductOpportunity(BaseModel):
    id: str
    name: str
    metric: str
    value: float
    recommendation: str


class PricingOpportunity(BaseModel):
    id: str
    name: str
    current_price: float
    suggested_price: float
    potential_profit: float
    reason: str
    estimated: bool = True
    basis: str = "constant demand"


class InventoryInsight(BaseModel):
    id: str
    name: str
    insight: str
    recommendation: str
    impact: str


class ProfitInsights(BaseModel):
    best_day: Optional[DayInsight] = None
    worst_day: Optional[DayInsight] = None
    best_hour: Optional[HourInsight] = None
    worst_hour: Optional[HourInsight] = None
    top_product_combinations: List[ProductCombination] = Field(default_factory=list)
    product_opportunities: List[ProductOpportunity] = Field(default_factory=list)
    pricing_opportunities: List[PricingOpportunity] = Field(default_factory=list)
    inventory_insights: List[InventoryInsight] = Field(default_factory=list)
