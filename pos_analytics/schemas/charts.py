from typing import List

from pydantic import BaseModel, Field


class ChartPoint(BaseModel):
    label: str
    value: float


class BarChart(BaseModel):
    title: str
    series_label: str
    points: List[ChartPoint] = Field(default_factory=list)


class CategoryChartRow(BaseModel):
    name: str
    sales: float
    quantity: float
    profit: float
    margin: float


class SalesOverTimePoint(BaseModel):
    date: str
    label: str
    revenue: float = 0.0
    profit: float = 0.0


class MetricCards(BaseModel):
    profit_margin_percent: float
    total_inventory_value: float
    total_units_in_stock: float
    average_stock_turnover: float
