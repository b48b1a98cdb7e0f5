from pos_analytics.models.expense import OperatingExpense, OperatingExpenseCategory
from pos_analytics.models.product import Category, Product
from pos_analytics.models.sales import Sale, SaleItem
from pos_analytics.models.settings import AppSetting

__all__ = [
    "AppSetting",
    "Category",
    "OperatingExpense",
    "OperatingExpenseCategory",
    "Product",
    "Sale",
    "SaleItem",
]
