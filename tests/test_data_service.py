import unittest
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import sessionmaker

from pos_analytics.core.constants import GLOBAL_SETTINGS_TYPE
from pos_analytics.database import Base, build_engine
from pos_analytics.models import (
    AppSetting,
    Category,
    OperatingExpense,
    OperatingExpenseCategory,
    Product,
    Sale,
    SaleItem,
)
from pos_analytics.services import data_service
from pos_analytics.services.analytics_service import build_product_analytics

START = datetime(2024, 4, 1, 9, 0, tzinfo=timezone.utc)


class DataServiceTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine)
        self.db = self.Session()

        category = Category(id="c1", name="Snacks")
        self.db.add(category)
        self.db.flush()
        self.db.add_all(
            [
                Product(id="p1", name="Chips", price=2.0, purchase_price=0.5, stock=10, min_stock=3,
                        category_id="c1", created_at=START - timedelta(days=10)),
                Product(id="p2", name="Soda", price=1.5, purchase_price=None, stock=0, min_stock=5,
                        created_at=START - timedelta(days=5)),
            ]
        )
        for day in range(5):
            sale = Sale(id="s{}".format(day), total=3.5, created_at=START + timedelta(days=day))
            sale.sale_items.append(SaleItem(product_id="p2", position=1, quantity=1, price=1.5))
            sale.sale_items.append(SaleItem(product_id="p1", position=0, quantity=1, price=2.0))
            self.db.add(sale)

        rent = OperatingExpenseCategory(id="e1", name="Rent")
        self.db.add(rent)
        self.db.flush()
        self.db.add_all(
            [
                OperatingExpense(id="x1", amount=100, description="Rent", category_id="e1",
                                 payment_date=START),
                OperatingExpense(id="x2", amount=20, description="Cleaning",
                                 payment_date=START + timedelta(days=3)),
            ]
        )
        self.db.commit()
        self.db.close()
        self.db = self.Session()

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def test_sales_are_read_page_by_page(self):
        sales = data_service.load_sales(self.db, page_size=2)

        self.assertEqual([sale.id for sale in sales], ["s0", "s1", "s2", "s3", "s4"])
        self.assertEqual([item.product_id for item in sales[0].sale_items], ["p1", "p2"])
        self.assertEqual(sales[0].created_at.tzinfo, timezone.utc)

    def test_sales_date_filter(self):
        sales = data_service.load_sales(
            self.db,
            START + timedelta(days=1),
            START + timedelta(days=3),
            page_size=1,
        )

        self.assertEqual([sale.id for sale in sales], ["s1", "s2", "s3"])

    def test_products_and_categories(self):
        products = data_service.load_products(self.db, page_size=1)
        categories = data_service.load_categories(self.db)

        self.assertEqual([product.id for product in products], ["p1", "p2"])
        self.assertEqual(products[1].purchase_price, 0)
        self.assertEqual(categories[0].name, "Snacks")

    def test_expenses(self):
        expenses = data_service.load_expenses(self.db, START + timedelta(days=1))
        categories = data_service.load_expense_categories(self.db)

        self.assertEqual([expense.id for expense in expenses], ["x2"])
        self.assertIsNone(expenses[0].category_id)
        self.assertEqual(categories[0].id, "e1")

    def test_display_settings_default_and_stored(self):
        default = data_service.load_display_settings(self.db)
        self.assertEqual(default.currency, "USD")

        self.db.add(AppSetting(type=GLOBAL_SETTINGS_TYPE, currency=" mad ", language="fr"))
        self.db.commit()

        stored = data_service.load_display_settings(self.db)
        self.assertEqual(stored.currency, "MAD")
        self.assertEqual(stored.language, "fr")

    def test_display_settings_survive_missing_table(self):
        engine = build_engine("sqlite://")
        db = sessionmaker(bind=engine)()
        try:
            with self.assertLogs("pos_analytics.services.data_service", level="ERROR"):
                display = data_service.load_display_settings(db)
        finally:
            db.close()
            engine.dispose()

        self.assertEqual(display.currency, "USD")

    def test_product_analytics_from_database(self):
        result = build_product_analytics(self.db, START, START + timedelta(days=30), now=START)
        by_id = {perf.product_id: perf for perf in result.product_performance}

        self.assertAlmostEqual(by_id["p1"].total_sales, 10)
        self.assertAlmostEqual(by_id["p1"].total_profit, 7.5)
        self.assertAlmostEqual(by_id["p2"].profit_margin, 1.0)
        self.assertEqual(by_id["p1"].days_in_stock, 10)
        self.assertEqual(result.category_performance[0].category_name, "Snacks")


if __name__ == "__main__":
    unittest.main()
