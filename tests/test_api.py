import io
import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from sqlalchemy.orm import sessionmaker

from pos_analytics.config import Settings
from pos_analytics.core.constants import GLOBAL_SETTINGS_TYPE
from pos_analytics.database import Base, build_engine
from pos_analytics.database.session import get_db
from pos_analytics.models import (
    AppSetting,
    Category,
    OperatingExpense,
    Product,
    Sale,
    SaleItem,
)
from pos_analytics.routers import (
    analytics_router,
    dashboard_router,
    expenses_router,
    health_router,
    inventory_router,
    profit_router,
    settings_router,
)
from pos_analytics.services.analytics_service import report_store

DAY = datetime(2024, 5, 6, 11, 0, tzinfo=timezone.utc)
RANGE = {"start": "2024-05-01", "end": "2024-05-31"}


def _build_app():
    app = FastAPI()
    for router in (
        health_router,
        analytics_router,
        profit_router,
        expenses_router,
        dashboard_router,
        inventory_router,
        settings_router,
    ):
        app.include_router(router)
    return app


class ApiTest(unittest.TestCase):
    def setUp(self):
        self.engine = build_engine("sqlite://")
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(bind=self.engine)

        db = self.Session()
        db.add(Category(id="c1", name="Bakery"))
        db.add_all(
            [
                Product(id="p1", name="Bagel, plain", price=3, purchase_price=1, stock=12, min_stock=4,
                        category_id="c1", created_at=DAY - timedelta(days=20)),
                Product(id="p2", name="Scone", price=4, purchase_price=3.5, stock=0, min_stock=2,
                        category_id="c1", created_at=DAY - timedelta(days=20)),
            ]
        )
        for offset in range(3):
            sale = Sale(id="s{}".format(offset), total=10, created_at=DAY + timedelta(days=offset))
            sale.sale_items.append(SaleItem(product_id="p1", position=0, quantity=2, price=3))
            sale.sale_items.append(SaleItem(product_id="p2", position=1, quantity=1, price=4))
            db.add(sale)
        db.add(OperatingExpense(id="x1", amount=12.5, description="Flour delivery", payment_date=DAY))
        db.add(AppSetting(type=GLOBAL_SETTINGS_TYPE, currency="EUR", language="en"))
        db.commit()
        db.close()

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        self.app = _build_app()
        self.app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(self.app)
        report_store.clear()

    def tearDown(self):
        self.app.dependency_overrides.clear()
        self.engine.dispose()

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["database"], "ok")

    def test_metrics_and_latest(self):
        self.assertEqual(self.client.get("/analytics/latest").status_code, 404)

        response = self.client.get("/analytics/metrics", params=RANGE)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        overall = body["overall_metrics"]
        self.assertAlmostEqual(overall["total_sales"], 30)
        self.assertAlmostEqual(overall["total_profit"], 30 - 6 - 10.5)
        self.assertEqual(body["orphaned_sales"]["item_count"], 0)

        latest = self.client.get("/analytics/latest")
        self.assertEqual(latest.status_code, 200)
        self.assertEqual(latest.json(), body)

    def test_inverted_range_is_rejected(self):
        response = self.client.get("/analytics/metrics", params={"start": "2024-05-31", "end": "2024-05-01"})

        self.assertEqual(response.status_code, 400)

    def test_charts_and_cards(self):
        chart = self.client.get("/analytics/charts/top-products", params=dict(RANGE, metric="revenue"))
        self.assertEqual(chart.status_code, 200)
        self.assertEqual(chart.json()["points"][0]["label"], "Bagel, plain")

        bad = self.client.get("/analytics/charts/categories", params={"metric": "stock"})
        self.assertEqual(bad.status_code, 400)

        trend = self.client.get(
            "/analytics/charts/sales-over-time", params={"start": "2024-05-05", "end": "2024-05-09"}
        )
        self.assertEqual(len(trend.json()), 5)
        self.assertAlmostEqual(trend.json()[1]["revenue"], 10)

        cards = self.client.get("/analytics/cards", params=RANGE).json()
        self.assertEqual(cards["total_units_in_stock"], 12)

    def test_csv_export(self):
        response = self.client.get("/analytics/export.csv", params=RANGE)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/csv"))
        self.assertIn(
            "product-analytics-2024-05-01-to-2024-05-31.csv",
            response.headers["content-disposition"],
        )
        lines = response.text.split("\n")
        self.assertTrue(lines[0].startswith("product_id,product_name"))
        self.assertIn('"Bagel, plain"', response.text)

    def test_xlsx_export(self):
        response = self.client.get("/analytics/export.xlsx", params=RANGE)

        self.assertEqual(response.status_code, 200)
        sheet = load_workbook(io.BytesIO(response.content)).active
        self.assertEqual(sheet.title, "Product Analytics")
        self.assertEqual(sheet.max_row, 3)

    def test_export_without_products(self):
        db = self.Session()
        db.query(Product).delete()
        db.commit()
        db.close()

        response = self.client.get("/analytics/export.csv", params=RANGE)

        self.assertEqual(response.status_code, 404)

    def test_profit_endpoints(self):
        params = {"period": "custom", "start": "2024-05-01T00:00:00Z", "end": "2024-05-31T23:59:59Z"}

        analysis = self.client.get("/profit/analysis", params=params)
        self.assertEqual(analysis.status_code, 200)
        self.assertEqual(analysis.json()["total_orders"], 3)
        self.assertEqual(len(analysis.json()["daily_data"]), 3)

        insights = self.client.get("/profit/insights", params=params)
        self.assertEqual(insights.status_code, 200)
        self.assertEqual(insights.json()["best_hour"]["hour"], "11:00 - 12:00")

        bad = self.client.get("/profit/analysis", params={"period": "fortnight"})
        self.assertEqual(bad.status_code, 400)

    def test_expense_endpoints(self):
        summary = self.client.get("/expenses/summary", params=RANGE).json()
        self.assertAlmostEqual(summary["total_expenses"], 12.5)
        self.assertEqual(summary["expenses_by_category"], {"Uncategorized": 12.5})

        net = self.client.get("/expenses/net-profit", params=RANGE).json()
        self.assertAlmostEqual(net["gross_profit"], 13.5)
        self.assertAlmostEqual(net["net_profit"], 1.0)

    def test_dashboard_endpoints(self):
        stats = self.client.get("/dashboard/stats").json()
        self.assertEqual(stats["sales_count"], 3)
        self.assertEqual(stats["out_of_stock_count"], 1)
        self.assertEqual(stats["low_stock_count"], 1)

        summary = self.client.get("/dashboard/summary").json()
        self.assertEqual(summary["currency"], "EUR")
        self.assertEqual(summary["total_sales"], "€30.00")
        self.assertEqual(summary["profit"], "€17.50")

    def test_inventory_endpoints(self):
        summary = self.client.get("/inventory/stock-summary").json()
        self.assertAlmostEqual(summary["total_retail_value"], 36)
        self.assertAlmostEqual(summary["total_cost_value"], 12)
        self.assertEqual(summary["active_product_count"], 2)
        self.assertEqual([row["name"] for row in summary["categories"]], ["Bakery"])

        report = self.client.get("/inventory/low-stock").json()
        self.assertEqual([item["name"] for item in report["items"]], ["Scone"])
        self.assertEqual(report["items"][0]["urgency_level"], "Critical")
        self.assertAlmostEqual(report["total_restock_value"], 7.0)

    def test_low_stock_rejects_bad_filters(self):
        self.assertEqual(self.client.get("/inventory/low-stock", params={"urgency": "soon"}).status_code, 400)
        self.assertEqual(self.client.get("/inventory/low-stock", params={"limit": 0}).status_code, 422)

    def test_display_settings(self):
        body = self.client.get("/settings/display").json()

        self.assertEqual(body["currency"], "EUR")
        self.assertEqual(len(body["supported_currencies"]), 10)

    def test_api_key_required_when_configured(self):
        with patch("pos_analytics.core.security.get_settings", return_value=Settings(API_KEYS="k1,k2")):
            denied = self.client.get("/dashboard/stats")
            allowed = self.client.get("/dashboard/stats", headers={"X-API-Key": "k2"})
            bearer = self.client.get("/dashboard/stats", headers={"Authorization": "Bearer k1"})

        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)
        self.assertEqual(bearer.status_code, 200)


if __name__ == "__main__":
    unittest.main()
