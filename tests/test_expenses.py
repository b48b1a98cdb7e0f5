import unittest
from datetime import datetime, timezone

from pos_analytics.core.expenses import compute_net_profit, dashboard_stats, summarize_expenses


def _at(day, hour=12):
    return datetime(2024, 3, day, hour, tzinfo=timezone.utc)


class ExpensesTest(unittest.TestCase):
    def setUp(self):
        self.categories = [{"id": "e1", "name": "Rent"}, {"id": "e2", "name": "Utilities"}]
        self.expenses = [
            {"id": "x1", "amount": 500, "description": "March rent", "category_id": "e1", "payment_date": _at(1)},
            {"id": "x2", "amount": "40.5", "description": "Power", "category_id": "e2", "payment_date": _at(5)},
            {"id": "x3", "amount": 10, "description": None, "category_id": None, "payment_date": _at(5, 18)},
        ]
        self.products = [
            {"id": "p1", "price": 10, "purchase_price": 6, "stock": 0, "min_stock": 5},
            {"id": "p2", "price": 20, "purchase_price": 5, "stock": 3, "min_stock": 5},
            {"id": "p3", "price": 20, "purchase_price": 5, "stock": 9, "min_stock": 5},
        ]
        self.sales = [
            {
                "id": "s1",
                "total": 40,
                "created_at": _at(1, 9),
                "sale_items": [
                    {"product_id": "p1", "quantity": 2, "price": 10},
                    {"product_id": "p2", "quantity": 1, "price": 20},
                ],
            },
            {
                "id": "s2",
                "total": 18,
                "created_at": _at(2, 9),
                "sale_items": [
                    {"product_id": "p2", "quantity": 1, "price": 20, "discount": 10},
                    {"product_id": "deleted", "quantity": 1, "price": 99},
                ],
            },
        ]

    def test_summary_groups_by_category_and_day(self):
        summary = summarize_expenses(self.expenses, self.categories)

        self.assertAlmostEqual(summary.total_expenses, 550.5)
        self.assertEqual(summary.expenses_by_category, {"Rent": 500, "Utilities": 40.5, "Uncategorized": 10})
        self.assertEqual(summary.expenses_by_day, {"2024-03-01": 500, "2024-03-05": 50.5})
        self.assertEqual([line.id for line in summary.expenses], ["x3", "x2", "x1"])
        self.assertEqual(summary.expenses[0].description, "")

    def test_net_profit(self):
        result = compute_net_profit(self.sales, self.products, self.expenses, self.categories)

        self.assertAlmostEqual(result.total_revenue, 58)
        self.assertAlmostEqual(result.total_cogs, 12 + 5 + 5)
        self.assertAlmostEqual(result.gross_profit, 36)
        self.assertAlmostEqual(result.gross_margin, 36 / 58)
        self.assertAlmostEqual(result.total_operating_expenses, 550.5)
        self.assertAlmostEqual(result.net_profit, 36 - 550.5)
        self.assertLess(result.net_margin, 0)

        days = {day.date: day for day in result.daily_data}
        self.assertEqual(sorted(days), ["2024-03-01", "2024-03-02", "2024-03-05"])
        self.assertAlmostEqual(days["2024-03-01"].net_profit, 40 - 17 - 500)
        self.assertEqual(days["2024-03-05"].revenue, 0)
        self.assertEqual(days["2024-03-02"].label, "Mar 02")

    def test_net_profit_without_data(self):
        result = compute_net_profit([], [], [], [])

        self.assertEqual(result.net_profit, 0)
        self.assertEqual(result.net_margin, 0)
        self.assertEqual(result.daily_data, [])


class DashboardStatsTest(unittest.TestCase):
    def test_counts_and_rounding(self):
        sales = [{"id": "s1", "total": 10.005}, {"id": "s2", "total": 5.111}]
        expenses = [{"id": "x1", "amount": 3.333}]
        products = [
            {"id": "p1", "stock": 0, "min_stock": 2},
            {"id": "p2", "stock": 1, "min_stock": 2},
            {"id": "p3", "stock": 8, "min_stock": 2},
        ]

        stats = dashboard_stats(sales, expenses, products)

        self.assertAlmostEqual(stats.total_sales, 15.12)
        self.assertAlmostEqual(stats.total_expenses, 3.33)
        self.assertAlmostEqual(stats.profit, 11.78)
        self.assertEqual(stats.sales_count, 2)
        self.assertEqual(stats.expenses_count, 1)
        self.assertEqual(stats.total_products, 3)
        self.assertEqual(stats.low_stock_count, 2)
        self.assertEqual(stats.out_of_stock_count, 1)


if __name__ == "__main__":
    unittest.main()
