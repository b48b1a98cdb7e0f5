import unittest

from pos_analytics.core.inventory import low_stock_report, stock_summary, urgency_level


class InventoryTest(unittest.TestCase):
    def setUp(self):
        self.categories = [{"id": "c1", "name": "Dairy"}, {"id": "c2", "name": "Snacks"}]
        self.products = [
            {"id": "a", "name": "Milk", "price": 10, "purchase_price": 6, "stock": 0, "min_stock": 5,
             "category_id": "c1", "barcode": "400100"},
            {"id": "b", "name": "Crisps", "price": 4, "purchase_price": 2, "stock": 1, "min_stock": 10,
             "category_id": "c2"},
            {"id": "c", "name": "Yoghurt", "price": 2, "purchase_price": 1, "stock": 4, "min_stock": 5,
             "category_id": "c1"},
            {"id": "d", "name": "Batteries", "price": 5, "purchase_price": 3, "stock": 20, "min_stock": 5,
             "category_id": None},
            {"id": "e", "name": "Pretzels", "price": 3, "purchase_price": 2.5, "stock": 2, "min_stock": 8,
             "category_id": "c2"},
        ]
        self.sold = {"b", "d"}

    def test_stock_summary_totals(self):
        summary = stock_summary(self.products, self.categories, self.sold)

        self.assertEqual(summary.total_products, 5)
        self.assertAlmostEqual(summary.total_units, 27)
        self.assertAlmostEqual(summary.total_retail_value, 118)
        self.assertAlmostEqual(summary.total_cost_value, 71)
        self.assertAlmostEqual(summary.total_profit_potential, 47)

    def test_active_and_inactive_inventory(self):
        summary = stock_summary(self.products, self.categories, self.sold)

        self.assertEqual(summary.active_product_count, 2)
        self.assertAlmostEqual(summary.active_unit_count, 21)
        self.assertAlmostEqual(summary.active_inventory_value, 104)
        self.assertAlmostEqual(summary.active_cost_value, 62)
        self.assertAlmostEqual(summary.active_profit_potential, 42)
        self.assertAlmostEqual(summary.inactive_inventory_value, 14)

    def test_low_and_overstock_values(self):
        summary = stock_summary(self.products, self.categories, self.sold)

        # Out-of-stock products hold no value and are not counted as low.
        self.assertAlmostEqual(summary.low_stock_value, 4 + 8 + 6)
        self.assertAlmostEqual(summary.high_stock_value, 100)

    def test_categories_sorted_by_value(self):
        summary = stock_summary(self.products, self.categories, self.sold)

        self.assertEqual([row.id for row in summary.categories], ["uncategorized", "c2", "c1"])
        uncategorized, snacks, dairy = summary.categories
        self.assertEqual(uncategorized.name, "Uncategorized")
        self.assertTrue(uncategorized.has_sold_products)
        self.assertEqual(snacks.product_count, 2)
        self.assertAlmostEqual(snacks.total_value, 10)
        self.assertEqual(snacks.active_product_count, 1)
        self.assertAlmostEqual(snacks.active_total_value, 4)
        self.assertAlmostEqual(snacks.active_total_cost, 2)
        self.assertFalse(dairy.has_sold_products)
        self.assertEqual(dairy.active_product_count, 0)

    def test_unknown_category_reads_as_uncategorized_name(self):
        products = [{"id": "x", "price": 1, "stock": 1, "category_id": "gone"}]

        summary = stock_summary(products, self.categories)

        self.assertEqual(summary.categories[0].id, "gone")
        self.assertEqual(summary.categories[0].name, "Uncategorized")

    def test_empty_inventory(self):
        summary = stock_summary([], [], set())

        self.assertEqual(summary.total_products, 0)
        self.assertEqual(summary.total_retail_value, 0)
        self.assertEqual(summary.categories, [])

    def test_urgency_levels(self):
        self.assertEqual(urgency_level(0, 5), "Critical")
        self.assertEqual(urgency_level(1, 10), "High")
        self.assertEqual(urgency_level(2.9, 10), "High")
        self.assertEqual(urgency_level(3, 10), "Medium")
        self.assertEqual(urgency_level(9, 10), "Medium")

    def test_low_stock_order_and_counts(self):
        report = low_stock_report(self.products, self.categories)

        self.assertEqual([item.id for item in report.items], ["a", "b", "e", "c"])
        self.assertEqual(report.total_count, 4)
        self.assertEqual(report.showing_count, 4)
        self.assertEqual(report.critical_count, 1)
        self.assertEqual(report.high_priority_count, 2)
        self.assertEqual(report.medium_priority_count, 1)
        self.assertAlmostEqual(report.total_restock_value, 30 + 18 + 15 + 1)
        self.assertEqual(report.urgency_filter, "all")

    def test_low_stock_item_fields(self):
        report = low_stock_report(self.products, self.categories)
        milk = report.items[0]

        self.assertEqual(milk.urgency_level, "Critical")
        self.assertEqual(milk.category, "Dairy")
        self.assertEqual(milk.barcode, "400100")
        self.assertEqual(milk.stock_deficit, 5)
        self.assertEqual(milk.stock_percentage, 0)
        self.assertAlmostEqual(milk.restock_value, 30)
        self.assertEqual(report.items[1].stock_percentage, 10)
        self.assertIsNone(report.items[1].barcode)

    def test_urgency_filter_keeps_overall_counts(self):
        report = low_stock_report(self.products, self.categories, urgency="High")

        self.assertEqual([item.id for item in report.items], ["b", "e"])
        self.assertEqual(report.total_count, 4)
        self.assertEqual(report.critical_count, 1)
        self.assertAlmostEqual(report.total_restock_value, 33)
        self.assertEqual(report.urgency_filter, "high")

    def test_limit_applies_to_items_and_restock_value(self):
        report = low_stock_report(self.products, self.categories, limit=2)

        self.assertEqual([item.id for item in report.items], ["a", "b"])
        self.assertEqual(report.showing_count, 2)
        self.assertEqual(report.total_count, 4)
        self.assertAlmostEqual(report.total_restock_value, 48)

    def test_stock_percentage_rounds_half_up(self):
        products = [{"id": "x", "price": 1, "purchase_price": 0.333, "stock": 1, "min_stock": 8}]

        report = low_stock_report(products)

        self.assertEqual(report.items[0].stock_percentage, 13)
        self.assertEqual(report.total_restock_value, 2.33)

    def test_products_at_minimum_are_not_low(self):
        products = [
            {"id": "x", "stock": 5, "min_stock": 5},
            {"id": "y", "stock": 0, "min_stock": 0},
            {"id": None, "stock": 0, "min_stock": 3},
            {"id": "z", "stock": "n/a", "min_stock": 3},
        ]

        report = low_stock_report(products)

        self.assertEqual([item.id for item in report.items], ["z"])
        self.assertEqual(report.items[0].urgency_level, "Critical")

    def test_invalid_arguments(self):
        with self.assertRaises(ValueError):
            low_stock_report(self.products, urgency="urgent")
        with self.assertRaises(ValueError):
            low_stock_report(self.products, limit=0)


if __name__ == "__main__":
    unittest.main()
