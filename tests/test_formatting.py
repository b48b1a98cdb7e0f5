import unittest

from pos_analytics.core.formatting import (
    DisplaySettings,
    format_currency,
    format_percent,
    supported_currencies,
)


class FormattingTest(unittest.TestCase):
    def test_prefix_symbols(self):
        self.assertEqual(format_currency(12.5), "$12.50")
        self.assertEqual(format_currency(3, DisplaySettings(currency="eur")), "€3.00")

    def test_suffix_symbols(self):
        self.assertEqual(format_currency(7.129, DisplaySettings(currency="MAD")), "7.13 DH")
        self.assertEqual(format_currency(5, DisplaySettings(currency="USD", language="ar")), "5.00 $")

    def test_unknown_currency_uses_code(self):
        self.assertEqual(format_currency(1, DisplaySettings(currency="CHF")), "CHF1.00")

    def test_percent(self):
        self.assertEqual(format_percent(0.3456), "34.6%")
        self.assertEqual(format_percent(-0.125, digits=2), "-12.50%")

    def test_supported_currencies(self):
        options = supported_currencies()

        self.assertIn({"value": "USD", "label": "USD ($)"}, options)
        self.assertEqual(len(options), 10)


if __name__ == "__main__":
    unittest.main()
