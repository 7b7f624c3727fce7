import unittest

from dividend_income.extract import extract, normalize_frequency

PAGE = """
<html><body>
<div><span>Dividend Yield</span><span>23.30%</span></div>
<div>Annual Dividend: 7.00 PKR</div>
<div>Payment Frequency Semi-Annual</div>
<div>Dividend Growth (1Y) -12.50%</div>
</body></html>
"""


class TestExtract(unittest.TestCase):
    def test_all_fields(self):
        fields = extract(PAGE)
        self.assertEqual(fields.annual_payout, 7.0)
        self.assertEqual(fields.frequency, "semiannual")
        self.assertEqual(fields.growth_1y, -12.5)

    def test_yield_with_markup_between_label_and_value(self):
        # Tags between the label and the number are not skipped by the pattern.
        self.assertIsNone(extract(PAGE).yield_ttm)
        self.assertEqual(extract("Dividend Yield: 23.30%").yield_ttm, 23.3)

    def test_case_insensitive_and_thousands(self):
        fields = extract("annual dividend 1,250.5 pkr dividend yield 4%")
        self.assertEqual(fields.annual_payout, 1250.5)
        self.assertEqual(fields.yield_ttm, 4.0)

    def test_missing_fields_are_none(self):
        fields = extract("<html>nothing here</html>")
        self.assertIsNone(fields.annual_payout)
        self.assertIsNone(fields.yield_ttm)
        self.assertIsNone(fields.frequency)
        self.assertIsNone(fields.growth_1y)

    def test_normalize_frequency(self):
        self.assertEqual(normalize_frequency("Semi-Annual"), "semiannual")
        self.assertEqual(normalize_frequency("Quarterly"), "quarterly")
        self.assertEqual(extract("Payment Frequency: Monthly").frequency, "monthly")


if __name__ == "__main__":
    unittest.main()
