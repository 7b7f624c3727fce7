import unittest

from dividend_income import calculators


class TestCalculators(unittest.TestCase):
    def test_simple_interest(self):
        result = calculators.simple_interest(10000, 5, 1)
        self.assertAlmostEqual(result.interest, 500)
        self.assertAlmostEqual(result.total_amount, 10500)

    def test_compound_interest(self):
        result = calculators.compound_interest(1000, 10, 2, frequency=1)
        self.assertAlmostEqual(result.total_amount, 1210)
        self.assertAlmostEqual(result.interest, 210)
        monthly = calculators.compound_interest(10000, 5, 5)
        self.assertAlmostEqual(monthly.total_amount, 12833.59, places=2)

    def test_compound_interest_rejects_unknown_frequency(self):
        with self.assertRaises(ValueError):
            calculators.compound_interest(1000, 5, 1, frequency=7)

    def test_loan_emi(self):
        result = calculators.loan_emi(100000, 12, 1)
        self.assertAlmostEqual(result.emi, 8884.88, places=2)
        self.assertAlmostEqual(result.total_payment, result.emi * 12)
        self.assertAlmostEqual(result.total_interest, result.total_payment - 100000)

    def test_loan_emi_zero_rate(self):
        result = calculators.loan_emi(120000, 0, 10)
        self.assertAlmostEqual(result.emi, 1000)
        self.assertAlmostEqual(result.total_interest, 0)

    def test_invalid_inputs(self):
        with self.assertRaises(ValueError):
            calculators.loan_emi(1000, 5, 0)
        with self.assertRaises(ValueError):
            calculators.simple_interest(-1, 5, 1)


if __name__ == "__main__":
    unittest.main()
