import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from click.testing import CliRunner

from dividend_income import cli, store
from dividend_income.config import DATA_DIR_ENV
from dividend_income.fetch import RefreshResult
from dividend_income.models import DividendInfo, StockRecord


def records():
    return [
        StockRecord(
            ticker="ABL",
            name="Allied Bank Limited",
            sector="Commercial Banks",
            country="Pakistan",
            currency="PKR",
            exchange="PSX",
            current_price=100.0,
            dividend=DividendInfo(annual_payout_ttm=7.0, yield_ttm=7.0, yield_last_year=6.65),
            last_updated="2024-05-01T10:00:00.000Z",
        ),
        StockRecord(
            ticker="APL",
            name="Attock Petroleum Limited",
            sector="Oil & Gas Marketing",
            country="Pakistan",
            currency="PKR",
            exchange="PSX",
            current_price=None,
            dividend=DividendInfo(annual_payout_ttm=None, yield_ttm=None),
        ),
    ]


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.env = {DATA_DIR_ENV: str(self.dir)}
        self.runner = CliRunner()

    def tearDown(self):
        self._tmp.cleanup()

    def write_data(self):
        store.save_stocks(self.dir / "stocks.json", records())
        (self.dir / "taxRates.json").write_text(json.dumps({"Pakistan": {"default": 15}}), encoding="utf-8")

    def test_dividends_without_data(self):
        result = self.runner.invoke(cli.main, ["dividends"], env=self.env)
        self.assertEqual(result.exit_code, 0)
        self.assertIn("No data found", result.output)

    def test_dividends_table_and_details(self):
        self.write_data()
        result = self.runner.invoke(
            cli.main, ["dividends", "--amount", "100,000", "--expand", "abl"], env=self.env
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Showing 2 stocks", result.output)
        self.assertIn("583", result.output)
        self.assertIn("N/A", result.output)
        self.assertIn("PKR 5,950", result.output)
        self.assertIn("Tax Rate: 15% (Pakistan)", result.output)

    def test_dividends_with_corrupt_tax_rates(self):
        self.write_data()
        (self.dir / "taxRates.json").write_text("{bad json", encoding="utf-8")
        result = self.runner.invoke(cli.main, ["dividends", "--expand", "ABL"], env=self.env)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Showing 2 stocks", result.output)
        self.assertIn("Tax Rate: 0% (Pakistan)", result.output)
        self.assertIn("PKR 7,000", result.output)

    def test_dividends_filters(self):
        self.write_data()
        result = self.runner.invoke(cli.main, ["dividends", "--query", "petro"], env=self.env)
        self.assertIn("Showing 1 stock\n", result.output)
        self.assertIn("APL", result.output)
        self.assertNotIn("ABL", result.output)
        result = self.runner.invoke(cli.main, ["dividends", "--sector", "Fertilizer"], env=self.env)
        self.assertIn("Showing 0 stocks", result.output)
        self.assertIn("No stocks found", result.output)
        result = self.runner.invoke(cli.main, ["dividends", "--options"], env=self.env)
        self.assertIn("All Sectors, Commercial Banks, Oil & Gas Marketing", result.output)

    def test_dividends_rejects_small_amount(self):
        self.write_data()
        result = self.runner.invoke(cli.main, ["dividends", "--amount", "500"], env=self.env)
        self.assertNotEqual(result.exit_code, 0)

    def test_update_summary(self):
        summary = RefreshResult(records=records()[:1], updated=["ABL"], omitted=["APL"])
        with mock.patch.object(cli.fetch, "run_update", return_value=summary) as run:
            result = self.runner.invoke(cli.main, ["update"], env=self.env)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(run.called)
        self.assertIn("Successfully updated: 1", result.output)
        self.assertIn("Failed stocks: APL", result.output)

    def test_update_write_failure_exits_non_zero(self):
        with mock.patch.object(cli.fetch, "run_update", side_effect=PermissionError("read-only")):
            result = self.runner.invoke(cli.main, ["update"], env=self.env)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Could not write dataset", result.output)

    def test_calculators(self):
        result = self.runner.invoke(cli.main, ["simple", "--principal", "10000", "--rate", "5", "--years", "2"])
        self.assertIn("1,000.00", result.output)
        result = self.runner.invoke(cli.main, ["loan", "--amount", "100000", "--rate", "12", "--years", "1"])
        self.assertIn("8,884.88", result.output)
        result = self.runner.invoke(cli.main, ["compound", "--frequency", "1", "--years", "2", "--rate", "10", "--principal", "1000"])
        self.assertIn("1,210.00", result.output)
        result = self.runner.invoke(cli.main, ["loan", "--years", "0"])
        self.assertNotEqual(result.exit_code, 0)


if __name__ == "__main__":
    unittest.main()
