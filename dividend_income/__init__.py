"""Top level package for dividend_income.

The package provides a small CLI tool that scrapes PSX dividend figures from
stockanalysis.com into a JSON dataset and projects the dividend income an
investment would earn, before and after withholding tax.  Simple interest,
compound interest and loan EMI calculators are bundled alongside.
"""

__version__ = "1.0.0"

__all__ = ["calculators", "cli", "config", "extract", "fetch", "models", "query", "store", "utils"]
