"""
Configuration module for coopledger.

Contains constants, rates, tolerances and logging settings used throughout
the application.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Pick up a .env file in the working directory before reading settings
load_dotenv()

# Version
VERSION = "0.1.0"

# Application paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
LOG_DIR = PROJECT_ROOT / "logs"
EXPORT_DIR = PROJECT_ROOT / "exports"

# Cooperative identity (used in report headers)
ORGANIZATION_NAME = os.getenv("COOP_ORGANIZATION_NAME", "Ban Sai Yai Savings Group")
CURRENCY_SYMBOL = os.getenv("COOP_CURRENCY_SYMBOL", "฿")

# Balance checks
BALANCE_SHEET_TOLERANCE = 1.0  # absolute units; absorbs rounding
CASH_RECONCILIATION_TOLERANCE = 0.0  # physical count must match exactly

# Dividend / patronage refund
DEFAULT_DIVIDEND_RATE = 4.5  # percent of share capital
DEFAULT_AVG_RETURN_RATE = 12.0  # percent of interest paid
# Approximated share of a repayment that is interest
INTEREST_PORTION_OF_REPAYMENT = 0.15
PAYOUT_RATIO_WARNING = 100.0  # percent of net profit

# Loans
MONTHS_PER_YEAR = 12

# Cash box denominations (THB notes and coins)
DEFAULT_DENOMINATIONS = (1000, 500, 100, 50, 20, 10, 5, 1)

# Export configuration
EXPORT_FORMATS = ["xlsx", "csv"]
REPORT_TYPES = ["balance-sheet", "income-expense", "dividend"]

# Chart generation
CHART_DPI = 150
CHART_FORMAT = "png"
CHART_WIDTH = 10
CHART_HEIGHT = 6

# Logging configuration
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "coopledger.log"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def ensure_directories():
    """Ensure required directories exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)


def get_log_level():
    """Get the configured log level."""
    import logging

    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return level_map.get(LOG_LEVEL.upper(), logging.INFO)
