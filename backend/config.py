"""
Centralized configuration for the take-home pay backend.

Single source of truth for:
  - Pay-period and tax-year constants shared by every calculator
  - Comparison-mode defaults
  - Logging configuration
"""

import logging


# ─── Pay Periods ─────────────────────────────────────────────────────────────

# Periods per year for the per-period view (no calendar-aware proration)
PERIODS_PER_YEAR = {
    "annual": 1,
    "monthly": 12,
    "biweekly": 26,
    "weekly": 52,
}

PAY_FREQUENCIES = set(PERIODS_PER_YEAR)
DEFAULT_PAY_FREQUENCY = "monthly"


# ─── Comparison Defaults ─────────────────────────────────────────────────────

DEFAULT_BASE_CURRENCY = "USD"
DEFAULT_BASELINE_COUNTRY = "US"
COMPARISON_PAY_FREQUENCY = "monthly"
MARITAL_STATUSES = {"single", "married"}
RETIREMENT_MODES = {"none", "max"}


# ─── Logging ─────────────────────────────────────────────────────────────────

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level=logging.INFO):
    """Configure logging for the application."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a named logger instance."""
    return logging.getLogger(name)
