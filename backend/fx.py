"""
FX Rates
========
Read-only exchange-rate snapshot handed to the comparison engine.

Rates are quoted as units of local currency per one unit of the base
currency. The base itself always resolves to 1.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FxRates:
    base: str
    rates: dict[str, float] = field(default_factory=dict)
    updated_at: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "FxRates":
        """
        Normalise a provider payload {base, rates, updated_at}.

        Currency codes are uppercased. Non-numeric and non-finite rates are
        dropped. The base currency is set to 1 when the provider omits it
        or quotes it as zero or negative.
        """
        if not isinstance(payload, dict):
            raise ValueError("fx must be a JSON object")
        base = payload.get("base")
        if not isinstance(base, str) or not base:
            raise ValueError("fx.base must be a currency code")
        base = base.upper()

        raw_rates = payload.get("rates") or {}
        if not isinstance(raw_rates, dict):
            raise ValueError("fx.rates must be a JSON object")

        rates = {}
        for code, rate in raw_rates.items():
            if isinstance(rate, bool) or not isinstance(rate, (int, float)):
                logger.debug("Dropping non-numeric FX rate for %s: %r", code, rate)
                continue
            if not math.isfinite(rate):
                logger.debug("Dropping non-finite FX rate for %s: %r", code, rate)
                continue
            rates[str(code).upper()] = float(rate)
        if rates.get(base, 0.0) <= 0:
            rates[base] = 1.0

        return cls(base=base, rates=rates, updated_at=payload.get("updated_at"))

    def rate_for(self, code: str) -> Optional[float]:
        """Rate for a currency, or None when missing, non-finite or not positive."""
        rate = self.rates.get(code)
        if rate is None or not math.isfinite(rate) or rate <= 0:
            return None
        return rate
