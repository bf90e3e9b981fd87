"""
Query Parameter Validation
==========================
Declarative parsing for the quick-calculation query string.

Every parameter is optional. A bad value raises ValueError, which the app's
error handler turns into a 400 response.

Usage:
    from validators import validate_params, GROSS_SALARY, PAY_FREQUENCY

    params = validate_params(request.args, [GROSS_SALARY, PAY_FREQUENCY])
    if params["gross_salary"] is not None:
        ...
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Optional

from config import PAY_FREQUENCIES


@dataclass(frozen=True)
class ParamValidator:
    """
    One optional query parameter.

    Attributes:
        name: Key in request.args
        parse: Converts the raw string; a ValueError means "wrong type"
        choices: Accepted values after parsing (None accepts anything)
        minimum: Lower bound for numeric values
        error_msg: Message used for every failure of this parameter
    """
    name: str
    parse: Callable[[str], Any] = str
    choices: Optional[frozenset] = None
    minimum: Optional[float] = None
    error_msg: Optional[str] = None

    def _fail(self, detail: str):
        raise ValueError(self.error_msg or detail)

    def read(self, args) -> Any:
        """Parsed value of this parameter, or None when absent or blank."""
        raw = args.get(self.name)
        if raw is None or raw.strip() == "":
            return None

        try:
            value = self.parse(raw.strip())
        except ValueError:
            self._fail(f"{self.name} is not valid: '{raw}'")

        if self.choices is not None and value not in self.choices:
            self._fail(f"{self.name} must be one of {sorted(self.choices)}, got '{value}'")
        if self.minimum is not None and value < self.minimum:
            self._fail(f"{self.name} must be >= {self.minimum}")
        return value


def finite_float(raw: str) -> float:
    """float() that refuses 'nan' and 'inf'."""
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"not a finite number: {raw}")
    return value


def validate_params(args, validators: list[ParamValidator]) -> dict:
    """Map each validator's name to its parsed value (None when not given)."""
    return {v.name: v.read(args) for v in validators}


# ─── Quick-calculation parameters ────────────────────────────────────────────

# Omitted salary falls back to the country's default
GROSS_SALARY = ParamValidator(
    name="gross_salary",
    parse=finite_float,
    minimum=0,
    error_msg="gross_salary must be a non-negative number",
)

PAY_FREQUENCY = ParamValidator(
    name="pay_frequency",
    choices=frozenset(PAY_FREQUENCIES),
)

# Region codes differ per country; the calculator checks them
REGION = ParamValidator(name="region")
