"""
Core Data Model
===============
Value objects shared by every calculator: country descriptors, the base
input record, the calculation result, and the calculator bundle the registry
dispatches to.

All objects are recreated per call. CountryConfig / CurrencyInfo / RegionInfo
are frozen and loaded once at import time.
"""

import math
from dataclasses import dataclass, field, fields, asdict, is_dataclass, replace
from typing import Any, Callable, Optional

from config import PERIODS_PER_YEAR, PAY_FREQUENCIES, DEFAULT_PAY_FREQUENCY
from errors import InvalidCountryInput


# ─── Country Descriptors ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    symbol: str
    name: str
    locale: str


@dataclass(frozen=True)
class CountryConfig:
    """Static per-country descriptor."""
    code: str
    name: str
    currency: CurrencyInfo
    tax_year: int
    last_updated: str
    supports_filing_status: bool = False
    supports_regions: bool = False
    default_region: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class RegionInfo:
    """A state, province or canton with its own tax treatment."""
    code: str
    name: str
    tax_type: str = "progressive"
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


# ─── Inputs ──────────────────────────────────────────────────────────────────


def check_choice(name: str, value, valid) -> None:
    """Raise ValueError if value is not one of the valid options."""
    if value not in valid:
        raise ValueError(f"{name} must be one of {sorted(valid)}, got '{value}'")


def non_negative(value) -> float:
    return max(0, value)


def finite_amount(name: str, value) -> float:
    """float(value), rejecting NaN and infinities with a ValueError."""
    try:
        value = float(value)
    except OverflowError:
        raise ValueError(f"{name} is too large") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return value


@dataclass
class CalculatorInputs:
    """
    Fields common to every country's input record.

    Country subclasses add their demographic fields plus nested
    contributions / tax_reliefs records. Construction clamps negative
    amounts to zero and rejects unknown option values.
    """
    country: str
    gross_salary: float = 0.0
    pay_frequency: str = DEFAULT_PAY_FREQUENCY

    def __post_init__(self):
        self.gross_salary = max(0.0, finite_amount("gross_salary", self.gross_salary))
        check_choice("pay_frequency", self.pay_frequency, PAY_FREQUENCIES)


def check_country(inputs: CalculatorInputs, code: str) -> None:
    """Guard against dispatching one country's inputs to another's calculator."""
    if inputs.country != code:
        raise InvalidCountryInput(code, inputs.country)


def _coerce(name: str, field_type, value):
    if field_type is bool:
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be a boolean, got {value!r}")
        return value
    if field_type in (int, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a number, got {value!r}")
        return field_type(finite_amount(name, value))
    if field_type is str and not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {value!r}")
    return value


def inputs_from_dict(cls, data: dict, base=None):
    """
    Build a (possibly nested) input dataclass from a JSON-style dict.

    Fields missing from data keep the value they have on base (typically the
    country's default inputs). Unknown keys raise ValueError.

    Args:
        cls: Input dataclass to build
        data: Parsed JSON object
        base: Optional instance of cls whose values fill the gaps

    Returns:
        A new instance of cls
    """
    if not isinstance(data, dict):
        raise ValueError(f"{cls.__name__} must be a JSON object")

    known = {f.name: f for f in fields(cls) if f.init}
    values = {}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown field '{key}' for {cls.__name__}")
        field_type = known[key].type
        if is_dataclass(field_type):
            nested_base = getattr(base, key) if base is not None else None
            values[key] = inputs_from_dict(field_type, value, nested_base)
        else:
            values[key] = _coerce(key, field_type, value)

    if base is not None:
        return replace(base, **values)
    return cls(**values)


# ─── Results ─────────────────────────────────────────────────────────────────


@dataclass
class PerPeriod:
    gross: float
    net: float
    frequency: str


@dataclass
class CalculationResult:
    """
    Itemised outcome of one calculation.

    taxes holds the country's tax/contribution lines; breakdown holds
    supporting detail tagged with breakdown["type"] == country.
    """
    country: str
    currency: str
    gross_salary: float
    taxable_income: float
    taxes: dict[str, float]
    total_tax: float
    total_deductions: float
    net_salary: float
    effective_tax_rate: float
    per_period: PerPeriod
    breakdown: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def build_result(
    config: CountryConfig,
    inputs: CalculatorInputs,
    taxable_income: float,
    taxes: dict[str, float],
    total_tax: float,
    voluntary: float,
    breakdown: dict[str, Any],
) -> CalculationResult:
    """
    Assemble a CalculationResult from a calculator's totals.

    total_tax holds income taxes plus mandatory contributions; voluntary holds
    elected contributions that leave the paycheck but are not tax.
    """
    gross = inputs.gross_salary
    total_deductions = total_tax + voluntary
    net_salary = gross - total_deductions
    effective_tax_rate = total_tax / gross if gross > 0 else 0.0
    periods = PERIODS_PER_YEAR[inputs.pay_frequency]

    return CalculationResult(
        country=config.code,
        currency=config.currency.code,
        gross_salary=gross,
        taxable_income=taxable_income,
        taxes=taxes,
        total_tax=total_tax,
        total_deductions=total_deductions,
        net_salary=net_salary,
        effective_tax_rate=effective_tax_rate,
        per_period=PerPeriod(
            gross=gross / periods,
            net=net_salary / periods,
            frequency=inputs.pay_frequency,
        ),
        breakdown={"type": config.code, **breakdown},
    )


# ─── Calculator Bundle ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class CountryCalculator:
    """Everything the registry needs to serve one country."""
    config: CountryConfig
    inputs_type: type
    calculate: Callable[[CalculatorInputs], CalculationResult]
    default_inputs: Callable[[], CalculatorInputs]
    get_regions: Callable[[], list[RegionInfo]]
    get_contribution_limits: Callable[..., dict]
