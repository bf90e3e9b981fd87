"""
Australia
=========
Individual income tax for 2025-26 with the Low Income Tax Offset, the
Medicare levy and the Medicare levy surcharge. Superannuation guarantee is
paid by the employer on top of salary and is reported only.
"""

from dataclasses import dataclass

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown
from models import (
    CalculatorInputs,
    CountryCalculator,
    CountryConfig,
    CurrencyInfo,
    build_result,
    check_choice,
    check_country,
)


CONFIG = CountryConfig(
    code="AU",
    name="Australia",
    currency=CurrencyInfo("AUD", "A$", "Australian Dollar", "en-AU"),
    tax_year=2026,
    last_updated="2026-01-29",
)

RESIDENCY_TYPES = {"resident", "non_resident"}

RESIDENT_BRACKETS = build_brackets([
    (18200, 0.0), (45000, 0.16), (135000, 0.30), (190000, 0.37), (INF, 0.45),
])
NON_RESIDENT_BRACKETS = build_brackets([
    (135000, 0.325), (190000, 0.37), (INF, 0.45),
])

LITO_MAX = 700
LITO_FULL_THRESHOLD = 37500
LITO_FIRST_TAPER_END = 45000
LITO_SECOND_TAPER_END = 66667

MEDICARE_RATE = 0.02
MEDICARE_LOWER = 27222
MEDICARE_UPPER = 34027
MEDICARE_SHADE_IN_RATE = 0.10

# (income up to, surcharge rate), singles
MLS_TIERS = [(101000, 0.0), (117999, 0.01), (157999, 0.0125), (INF, 0.015)]

SUPER_RATE = 0.12
SUPER_MAX_CONTRIBUTION_BASE = 250000


@dataclass
class AUInputs(CalculatorInputs):
    country: str = "AU"
    residency_type: str = "resident"
    has_private_health_insurance: bool = True

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)


def get_contribution_limits(inputs=None) -> dict:
    return {}


def get_regions() -> list:
    return []


def default_inputs() -> AUInputs:
    return AUInputs(gross_salary=100000, residency_type="resident",
                    has_private_health_insurance=True)


def low_income_tax_offset(income: float) -> float:
    if income <= LITO_FULL_THRESHOLD:
        return LITO_MAX
    if income <= LITO_FIRST_TAPER_END:
        return max(0.0, LITO_MAX - (income - LITO_FULL_THRESHOLD) * 0.05)
    if income <= LITO_SECOND_TAPER_END:
        after_first = LITO_MAX - (LITO_FIRST_TAPER_END - LITO_FULL_THRESHOLD) * 0.05
        return max(0.0, after_first - (income - LITO_FIRST_TAPER_END) * 0.015)
    return 0.0


def medicare_levy(income: float) -> float:
    if income <= MEDICARE_LOWER:
        return 0.0
    if income <= MEDICARE_UPPER:
        return (income - MEDICARE_LOWER) * MEDICARE_SHADE_IN_RATE
    return income * MEDICARE_RATE


def medicare_levy_surcharge(income: float, has_private_health_insurance: bool) -> float:
    if has_private_health_insurance:
        return 0.0
    for upper, rate in MLS_TIERS:
        if income <= upper:
            return income * rate
    return income * MLS_TIERS[-1][1]


def calculate(inputs: AUInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    is_resident = inputs.residency_type == "resident"
    brackets = RESIDENT_BRACKETS if is_resident else NON_RESIDENT_BRACKETS

    gross_income_tax = apply_brackets(gross, brackets)
    lito = low_income_tax_offset(gross) if is_resident else 0.0
    income_tax = max(0.0, gross_income_tax - lito)
    levy = medicare_levy(gross) if is_resident else 0.0
    surcharge = (
        medicare_levy_surcharge(gross, inputs.has_private_health_insurance)
        if is_resident else 0.0
    )
    total_tax = income_tax + levy + surcharge

    taxes = {
        "total_income_tax": total_tax,
        "income_tax": income_tax,
        "medicare_levy": levy,
        "medicare_levy_surcharge": surcharge,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=gross,
        taxes=taxes,
        total_tax=total_tax,
        voluntary=0.0,
        breakdown={
            "bracket_taxes": bracket_breakdown(gross, brackets),
            "gross_income_tax": gross_income_tax,
            "lito": lito,
            "has_private_health_insurance": inputs.has_private_health_insurance,
            "superannuation": {
                "employer_contribution": min(gross, SUPER_MAX_CONTRIBUTION_BASE) * SUPER_RATE,
                "rate": SUPER_RATE,
            },
            "is_resident": is_resident,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=AUInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
