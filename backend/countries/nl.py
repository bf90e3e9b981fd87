"""
Netherlands
===========
Box 1 income tax and national insurance premiums for 2026, with the general,
labour and income-dependent combination (IACK) tax credits.

The 30% ruling exempts 30% of gross salary. Credits reduce the combined
levy (income tax plus premiums) but never below zero; for display the
reduction is prorated across the two parts.
"""

from dataclasses import dataclass

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown
from models import (
    CalculatorInputs,
    CountryCalculator,
    CountryConfig,
    CurrencyInfo,
    build_result,
    check_country,
)


CONFIG = CountryConfig(
    code="NL",
    name="Netherlands",
    currency=CurrencyInfo("EUR", "€", "Euro", "nl-NL"),
    tax_year=2026,
    last_updated="2026-01-28",
)

THIRTY_PERCENT_RULING = 0.30

# Combined levy (income tax + national insurance premiums)
COMBINED_BRACKETS = build_brackets([(38883, 0.3575), (78426, 0.3756), (INF, 0.495)])
# Income tax part only; bracket 1 premiums are levied separately below
INCOME_TAX_BRACKETS = build_brackets([(38883, 0.081), (78426, 0.3756), (INF, 0.495)])

PREMIUM_CEILING = 38883
PREMIUM_RATES = {"aow": 0.179, "anw": 0.001, "wlz": 0.0965}

GENERAL_CREDIT_MAX = 3362
GENERAL_CREDIT_PHASE_OUT = (24813, 75518)
LABOUR_CREDIT_MAX = 5700
LABOUR_CREDIT_BUILD_UP_END = 40000
LABOUR_CREDIT_PHASE_OUT_END = 115000
IACK_RATE = 0.1145
IACK_THRESHOLD = 6145
IACK_MAX = 3032


@dataclass
class NLInputs(CalculatorInputs):
    country: str = "NL"
    has_thirty_percent_ruling: bool = False
    has_young_children: bool = False


def get_contribution_limits(inputs=None) -> dict:
    return {}


def get_regions() -> list:
    return []


def default_inputs() -> NLInputs:
    return NLInputs(gross_salary=55000)


# ─── Credits ─────────────────────────────────────────────────────────────────


def general_tax_credit(income: float) -> float:
    start, end = GENERAL_CREDIT_PHASE_OUT
    if income <= start:
        return GENERAL_CREDIT_MAX
    if income >= end:
        return 0.0
    return max(0.0, GENERAL_CREDIT_MAX - GENERAL_CREDIT_MAX / (end - start) * (income - start))


def labour_tax_credit(income: float) -> float:
    if income <= 0:
        return 0.0
    if income <= LABOUR_CREDIT_BUILD_UP_END:
        return income / LABOUR_CREDIT_BUILD_UP_END * LABOUR_CREDIT_MAX
    if income >= LABOUR_CREDIT_PHASE_OUT_END:
        return 0.0
    slope = LABOUR_CREDIT_MAX / (LABOUR_CREDIT_PHASE_OUT_END - LABOUR_CREDIT_BUILD_UP_END)
    return max(0.0, LABOUR_CREDIT_MAX - slope * (income - LABOUR_CREDIT_BUILD_UP_END))


def combination_credit(income: float, has_young_children: bool) -> float:
    if not has_young_children:
        return 0.0
    return min(IACK_MAX, max(0.0, income - IACK_THRESHOLD) * IACK_RATE)


def national_insurance(income: float) -> dict[str, float]:
    base = min(income, PREMIUM_CEILING)
    return {name: base * rate for name, rate in PREMIUM_RATES.items()}


# ─── Calculation ─────────────────────────────────────────────────────────────


def calculate(inputs: NLInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    exempt = gross * THIRTY_PERCENT_RULING if inputs.has_thirty_percent_ruling else 0.0
    taxable = max(0.0, gross - exempt)

    income_tax = apply_brackets(taxable, INCOME_TAX_BRACKETS)
    premiums = national_insurance(taxable)
    tax_before_credits = income_tax + sum(premiums.values())

    credits = {
        "general_tax_credit": general_tax_credit(taxable),
        "labour_tax_credit": labour_tax_credit(taxable),
        "iack_credit": combination_credit(taxable, inputs.has_young_children),
    }
    total_credits = sum(credits.values())
    total_tax = max(0.0, tax_before_credits - total_credits)

    credit_ratio = min(1.0, total_credits / tax_before_credits) if tax_before_credits > 0 else 0.0
    taxes = {
        "total_income_tax": total_tax,
        "income_tax": income_tax * (1 - credit_ratio),
        "social_security_tax": sum(premiums.values()) * (1 - credit_ratio),
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=total_tax,
        voluntary=0.0,
        breakdown={
            "bracket_taxes": bracket_breakdown(taxable, COMBINED_BRACKETS),
            "social_security": {**premiums, "total": sum(premiums.values()),
                                "ceiling": PREMIUM_CEILING},
            "tax_credits": {**credits, "total": total_credits},
            "tax_before_credits": tax_before_credits,
            "thirty_percent_ruling_applied": inputs.has_thirty_percent_ruling,
            "tax_exempt_allowance": exempt,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=NLInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
