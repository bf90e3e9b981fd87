"""
Taiwan
======
Consolidated income tax on salary income for 2026 with labour, employment
and national health insurance premiums.

Insurance premiums are computed per month on the insured salary, rounded to
the dollar and annualised. Voluntary labour pension contributions (up to 6%
of the capped monthly wage) are excluded from taxable income. Employment
Gold Card holders are exempt on half the taxable income above 3,000,000.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown, round_half_up
from contributions import ContributionLimit, gross_cap, normalize_contributions
from models import (
    CalculatorInputs,
    CountryCalculator,
    CountryConfig,
    CurrencyInfo,
    build_result,
    check_country,
)


CONFIG = CountryConfig(
    code="TW",
    name="Taiwan",
    currency=CurrencyInfo("TWD", "NT$", "New Taiwan Dollar", "zh-TW"),
    tax_year=2026,
    last_updated="2026-01-15",
)

TAX_BRACKETS = build_brackets([
    (610_000, 0.05), (1_380_000, 0.12), (2_770_000, 0.20), (5_190_000, 0.30), (INF, 0.40),
])

PERSONAL_EXEMPTION = 101_000
STANDARD_DEDUCTION = {"single": 136_000, "married": 272_000}
SALARY_SPECIAL_DEDUCTION = 227_000
DISABILITY_SPECIAL_DEDUCTION = 227_000

# (employee effective rate, monthly insured salary cap)
LABOR_INSURANCE = (0.023, 45_800)
EMPLOYMENT_INSURANCE = (0.002, 45_800)
NHI = (0.01551, 313_000)

PENSION_VOLUNTARY_MAX_RATE = 0.06
PENSION_MONTHLY_WAGE_CAP = 150_000

GOLD_CARD_THRESHOLD = 3_000_000
GOLD_CARD_EXEMPT_SHARE = 0.5


@dataclass
class TWContributions:
    voluntary_pension_contribution: float = 0.0


@dataclass
class TWTaxReliefs:
    is_married: bool = False
    has_disability: bool = False
    is_gold_card_holder: bool = False


@dataclass
class TWInputs(CalculatorInputs):
    country: str = "TW"
    contributions: TWContributions = field(default_factory=TWContributions)
    tax_reliefs: TWTaxReliefs = field(default_factory=TWTaxReliefs)


def pension_limit(gross: float) -> float:
    return min(gross / 12, PENSION_MONTHLY_WAGE_CAP) * PENSION_VOLUNTARY_MAX_RATE * 12


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    limit = (pension_limit(inputs.gross_salary) if inputs is not None
             else PENSION_MONTHLY_WAGE_CAP * PENSION_VOLUNTARY_MAX_RATE * 12)
    return {
        "voluntary_pension_contribution": ContributionLimit(
            limit,
            "Voluntary Labor Pension Contribution",
            "Employee can voluntarily contribute 0-6% of monthly salary (capped at NT$150,000)",
            True,
        ),
    }


def get_regions() -> list:
    return []


def default_inputs() -> TWInputs:
    return TWInputs(gross_salary=720_000)


def social_insurance(gross: float) -> dict[str, float]:
    """Annual employee premiums from the rounded monthly amounts."""
    monthly = gross / 12
    return {
        name: round_half_up(min(monthly, cap) * rate) * 12
        for name, (rate, cap) in (
            ("labor_insurance", LABOR_INSURANCE),
            ("employment_insurance", EMPLOYMENT_INSURANCE),
            ("nhi", NHI),
        )
    }


def calculate(inputs: TWInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    r = inputs.tax_reliefs

    key = "voluntary_pension_contribution"
    c = normalize_contributions(
        {key: inputs.contributions.voluntary_pension_contribution},
        get_contribution_limits(inputs),
        [gross_cap(gross, (key,))],
    )

    insurance = social_insurance(gross)
    total_insurance = sum(insurance.values())

    deductions = {
        "standard_deduction": STANDARD_DEDUCTION["married" if r.is_married else "single"],
        "personal_exemption": PERSONAL_EXEMPTION,
        "special_salary_deduction": SALARY_SPECIAL_DEDUCTION,
        "disability_deduction": DISABILITY_SPECIAL_DEDUCTION if r.has_disability else 0,
        "voluntary_pension_contribution": c[key],
    }
    total_deductions = sum(deductions.values())
    before_gold_card = max(0.0, gross - total_insurance - total_deductions)

    gold_card_exemption = 0.0
    if r.is_gold_card_holder and before_gold_card > GOLD_CARD_THRESHOLD:
        gold_card_exemption = (before_gold_card - GOLD_CARD_THRESHOLD) * GOLD_CARD_EXEMPT_SHARE
    taxable = before_gold_card - gold_card_exemption

    income_tax = round_half_up(apply_brackets(taxable, TAX_BRACKETS))

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        **insurance,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=income_tax + total_insurance,
        voluntary=c[key],
        breakdown={
            "gold_card": {
                "is_applied": gold_card_exemption > 0,
                "threshold": GOLD_CARD_THRESHOLD,
                "exemption_amount": gold_card_exemption,
                "taxable_income_before_exemption": before_gold_card,
            },
            "social_insurance": {**insurance, "total": total_insurance},
            "deductions": {**deductions, "total": total_deductions},
            "bracket_taxes": bracket_breakdown(taxable, TAX_BRACKETS),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=TWInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
