"""
South Korea
===========
Employment income tax, local income tax and the four social insurances for
2026.

Social insurance premiums are computed per month, rounded to the won and
annualised. Bracket tax, deductions and each credit are rounded to the won.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, round_half_up
from contributions import ContributionLimit, gross_cap, normalize_contributions
from models import (
    CalculatorInputs,
    CountryCalculator,
    CountryConfig,
    CurrencyInfo,
    build_result,
    check_choice,
    check_country,
    non_negative,
)


CONFIG = CountryConfig(
    code="KR",
    name="South Korea",
    currency=CurrencyInfo("KRW", "₩", "South Korean Won", "ko-KR"),
    tax_year=2026,
    last_updated="2026-01-28",
)

RESIDENCY_TYPES = {"resident", "non_resident"}

TAX_BRACKETS = build_brackets([
    (14_000_000, 0.06), (50_000_000, 0.15), (88_000_000, 0.24),
    (150_000_000, 0.35), (300_000_000, 0.38), (500_000_000, 0.40),
    (1_000_000_000, 0.42), (INF, 0.45),
])
LOCAL_TAX_RATE = 0.10
NON_RESIDENT_FLAT_RATE = 0.19


# ─── Social Insurance (employee share, monthly) ──────────────────────────────

PENSION_RATE = 0.045
PENSION_FLOOR = 370_000
PENSION_CEILING = 5_900_000
HEALTH_RATE = 0.03545
LONG_TERM_CARE_RATE = 0.1295  # of the health premium
EMPLOYMENT_INSURANCE_RATE = 0.008


# ─── Deductions and Credits ──────────────────────────────────────────────────

MEAL_ALLOWANCE = 2_400_000
CHILDCARE_ALLOWANCE = 1_200_000

# (tier size, rate) for the employment income deduction
EMPLOYMENT_DEDUCTION_TIERS = [
    (5_000_000, 0.70),
    (10_000_000, 0.40),
    (30_000_000, 0.15),
    (55_000_000, 0.05),
    (INF, 0.02),
]
EMPLOYMENT_DEDUCTION_CAP = 20_000_000

BASIC_DEDUCTION = 1_500_000
DEPENDENT_DEDUCTION = 1_500_000
CHILD_DEDUCTION = 1_500_000
CHILD_UNDER_7_DEDUCTION = 1_000_000

STANDARD_TAX_CREDIT = 130_000
CHILD_CREDIT_FIRST_TWO = 150_000
CHILD_CREDIT_THIRD_PLUS = 300_000
PENSION_CREDIT_LIMIT = 9_000_000
RENT_CREDIT_ANNUAL_CAP = 7_500_000
DONATION_THRESHOLD = 10_000_000


@dataclass
class KRContributions:
    personal_pension_contribution: float = 0.0


@dataclass
class KRTaxReliefs:
    number_of_dependents: int = 0
    number_of_children_under_20: int = 0
    number_of_children_under_7: int = 0
    insurance_premiums: float = 0.0
    medical_expenses: float = 0.0
    education_expenses: float = 0.0
    donations: float = 0.0
    monthly_rent: float = 0.0
    is_homeowner: bool = False
    has_meal_allowance: bool = False
    has_childcare_allowance: bool = False

    def __post_init__(self):
        for name in (
            "number_of_dependents", "number_of_children_under_20", "number_of_children_under_7",
            "insurance_premiums", "medical_expenses", "education_expenses", "donations",
            "monthly_rent",
        ):
            setattr(self, name, non_negative(getattr(self, name)))


@dataclass
class KRInputs(CalculatorInputs):
    country: str = "KR"
    residency_type: str = "resident"
    contributions: KRContributions = field(default_factory=KRContributions)
    tax_reliefs: KRTaxReliefs = field(default_factory=KRTaxReliefs)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    return {
        "personal_pension_contribution": ContributionLimit(
            PENSION_CREDIT_LIMIT,
            "Personal Pension / IRP",
            "Pension savings eligible for the 13.2-16.5% tax credit",
            False,
        ),
    }


def get_regions() -> list:
    return []


def default_inputs() -> KRInputs:
    return KRInputs(gross_salary=50_000_000, residency_type="resident")


# ─── Calculation ─────────────────────────────────────────────────────────────


def social_insurance(gross: float) -> dict[str, float]:
    monthly = gross / 12
    # the floor only applies to someone with covered earnings
    pension_base = min(max(monthly, PENSION_FLOOR), PENSION_CEILING) if monthly > 0 else 0.0
    pension = round_half_up(pension_base * PENSION_RATE)
    health = round_half_up(monthly * HEALTH_RATE)
    long_term_care = round_half_up(health * LONG_TERM_CARE_RATE)
    employment = round_half_up(monthly * EMPLOYMENT_INSURANCE_RATE)
    return {
        "national_pension": pension * 12,
        "national_health_insurance": health * 12,
        "long_term_care_insurance": long_term_care * 12,
        "employment_insurance": employment * 12,
    }


def employment_income_deduction(income: float) -> float:
    if income <= 0:
        return 0.0
    deduction = 0.0
    remaining = income
    for size, rate in EMPLOYMENT_DEDUCTION_TIERS:
        portion = min(remaining, size)
        deduction += portion * rate
        remaining -= portion
        if remaining <= 0:
            break
    if income > 100_000_000:
        deduction = min(deduction, EMPLOYMENT_DEDUCTION_CAP)
    return round_half_up(deduction)


def wage_earner_credit(tax: float, gross: float) -> float:
    if tax <= 0:
        return 0.0
    if tax <= 1_300_000:
        credit = tax * 0.55
    else:
        credit = 715_000 + (tax - 1_300_000) * 0.30
    if gross <= 33_000_000:
        credit = min(credit, 740_000)
    elif gross <= 70_000_000:
        credit = min(credit, 660_000)
    else:
        credit = min(credit, 500_000)
    return round_half_up(credit)


def child_credit(children: int) -> float:
    if children <= 2:
        return children * CHILD_CREDIT_FIRST_TWO
    return 2 * CHILD_CREDIT_FIRST_TWO + (children - 2) * CHILD_CREDIT_THIRD_PLUS


def pension_credit(contribution: float, gross: float) -> float:
    rate = 0.165 if gross <= 55_000_000 else 0.132
    return round_half_up(min(contribution, PENSION_CREDIT_LIMIT) * rate)


def rent_credit(monthly_rent: float, gross: float, has_dependents: bool) -> float:
    annual_rent = min(monthly_rent * 12, RENT_CREDIT_ANNUAL_CAP)
    if has_dependents:
        rate = 0.17 if gross <= 55_000_000 else 0.15 if gross <= 70_000_000 else 0.0
    else:
        rate = 0.17 if gross <= 35_000_000 else 0.15 if gross <= 45_000_000 else 0.0
    return round_half_up(annual_rent * rate)


def donation_credit(donations: float) -> float:
    if donations <= DONATION_THRESHOLD:
        return round_half_up(donations * 0.15)
    return round_half_up(DONATION_THRESHOLD * 0.15 + (donations - DONATION_THRESHOLD) * 0.30)


def tax_credits(inputs: KRInputs, gross_tax: float, pension_contribution: float) -> dict[str, float]:
    r = inputs.tax_reliefs
    gross = inputs.gross_salary
    has_dependents = r.number_of_dependents > 0 or r.number_of_children_under_20 > 0
    medical_threshold = gross * 0.03
    return {
        "wage_earner_credit": wage_earner_credit(gross_tax, gross),
        "standard_credit": STANDARD_TAX_CREDIT,
        "child_tax_credit": child_credit(r.number_of_children_under_20),
        "pension_credit": pension_credit(pension_contribution, gross),
        "insurance_credit": round_half_up(min(r.insurance_premiums * 0.12, 1_000_000)),
        "medical_credit": round_half_up(max(0.0, r.medical_expenses - medical_threshold) * 0.15),
        "education_credit": round_half_up(r.education_expenses * 0.15),
        "donation_credit": donation_credit(r.donations),
        "rent_credit": 0.0 if r.is_homeowner else rent_credit(r.monthly_rent, gross, has_dependents),
    }


def calculate(inputs: KRInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    r = inputs.tax_reliefs
    c = normalize_contributions(
        {"personal_pension_contribution": inputs.contributions.personal_pension_contribution},
        get_contribution_limits(inputs),
        [gross_cap(gross, ("personal_pension_contribution",))],
    )

    insurance = social_insurance(gross)
    total_insurance = sum(insurance.values())

    non_taxable = {
        "meal_allowance": min(gross, MEAL_ALLOWANCE) if r.has_meal_allowance else 0.0,
        "childcare_allowance": CHILDCARE_ALLOWANCE if r.has_childcare_allowance else 0.0,
    }
    taxable_gross = max(0.0, gross - sum(non_taxable.values()))
    employment_deduction = employment_income_deduction(taxable_gross)
    employment_income = max(0.0, taxable_gross - employment_deduction)

    personal = {
        "basic_deduction": BASIC_DEDUCTION,
        "dependent_deduction": r.number_of_dependents * DEPENDENT_DEDUCTION,
        "child_deduction": r.number_of_children_under_20 * CHILD_DEDUCTION,
        "child_under_7_deduction": r.number_of_children_under_7 * CHILD_UNDER_7_DEDUCTION,
    }
    taxable_income = max(0.0, employment_income - sum(personal.values()) - total_insurance)

    gross_tax = round_half_up(apply_brackets(taxable_income, TAX_BRACKETS))
    credits = tax_credits(inputs, gross_tax, c["personal_pension_contribution"])
    income_tax = max(0.0, gross_tax - sum(credits.values()))
    local_tax = round_half_up(income_tax * LOCAL_TAX_RATE)

    if inputs.residency_type == "non_resident":
        flat_tax = round_half_up(gross * NON_RESIDENT_FLAT_RATE)
        if flat_tax > income_tax + local_tax:
            income_tax, local_tax = flat_tax, 0.0
    total_income_tax = income_tax + local_tax

    taxes = {
        "total_income_tax": total_income_tax,
        "income_tax": income_tax,
        "local_income_tax": local_tax,
        **insurance,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable_income,
        taxes=taxes,
        total_tax=total_income_tax + total_insurance,
        voluntary=sum(c.values()),
        breakdown={
            "non_taxable_income": {**non_taxable, "total": sum(non_taxable.values())},
            "social_insurance": {**insurance, "total": total_insurance},
            "income_deductions": {
                "employment_income_deduction": employment_deduction,
                **personal,
                "social_insurance_deduction": total_insurance,
            },
            "tax_credits": {**credits, "total": sum(credits.values())},
            "gross_income_tax": gross_tax,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=KRInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
