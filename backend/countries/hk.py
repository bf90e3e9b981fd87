"""
Hong Kong
=========
Salaries tax for 2025/26 with mandatory MPF, deductions and personal
allowances. The tax charged is the lower of progressive tax on net
chargeable income and standard-rate tax on net income.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown
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
    code="HK",
    name="Hong Kong",
    currency=CurrencyInfo("HKD", "HK$", "Hong Kong Dollar", "en-HK"),
    tax_year=2026,
    last_updated="2026-01-30",
)

RESIDENCY_TYPES = {"resident", "non_resident"}

TAX_BRACKETS = build_brackets([
    (50000, 0.02), (100000, 0.06), (150000, 0.10), (200000, 0.14), (INF, 0.17),
])

STANDARD_RATE = 0.15
HIGHER_STANDARD_RATE = 0.16
STANDARD_RATE_THRESHOLD = 5_000_000

ALLOWANCES = {
    "basic": 132000,
    "married": 264000,
    "single_parent": 132000,
    "child": 130000,
    "newborn_child": 130000,
    "dependent_sibling": 37500,
    "dependent_parent": 50000,
    "dependent_parent_living_with": 50000,
    "disability": 75000,
    "disabled_dependent": 75000,
}

SELF_EDUCATION_MAX = 100000
HOME_LOAN_INTEREST_MAX = 100000
DOMESTIC_RENT_MAX = 100000
ELDERLY_RESIDENTIAL_CARE_MAX = 100000
DONATIONS_MAX_RATE = 0.35
VOLUNTARY_MPF_MAX = 60000

MPF_RATE = 0.05
MPF_MIN_RELEVANT_INCOME = 7100
MPF_MAX_RELEVANT_INCOME = 30000
MPF_MONTHLY_CAP = 1500


@dataclass
class HKContributions:
    tax_deductible_voluntary_contributions: float = 0.0


@dataclass
class HKTaxReliefs:
    has_married_allowance: bool = False
    has_single_parent_allowance: bool = False
    number_of_children: int = 0
    number_of_newborn_children: int = 0
    number_of_dependent_parents: int = 0
    number_of_dependent_parents_living_with: int = 0
    number_of_dependent_siblings: int = 0
    has_disability_allowance: bool = False
    number_of_disabled_dependents: int = 0
    self_education_expenses: float = 0.0
    home_loan_interest: float = 0.0
    domestic_rent: float = 0.0
    charitable_donations: float = 0.0
    elderly_residential_care_expenses: float = 0.0

    def __post_init__(self):
        for name in (
            "number_of_children", "number_of_dependent_parents", "number_of_dependent_siblings",
            "number_of_disabled_dependents", "self_education_expenses", "home_loan_interest",
            "domestic_rent", "charitable_donations", "elderly_residential_care_expenses",
        ):
            setattr(self, name, non_negative(getattr(self, name)))
        self.number_of_newborn_children = min(
            non_negative(self.number_of_newborn_children), self.number_of_children
        )
        self.number_of_dependent_parents_living_with = min(
            non_negative(self.number_of_dependent_parents_living_with),
            self.number_of_dependent_parents,
        )
        # married allowance and single parent allowance are mutually exclusive
        if self.has_married_allowance:
            self.has_single_parent_allowance = False


@dataclass
class HKInputs(CalculatorInputs):
    country: str = "HK"
    residency_type: str = "resident"
    contributions: HKContributions = field(default_factory=HKContributions)
    tax_reliefs: HKTaxReliefs = field(default_factory=HKTaxReliefs)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    return {
        "tax_deductible_voluntary_contributions": ContributionLimit(
            VOLUNTARY_MPF_MAX,
            "MPF TVC + QDAP",
            "Tax-deductible voluntary MPF/annuity contributions",
            True,
        ),
    }


def get_regions() -> list:
    return []


def default_inputs() -> HKInputs:
    return HKInputs(gross_salary=420000, residency_type="resident")


# ─── Calculation ─────────────────────────────────────────────────────────────


def mandatory_mpf(gross: float) -> tuple[float, float]:
    """Returns (annual employee MPF, monthly relevant income)."""
    monthly = gross / 12
    if monthly < MPF_MIN_RELEVANT_INCOME:
        return 0.0, 0.0
    relevant = min(monthly, MPF_MAX_RELEVANT_INCOME)
    return relevant * MPF_RATE * 12, relevant


def standard_rate_tax(net_income: float) -> float:
    if net_income <= STANDARD_RATE_THRESHOLD:
        return net_income * STANDARD_RATE
    return (STANDARD_RATE_THRESHOLD * STANDARD_RATE
            + (net_income - STANDARD_RATE_THRESHOLD) * HIGHER_STANDARD_RATE)


def personal_allowances(r: HKTaxReliefs, is_resident: bool) -> dict[str, float]:
    if not is_resident:
        return {name: 0 for name in ALLOWANCES}
    return {
        "basic": 0 if r.has_married_allowance else ALLOWANCES["basic"],
        "married": ALLOWANCES["married"] if r.has_married_allowance else 0,
        "single_parent": ALLOWANCES["single_parent"] if r.has_single_parent_allowance else 0,
        "child": r.number_of_children * ALLOWANCES["child"],
        "newborn_child": r.number_of_newborn_children * ALLOWANCES["newborn_child"],
        "dependent_sibling": r.number_of_dependent_siblings * ALLOWANCES["dependent_sibling"],
        "dependent_parent": r.number_of_dependent_parents * ALLOWANCES["dependent_parent"],
        "dependent_parent_living_with": (r.number_of_dependent_parents_living_with
                                         * ALLOWANCES["dependent_parent_living_with"]),
        "disability": ALLOWANCES["disability"] if r.has_disability_allowance else 0,
        "disabled_dependent": r.number_of_disabled_dependents * ALLOWANCES["disabled_dependent"],
    }


def calculate(inputs: HKInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    r = inputs.tax_reliefs
    is_resident = inputs.residency_type == "resident"

    key = "tax_deductible_voluntary_contributions"
    c = normalize_contributions(
        {key: getattr(inputs.contributions, key)},
        get_contribution_limits(inputs),
        [gross_cap(gross, (key,))],
    )

    mpf, relevant_income = mandatory_mpf(gross)
    deductions = {
        "mandatory_mpf": mpf,
        "voluntary_mpf_annuity": c[key],
        "self_education": min(r.self_education_expenses, SELF_EDUCATION_MAX),
        "home_loan_interest": min(r.home_loan_interest, HOME_LOAN_INTEREST_MAX),
        "domestic_rent": min(r.domestic_rent, DOMESTIC_RENT_MAX),
        "elderly_residential_care": min(r.elderly_residential_care_expenses,
                                        ELDERLY_RESIDENTIAL_CARE_MAX),
    }
    donation_cap = max(gross - sum(deductions.values()), 0.0) * DONATIONS_MAX_RATE
    deductions["charitable_donations"] = min(r.charitable_donations, donation_cap)
    total_deductions = sum(deductions.values())
    net_income = max(0.0, gross - total_deductions)

    allowances = personal_allowances(r, is_resident)
    total_allowances = sum(allowances.values())
    net_chargeable = max(0.0, net_income - total_allowances)

    progressive_tax = apply_brackets(net_chargeable, TAX_BRACKETS)
    standard_tax = standard_rate_tax(net_income)
    income_tax = min(progressive_tax, standard_tax)

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        "mpf_employee": mpf,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=net_chargeable,
        taxes=taxes,
        total_tax=income_tax + mpf,
        voluntary=c[key],
        breakdown={
            "assessable_income": gross,
            "net_income": net_income,
            "net_chargeable_income": net_chargeable,
            "is_resident": is_resident,
            "mpf": {
                "employee_contribution": mpf,
                "rate": MPF_RATE,
                "monthly_relevant_income": relevant_income,
                "monthly_cap": MPF_MONTHLY_CAP,
            },
            "deductions": {**deductions, "total": total_deductions},
            "allowances": {**allowances, "total": total_allowances},
            "tax_comparison": {
                "progressive_tax": progressive_tax,
                "standard_tax": standard_tax,
                "standard_rate_threshold": STANDARD_RATE_THRESHOLD,
            },
            "bracket_taxes": bracket_breakdown(net_chargeable, TAX_BRACKETS),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=HKInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
