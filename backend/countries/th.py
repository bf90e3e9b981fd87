"""
Thailand
========
Personal income tax on employment income for 2026 with the allowance
catalogue, tax-deductible fund contributions and social security.

Fund contributions (PF, RMF, SSF, ESG, national savings fund) are clamped to
their individual income-based caps, then PF, RMF and SSF jointly to the
500,000 retirement ceiling in that priority order. Life and health insurance
premiums share a 100,000 ceiling, life first. Tax and social security are
rounded to the baht.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown, round_half_up
from contributions import (
    ContributionLimit,
    SharedCap,
    gross_cap,
    normalize_contributions,
)
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
    code="TH",
    name="Thailand",
    currency=CurrencyInfo("THB", "฿", "Thai Baht", "th-TH"),
    tax_year=2026,
    last_updated="2026-01-30",
)

RESIDENCY_TYPES = {"resident", "non_resident"}

TAX_BRACKETS = build_brackets([
    (150000, 0.0), (300000, 0.05), (500000, 0.10), (750000, 0.15),
    (1000000, 0.20), (2000000, 0.25), (5000000, 0.30), (INF, 0.35),
])
NON_RESIDENT_FLAT_RATE = 0.15

EXPENSE_DEDUCTION_RATE = 0.50
EXPENSE_DEDUCTION_MAX = 100000

PERSONAL_ALLOWANCE = 60000
SPOUSE_ALLOWANCE = 60000
CHILD_ALLOWANCE = 30000
CHILD_BORN_AFTER_2018_EXTRA = 30000
PARENT_ALLOWANCE = 30000
DISABLED_DEPENDENT_ALLOWANCE = 60000
ELDERLY_DISABLED_ALLOWANCE = 190000

LIFE_INSURANCE_MAX = 100000
LIFE_INSURANCE_SPOUSE_MAX = 10000
HEALTH_INSURANCE_MAX = 25000
HEALTH_INSURANCE_PARENTS_MAX = 15000
INSURANCE_COMBINED_MAX = 100000

# (rate of income, absolute max)
FUND_CAPS = {
    "provident_fund": (0.15, 500000),
    "rmf": (0.30, 500000),
    "ssf": (0.30, 200000),
    "esg": (0.30, 300000),
}
NATIONAL_SAVINGS_FUND_MAX = 30000
RETIREMENT_COMBINED_MAX = 500000

MORTGAGE_INTEREST_MAX = 100000
DONATION_RATE = 0.10
POLITICAL_DONATION_MAX = 10000

SOCIAL_SECURITY_RATE = 0.05
SOCIAL_SECURITY_WAGE_CEILING = 15000
SOCIAL_SECURITY_MONTHLY_CAP = 750

FUND_KINDS = ("provident_fund", "rmf", "ssf", "esg", "national_savings_fund")


@dataclass
class THContributions:
    provident_fund: float = 0.0
    rmf: float = 0.0
    ssf: float = 0.0
    esg: float = 0.0
    national_savings_fund: float = 0.0


@dataclass
class THTaxReliefs:
    has_spouse: bool = False
    spouse_has_no_income: bool = False
    number_of_children: int = 0
    number_of_children_born_after_2018: int = 0
    number_of_parents: int = 0
    number_of_disabled_dependents: int = 0
    life_insurance_premium: float = 0.0
    life_insurance_spouse_premium: float = 0.0
    health_insurance_premium: float = 0.0
    health_insurance_parents_premium: float = 0.0
    has_social_security: bool = True
    mortgage_interest: float = 0.0
    donations: float = 0.0
    political_donation: float = 0.0
    is_elderly_or_disabled: bool = False

    def __post_init__(self):
        for name in (
            "number_of_children", "number_of_parents", "number_of_disabled_dependents",
            "life_insurance_premium", "life_insurance_spouse_premium",
            "health_insurance_premium", "health_insurance_parents_premium",
            "mortgage_interest", "donations", "political_donation",
        ):
            setattr(self, name, non_negative(getattr(self, name)))
        self.number_of_children_born_after_2018 = min(
            non_negative(self.number_of_children_born_after_2018), self.number_of_children
        )
        if not self.has_spouse:
            self.spouse_has_no_income = False


@dataclass
class THInputs(CalculatorInputs):
    country: str = "TH"
    residency_type: str = "resident"
    contributions: THContributions = field(default_factory=THContributions)
    tax_reliefs: THTaxReliefs = field(default_factory=THTaxReliefs)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    income = inputs.gross_salary if inputs is not None else 600000
    caps = {kind: min(income * rate, cap) for kind, (rate, cap) in FUND_CAPS.items()}
    return {
        "provident_fund": ContributionLimit(
            caps["provident_fund"], "Provident Fund Contribution",
            "Employee contribution to Provident Fund (tax deductible)", True,
        ),
        "rmf": ContributionLimit(
            caps["rmf"], "Retirement Mutual Fund (RMF)",
            "Investment in RMF (tax deductible, held 5+ years)", True,
        ),
        "ssf": ContributionLimit(
            caps["ssf"], "Super Savings Fund (SSF)",
            "Investment in SSF (tax deductible, held 10+ years)", True,
        ),
        "esg": ContributionLimit(
            caps["esg"], "Thai ESG Fund",
            "Investment in Thai ESG Fund (tax deductible, held 5+ years)", True,
        ),
        "national_savings_fund": ContributionLimit(
            NATIONAL_SAVINGS_FUND_MAX, "National Savings Fund",
            "Contribution to National Savings Fund (tax deductible)", True,
        ),
    }


SHARED_CAPS = [
    SharedCap("retirement", RETIREMENT_COMBINED_MAX, ("provident_fund", "rmf", "ssf")),
]


def get_regions() -> list:
    return []


def default_inputs() -> THInputs:
    return THInputs(gross_salary=600000, residency_type="resident")


# ─── Calculation ─────────────────────────────────────────────────────────────


def social_security_contribution(gross: float) -> float:
    wage = min(gross / 12, SOCIAL_SECURITY_WAGE_CEILING)
    monthly = min(wage * SOCIAL_SECURITY_RATE, SOCIAL_SECURITY_MONTHLY_CAP)
    return round_half_up(monthly * 12)


def insurance_allowances(r: THTaxReliefs, spouse_allowance: float) -> dict[str, float]:
    """Life then health premiums, jointly capped at the combined maximum."""
    life = min(r.life_insurance_premium, LIFE_INSURANCE_MAX)
    if spouse_allowance > 0:
        life += min(r.life_insurance_spouse_premium, LIFE_INSURANCE_SPOUSE_MAX)
    health = (min(r.health_insurance_premium, HEALTH_INSURANCE_MAX)
              + min(r.health_insurance_parents_premium, HEALTH_INSURANCE_PARENTS_MAX))
    life = min(life, INSURANCE_COMBINED_MAX)
    health = min(health, INSURANCE_COMBINED_MAX - life)
    return {"life_insurance": life, "health_insurance": health}


def calculate(inputs: THInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    r = inputs.tax_reliefs
    contributions = inputs.contributions

    c = normalize_contributions(
        {kind: getattr(contributions, kind) for kind in FUND_KINDS},
        get_contribution_limits(inputs),
        [*SHARED_CAPS, gross_cap(gross, FUND_KINDS)],
    )

    social_security = social_security_contribution(gross) if r.has_social_security else 0.0

    expense_deduction = min(gross * EXPENSE_DEDUCTION_RATE, EXPENSE_DEDUCTION_MAX)
    net_income = gross - expense_deduction

    spouse_allowance = SPOUSE_ALLOWANCE if r.has_spouse and r.spouse_has_no_income else 0
    allowances = {
        "personal_allowance": PERSONAL_ALLOWANCE,
        "spouse_allowance": spouse_allowance,
        "child_allowance": (r.number_of_children * CHILD_ALLOWANCE
                            + r.number_of_children_born_after_2018 * CHILD_BORN_AFTER_2018_EXTRA),
        "parent_allowance": r.number_of_parents * PARENT_ALLOWANCE,
        "disabled_person_allowance": r.number_of_disabled_dependents * DISABLED_DEPENDENT_ALLOWANCE,
        **insurance_allowances(r, spouse_allowance),
        "social_security": social_security,
        **c,
        "mortgage_interest": min(r.mortgage_interest, MORTGAGE_INTEREST_MAX),
        "donations": min(r.donations, net_income * DONATION_RATE),
        "political_donation": min(r.political_donation, POLITICAL_DONATION_MAX),
        "elderly_disabled_allowance": ELDERLY_DISABLED_ALLOWANCE if r.is_elderly_or_disabled else 0,
    }
    total_allowances = sum(allowances.values())
    taxable = max(0.0, net_income - total_allowances)

    income_tax = round_half_up(apply_brackets(taxable, TAX_BRACKETS))
    is_resident = inputs.residency_type == "resident"
    if not is_resident:
        income_tax = max(income_tax, round_half_up(gross * NON_RESIDENT_FLAT_RATE))

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        "social_security": social_security,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=income_tax + social_security,
        voluntary=sum(c.values()),
        breakdown={
            "assessable_income": gross,
            "standard_deduction": expense_deduction,
            "net_income": net_income,
            "total_allowances": total_allowances,
            "is_resident": is_resident,
            "allowances": allowances,
            "voluntary_contributions": {**c, "total": sum(c.values())},
            "social_security": {
                "employee_contribution": social_security,
                "employer_contribution": social_security,
                "rate": SOCIAL_SECURITY_RATE,
                "monthly_cap": SOCIAL_SECURITY_MONTHLY_CAP,
            },
            "bracket_taxes": bracket_breakdown(taxable, TAX_BRACKETS),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=THInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
