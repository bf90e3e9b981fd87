"""
United States
=============
Federal income tax, FICA payroll taxes, state income tax and state
disability insurance for tax year 2026.

Pre-tax 401(k) and HSA contributions reduce both federal and state taxable
income; Roth IRA contributions are post-tax. No intermediate rounding.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown, marginal_rate
from contributions import ContributionLimit, gross_cap, normalize_contributions
from countries import us_states
from models import (
    CalculatorInputs,
    CountryCalculator,
    CountryConfig,
    CurrencyInfo,
    RegionInfo,
    build_result,
    check_choice,
    check_country,
)


CONFIG = CountryConfig(
    code="US",
    name="United States",
    currency=CurrencyInfo("USD", "$", "US Dollar", "en-US"),
    tax_year=2026,
    last_updated="2026-01-27",
    supports_filing_status=True,
    supports_regions=True,
    default_region="CA",
)

FILING_STATUSES = set(us_states.FILING_STATUSES)
HSA_COVERAGE_TYPES = {"self", "family"}


# ─── Federal Tables ──────────────────────────────────────────────────────────

STANDARD_DEDUCTIONS = {
    "single": 15400,
    "married_jointly": 30800,
    "married_separately": 15400,
    "head_of_household": 23100,
}

FEDERAL_BRACKETS = {
    "single": build_brackets([
        (12250, 0.10), (49850, 0.12), (106250, 0.22), (202850, 0.24),
        (257550, 0.32), (643900, 0.35), (INF, 0.37),
    ]),
    "married_jointly": build_brackets([
        (24500, 0.10), (99700, 0.12), (212500, 0.22), (405700, 0.24),
        (515100, 0.32), (772650, 0.35), (INF, 0.37),
    ]),
    "married_separately": build_brackets([
        (12250, 0.10), (49850, 0.12), (106250, 0.22), (202850, 0.24),
        (257550, 0.32), (386325, 0.35), (INF, 0.37),
    ]),
    "head_of_household": build_brackets([
        (17500, 0.10), (66700, 0.12), (106250, 0.22), (202850, 0.24),
        (257550, 0.32), (643900, 0.35), (INF, 0.37),
    ]),
}

# ─── Payroll (FICA) ──────────────────────────────────────────────────────────

SOCIAL_SECURITY_RATE = 0.062
SOCIAL_SECURITY_WAGE_BASE = 181200
MEDICARE_RATE = 0.0145
ADDITIONAL_MEDICARE_RATE = 0.009
ADDITIONAL_MEDICARE_THRESHOLDS = {
    "single": 200000,
    "married_jointly": 250000,
    "married_separately": 125000,
    "head_of_household": 200000,
}

# ─── Contribution Limits ─────────────────────────────────────────────────────

LIMIT_401K = 24000
LIMIT_ROTH_IRA = 7000
LIMIT_HSA = {"self": 4400, "family": 8750}


@dataclass
class USContributions:
    traditional_401k: float = 0.0
    roth_ira: float = 0.0
    hsa: float = 0.0
    hsa_coverage_type: str = "self"

    def __post_init__(self):
        check_choice("hsa_coverage_type", self.hsa_coverage_type, HSA_COVERAGE_TYPES)


@dataclass
class USInputs(CalculatorInputs):
    country: str = "US"
    state: str = "CA"
    filing_status: str = "single"
    contributions: USContributions = field(default_factory=USContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("filing_status", self.filing_status, FILING_STATUSES)
        check_choice("state", self.state, us_states.STATES)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    coverage = inputs.contributions.hsa_coverage_type if inputs is not None else "self"
    return {
        "traditional_401k": ContributionLimit(
            LIMIT_401K, "401(k)", "Pre-tax retirement contribution", True
        ),
        "roth_ira": ContributionLimit(
            LIMIT_ROTH_IRA, "Roth IRA", "Post-tax retirement contribution", False
        ),
        "hsa": ContributionLimit(
            LIMIT_HSA[coverage], "HSA", "Health Savings Account (pre-tax)", True
        ),
    }


def get_regions() -> list[RegionInfo]:
    return [
        RegionInfo(code, state.name, state.tax_type, state.notes or None)
        for code, state in us_states.STATES.items()
    ]


def default_inputs() -> USInputs:
    return USInputs(gross_salary=100000, state="CA", filing_status="single")


# ─── Calculation ─────────────────────────────────────────────────────────────


def federal_taxable_income(gross: float, filing_status: str, pre_tax: float) -> float:
    return max(0.0, gross - pre_tax - STANDARD_DEDUCTIONS[filing_status])


def payroll_taxes(gross: float, filing_status: str) -> dict[str, float]:
    threshold = ADDITIONAL_MEDICARE_THRESHOLDS[filing_status]
    return {
        "social_security": min(gross, SOCIAL_SECURITY_WAGE_BASE) * SOCIAL_SECURITY_RATE,
        "medicare": gross * MEDICARE_RATE,
        "additional_medicare": max(0.0, gross - threshold) * ADDITIONAL_MEDICARE_RATE,
    }


def calculate(inputs: USInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    status = inputs.filing_status
    c = normalize_contributions(
        {
            "traditional_401k": inputs.contributions.traditional_401k,
            "hsa": inputs.contributions.hsa,
            "roth_ira": inputs.contributions.roth_ira,
        },
        get_contribution_limits(inputs),
        [gross_cap(gross, ("traditional_401k", "hsa", "roth_ira"))],
    )
    pre_tax = c["traditional_401k"] + c["hsa"]

    federal_taxable = federal_taxable_income(gross, status, pre_tax)
    federal_tax = apply_brackets(federal_taxable, FEDERAL_BRACKETS[status])

    state_taxable = us_states.state_taxable_income(inputs.state, gross, pre_tax, status)
    state_tax = us_states.calculate_state_tax(inputs.state, state_taxable, status)
    sdi = us_states.calculate_sdi(inputs.state, gross)

    payroll = payroll_taxes(gross, status)

    taxes = {
        "total_income_tax": federal_tax + state_tax,
        "federal_income_tax": federal_tax,
        "state_income_tax": state_tax,
        **payroll,
        "state_disability_insurance": sdi,
    }
    total_tax = federal_tax + state_tax + sum(payroll.values()) + sdi

    return build_result(
        CONFIG,
        inputs,
        taxable_income=federal_taxable,
        taxes=taxes,
        total_tax=total_tax,
        voluntary=sum(c.values()),
        breakdown={
            "taxable_income_for_federal": federal_taxable,
            "taxable_income_for_state": state_taxable,
            "state_name": us_states.STATES[inputs.state].name,
            "marginal_federal_rate": marginal_rate(federal_taxable, FEDERAL_BRACKETS[status]),
            "federal_brackets": bracket_breakdown(federal_taxable, FEDERAL_BRACKETS[status]),
            "contributions": c,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=USInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
