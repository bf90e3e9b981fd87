"""
Portugal
========
IRS (personal income tax) on employment income for 2026, with the
solidarity surcharge, employee social security, PPR retirement-plan credit
and dependant credits.

Regimes:
  - resident: progressive IRS after the specific deduction
  - nhr_2: the IFICI regime, a flat 20% on employment income
  - non_resident: flat 25%, no social security or credits

Married couples filing jointly are taxed under income splitting: the
schedule is applied to half the joint taxable income and doubled.
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
    code="PT",
    name="Portugal",
    currency=CurrencyInfo("EUR", "€", "Euro", "pt-PT"),
    tax_year=2026,
    last_updated="2026-01-30",
    supports_filing_status=True,
)

RESIDENCY_TYPES = {"resident", "nhr_2", "non_resident"}
FILING_STATUSES = {"single", "married_jointly", "married_separately"}

IRS_BRACKETS = build_brackets([
    (7703, 0.13), (11623, 0.165), (16472, 0.22), (21321, 0.25),
    (27146, 0.32), (39791, 0.355), (43081, 0.435), (58528, 0.45),
    (INF, 0.48),
])
NHR2_RATE = 0.20
NON_RESIDENT_RATE = 0.25

# (income from, rate) on gross salary
SOLIDARITY_TIERS = [(80000, 0.025), (250000, 0.05)]

SOCIAL_SECURITY_RATE = 0.11
EMPLOYER_SOCIAL_SECURITY_RATE = 0.2375
MIN_SPECIFIC_DEDUCTION = 4104
DEPENDENT_CREDIT = 600
PPR_CREDIT_RATE = 0.20


@dataclass
class PTContributions:
    ppr_contribution: float = 0.0


@dataclass
class PTInputs(CalculatorInputs):
    country: str = "PT"
    residency_type: str = "resident"
    filing_status: str = "single"
    number_of_dependents: int = 0
    age: int = 30
    contributions: PTContributions = field(default_factory=PTContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)
        check_choice("filing_status", self.filing_status, FILING_STATUSES)
        self.number_of_dependents = non_negative(self.number_of_dependents)
        self.age = non_negative(self.age)


def ppr_limit(age: int) -> float:
    if age < 35:
        return 2000
    if age <= 50:
        return 1750
    return 1500


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    limit = ppr_limit(inputs.age if inputs is not None else 30)
    return {
        "ppr_contribution": ContributionLimit(
            limit,
            "PPR Contribution",
            f"Retirement Savings Plan - 20% tax credit up to €{limit * PPR_CREDIT_RATE:,.0f}",
            False,
        ),
    }


def get_regions() -> list:
    return []


def default_inputs() -> PTInputs:
    return PTInputs(gross_salary=35000, residency_type="resident", filing_status="single", age=30)


def solidarity_surcharge(income: float) -> float:
    surcharge = 0.0
    for i, (start, rate) in enumerate(SOLIDARITY_TIERS):
        end = SOLIDARITY_TIERS[i + 1][0] if i + 1 < len(SOLIDARITY_TIERS) else INF
        if income > start:
            surcharge += (min(income, end) - start) * rate
    return surcharge


def progressive_irs(taxable: float, filing_status: str) -> float:
    if filing_status == "married_jointly":
        return apply_brackets(taxable / 2, IRS_BRACKETS) * 2
    return apply_brackets(taxable, IRS_BRACKETS)


def calculate(inputs: PTInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    regime = inputs.residency_type
    is_resident = regime != "non_resident"

    c = normalize_contributions(
        {"ppr_contribution": inputs.contributions.ppr_contribution if is_resident else 0.0},
        get_contribution_limits(inputs),
        [gross_cap(gross, ("ppr_contribution",))],
    )

    social_security = gross * SOCIAL_SECURITY_RATE if is_resident else 0.0

    if regime == "resident":
        specific_deduction = max(MIN_SPECIFIC_DEDUCTION, social_security)
        taxable = max(0.0, gross - specific_deduction)
        income_tax = progressive_irs(taxable, inputs.filing_status)
        surcharge = solidarity_surcharge(gross)
        brackets = bracket_breakdown(taxable, IRS_BRACKETS)
    else:
        rate = NHR2_RATE if regime == "nhr_2" else NON_RESIDENT_RATE
        specific_deduction = 0.0
        taxable = gross
        income_tax = gross * rate
        surcharge = 0.0
        brackets = [{"min": 0, "max": None, "rate": rate, "taxable_amount": gross,
                     "tax": income_tax}]

    ppr_credit = c["ppr_contribution"] * PPR_CREDIT_RATE
    dependent_credit = inputs.number_of_dependents * DEPENDENT_CREDIT if is_resident else 0.0
    gross_tax = income_tax + surcharge
    total_credits = ppr_credit + dependent_credit
    final_tax = max(0.0, gross_tax - total_credits)

    taxes = {
        "total_income_tax": final_tax,
        "income_tax": income_tax,
        "solidarity_surcharge": surcharge,
        "social_security": social_security,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=final_tax + social_security,
        voluntary=c["ppr_contribution"],
        breakdown={
            "bracket_taxes": brackets,
            "regime": regime,
            "filing_status": inputs.filing_status,
            "specific_deduction": specific_deduction,
            "employer_social_security": gross * EMPLOYER_SOCIAL_SECURITY_RATE,
            "ppr_contribution": c["ppr_contribution"],
            "ppr_tax_credit": ppr_credit,
            "dependent_deduction": dependent_credit,
            "total_tax_credits": total_credits,
            "gross_tax_before_credits": gross_tax,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=PTInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
