"""
Germany
=======
Lohnsteuer for 2026 using the §32a EStG tariff formula, with the
solidarity surcharge, church tax and employee social insurance.

Married employees are taxed under income splitting. Private pension
contributions (bAV salary conversion, Riester, Rürup) reduce taxable
income; bAV also reduces the social insurance base up to 4% of the
pension ceiling. Rürup deductibility shares its ceiling with statutory
pension insurance paid by employee and employer.
"""

import math
from dataclasses import dataclass, field

from brackets import round_half_up
from contributions import ContributionLimit, gross_cap, normalize_contributions
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
    code="DE",
    name="Germany",
    currency=CurrencyInfo("EUR", "€", "Euro", "de-DE"),
    tax_year=2026,
    last_updated="2026-02-02",
    supports_regions=True,
    default_region="BE",
)

# code -> (name, church tax rate)
FEDERAL_STATES = {
    "BW": ("Baden-Württemberg", 0.08),
    "BY": ("Bavaria (Bayern)", 0.08),
    "BE": ("Berlin", 0.09),
    "BB": ("Brandenburg", 0.09),
    "HB": ("Bremen", 0.09),
    "HH": ("Hamburg", 0.09),
    "HE": ("Hesse (Hessen)", 0.09),
    "MV": ("Mecklenburg-Vorpommern", 0.09),
    "NI": ("Lower Saxony (Niedersachsen)", 0.09),
    "NW": ("North Rhine-Westphalia (Nordrhein-Westfalen)", 0.09),
    "RP": ("Rhineland-Palatinate (Rheinland-Pfalz)", 0.09),
    "SL": ("Saarland", 0.09),
    "SN": ("Saxony (Sachsen)", 0.09),
    "ST": ("Saxony-Anhalt (Sachsen-Anhalt)", 0.09),
    "SH": ("Schleswig-Holstein", 0.09),
    "TH": ("Thuringia (Thüringen)", 0.09),
}

# §32a zone boundaries
BASIC_ALLOWANCE = 12348
ZONE_1_END = 17799
ZONE_2_END = 69878
ZONE_3_END = 277825

EMPLOYEE_LUMP_SUM = 1230
SPECIAL_EXPENSES_LUMP_SUM = {"single": 36, "married": 72}

SOLI_RATE = 0.055
SOLI_MILDERUNG_RATE = 0.119
SOLI_EXEMPTION = {"single": 20350, "married": 40700}

PENSION_CEILING = 101400
HEALTH_CEILING = 69750
PENSION_RATE = 0.093
UNEMPLOYMENT_RATE = 0.013
HEALTH_RATE = 0.073 + 0.0145
CARE_RATE = 0.017
CARE_RATE_CHILDLESS = 0.025

BAV_TAX_FREE_RATE = 0.08
BAV_SOCIAL_FREE_RATE = 0.04
RIESTER_MAX = 2100
RUERUP_CEILING = {"single": 30826, "married": 61652}

CONTRIBUTION_KINDS = ("occupational_pension", "riester_contribution", "ruerup_contribution")


@dataclass
class DEContributions:
    occupational_pension: float = 0.0
    riester_contribution: float = 0.0
    ruerup_contribution: float = 0.0


@dataclass
class DEInputs(CalculatorInputs):
    country: str = "DE"
    state: str = "BE"
    is_married: bool = False
    is_church_member: bool = False
    is_childless: bool = False
    contributions: DEContributions = field(default_factory=DEContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("state", self.state, FEDERAL_STATES)

    @property
    def status(self) -> str:
        return "married" if self.is_married else "single"


# ─── Social Insurance ────────────────────────────────────────────────────────


def social_insurance(base: float, is_childless: bool) -> dict[str, float]:
    pension_base = min(base, PENSION_CEILING)
    health_base = min(base, HEALTH_CEILING)
    care_rate = CARE_RATE_CHILDLESS if is_childless else CARE_RATE
    return {
        "pension_insurance": round_half_up(pension_base * PENSION_RATE),
        "unemployment_insurance": round_half_up(pension_base * UNEMPLOYMENT_RATE),
        "health_insurance": round_half_up(health_base * HEALTH_RATE),
        "long_term_care_insurance": round_half_up(health_base * care_rate),
    }


def social_insurance_base(gross: float, occupational_pension: float) -> float:
    return max(0.0, gross - min(occupational_pension, PENSION_CEILING * BAV_SOCIAL_FREE_RATE))


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    status = inputs.status if inputs is not None else "single"
    ruerup = RUERUP_CEILING[status]
    if inputs is not None:
        base = social_insurance_base(inputs.gross_salary, inputs.contributions.occupational_pension)
        # employee and employer statutory pension both count against the ceiling
        statutory = 2 * min(base, PENSION_CEILING) * PENSION_RATE
        ruerup = max(0.0, ruerup - statutory)
    return {
        "occupational_pension": ContributionLimit(
            round_half_up(PENSION_CEILING * BAV_TAX_FREE_RATE),
            "Occupational Pension (bAV)",
            "Salary conversion, tax-free up to 8% of the pension contribution ceiling",
            True,
        ),
        "riester_contribution": ContributionLimit(
            RIESTER_MAX,
            "Riester Pension",
            "Tax-deductible contributions up to €2,100 per year",
            True,
        ),
        "ruerup_contribution": ContributionLimit(
            ruerup,
            "Rürup (Basisrente)",
            "Deductible up to the ceiling, less statutory pension contributions",
            True,
        ),
    }


def get_regions() -> list[RegionInfo]:
    return [
        RegionInfo(code, name, tax_type="none", notes=f"Church tax: {rate * 100:.0f}%")
        for code, (name, rate) in FEDERAL_STATES.items()
    ]


def default_inputs() -> DEInputs:
    return DEInputs(gross_salary=55000, state="BE")


# ─── Income Tax ──────────────────────────────────────────────────────────────


def tariff(taxable: float) -> float:
    """§32a EStG basic tariff on a single taxable income."""
    zve = math.floor(taxable)
    if zve <= BASIC_ALLOWANCE:
        return 0.0
    if zve <= ZONE_1_END:
        y = (zve - BASIC_ALLOWANCE) / 10000
        tax = (914.51 * y + 1400) * y
    elif zve <= ZONE_2_END:
        z = (zve - ZONE_1_END) / 10000
        tax = (173.1 * z + 2397) * z + 1034.87
    elif zve <= ZONE_3_END:
        tax = 0.42 * zve - 11135.63
    else:
        tax = 0.45 * zve - 19470.38
    return float(math.floor(tax))


def income_tax(taxable: float, is_married: bool) -> float:
    if is_married:
        return tariff(taxable / 2) * 2
    return tariff(taxable)


def solidarity_surcharge(tax: float, status: str) -> float:
    exemption = SOLI_EXEMPTION[status]
    if tax <= exemption:
        return 0.0
    return round_half_up(min(tax * SOLI_RATE, (tax - exemption) * SOLI_MILDERUNG_RATE))


def church_tax(tax: float, state: str, is_church_member: bool) -> float:
    if not is_church_member:
        return 0.0
    return round_half_up(tax * FEDERAL_STATES[state][1])


def calculate(inputs: DEInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    status = inputs.status

    c = normalize_contributions(
        {kind: getattr(inputs.contributions, kind) for kind in CONTRIBUTION_KINDS},
        get_contribution_limits(inputs),
        [gross_cap(gross, CONTRIBUTION_KINDS)],
    )
    voluntary = sum(c.values())

    insurance = social_insurance(
        social_insurance_base(gross, c["occupational_pension"]), inputs.is_childless
    )
    total_insurance = sum(insurance.values())

    lump_sums = {
        "employee_lump_sum": EMPLOYEE_LUMP_SUM,
        "special_expenses_lump_sum": SPECIAL_EXPENSES_LUMP_SUM[status],
    }
    taxable = max(0.0, gross - sum(lump_sums.values()) - voluntary)

    tax = income_tax(taxable, inputs.is_married)
    soli = solidarity_surcharge(tax, status)
    church = church_tax(tax, inputs.state, inputs.is_church_member)
    total_income_tax = tax + soli + church

    taxes = {
        "total_income_tax": total_income_tax,
        "income_tax": tax,
        "solidarity_surcharge": soli,
        "church_tax": church,
        **insurance,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=total_income_tax + total_insurance,
        voluntary=voluntary,
        breakdown={
            "standard_deductions": {**lump_sums, "total": sum(lump_sums.values())},
            "pension_contributions": {**c, "total": voluntary},
            "social_security": {**insurance, "total": total_insurance},
            "splitting_applied": inputs.is_married,
            "state": inputs.state,
            "church_tax_rate": FEDERAL_STATES[inputs.state][1] if inputs.is_church_member else 0,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=DEInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
