"""
Switzerland
===========
Direct federal tax for 2026, cantonal and municipal tax approximated as a
multiple of the federal base tax, and employee social insurance
(AHV/IV/EO, ALV, BVG).

The federal schedule is capped at 11.5% of taxable income and rounded
down to the 5 centimes. Pillar 3a contributions are deductible up to
7,258 with an occupational pension, else 20% of salary up to 36,288.
Health insurance premiums are not withheld from salary and are reported
for information only.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, floor_to
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
    non_negative,
)


CONFIG = CountryConfig(
    code="CH",
    name="Switzerland",
    currency=CurrencyInfo("CHF", "CHF", "Swiss Franc", "de-CH"),
    tax_year=2026,
    last_updated="2026-02-02",
    supports_filing_status=True,
    supports_regions=True,
    default_region="ZH",
)

FILING_STATUSES = {"single", "married", "single_parent"}

FEDERAL_BRACKETS = {
    "single": build_brackets([
        (18500, 0.0), (33200, 0.0077), (43500, 0.0088), (58000, 0.0264),
        (76100, 0.0297), (82000, 0.0594), (108800, 0.066), (141500, 0.088),
        (184900, 0.11), (INF, 0.132),
    ]),
    # also applies to single parents
    "married": build_brackets([
        (32000, 0.0), (53400, 0.01), (61300, 0.02), (79100, 0.03),
        (94900, 0.04), (108600, 0.05), (120500, 0.06), (130500, 0.07),
        (138300, 0.08), (144200, 0.09), (148200, 0.10), (150300, 0.11),
        (152300, 0.12), (INF, 0.13),
    ]),
}
FEDERAL_MAX_RATE = 0.115
FEDERAL_ROUNDING = 0.05
FEDERAL_CHILD_DEDUCTION = 263

# code -> (name, multiplier of federal base tax, description)
CANTONS = {
    "ZH": ("Zurich", 2.8, "Urban, higher tax (City of Zurich)"),
    "ZG": ("Zug", 1.5, "Low-tax business canton"),
    "GE": ("Geneva", 3.2, "Very high-tax urban area"),
    "VD": ("Vaud", 2.9, "High-tax French-speaking canton"),
    "BS": ("Basel-City", 2.6, "Urban, moderate-high tax"),
    "BE": ("Bern", 2.4, "Capital canton, moderate tax"),
    "TI": ("Ticino", 2.7, "Italian-speaking, higher tax"),
    "NW": ("Nidwalden", 1.6, "Low-tax central Swiss canton"),
}
CANTONAL_SHARE = 0.6

AHV_IV_EO_RATE = 0.053
ALV_RATE = 0.011
ALV_CAP = 148200

BVG_ENTRY_THRESHOLD = 22680
BVG_COORDINATION_DEDUCTION = 26460
BVG_MAX_INSURED_SALARY = 64260
BVG_EMPLOYEE_SHARE = 0.5
# (minimum age, total contribution rate)
BVG_AGE_RATES = [(55, 0.18), (45, 0.15), (35, 0.10), (25, 0.07)]

PROFESSIONAL_EXPENSES_RATE = 0.03
PROFESSIONAL_EXPENSES_MIN = 2000
PROFESSIONAL_EXPENSES_MAX = 4000
INSURANCE_DEDUCTION_SINGLE = 1800
INSURANCE_DEDUCTION_MARRIED = 3600
INSURANCE_DEDUCTION_PER_CHILD = 700

PILLAR3A_WITH_PENSION = 7258
PILLAR3A_WITHOUT_PENSION = 36288
PILLAR3A_WITHOUT_PENSION_RATE = 0.20

HEALTH_INSURANCE_MONTHLY = 393


@dataclass
class CHContributions:
    pillar3a_contribution: float = 0.0
    include_bvg: bool = True


@dataclass
class CHInputs(CalculatorInputs):
    country: str = "CH"
    filing_status: str = "single"
    canton: str = "ZH"
    age: int = 35
    number_of_children: int = 0
    include_health_insurance: bool = True
    contributions: CHContributions = field(default_factory=CHContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("filing_status", self.filing_status, FILING_STATUSES)
        check_choice("canton", self.canton, CANTONS)
        self.age = non_negative(self.age)
        self.number_of_children = non_negative(self.number_of_children)

    @property
    def tariff(self) -> str:
        return "single" if self.filing_status == "single" else "married"


def pillar3a_limit(gross: float, include_bvg: bool) -> float:
    if include_bvg:
        return PILLAR3A_WITH_PENSION
    return min(gross * PILLAR3A_WITHOUT_PENSION_RATE, PILLAR3A_WITHOUT_PENSION)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    limit = PILLAR3A_WITH_PENSION
    if inputs is not None:
        limit = pillar3a_limit(inputs.gross_salary, inputs.contributions.include_bvg)
    return {
        "pillar3a_contribution": ContributionLimit(
            limit,
            "Pillar 3a",
            "Maximum annual contribution to tied pension provision (Pillar 3a)",
            True,
        ),
    }


def get_regions() -> list[RegionInfo]:
    return [
        RegionInfo(code, name, notes=description)
        for code, (name, _, description) in CANTONS.items()
    ]


def default_inputs() -> CHInputs:
    return CHInputs(gross_salary=90000, filing_status="single", canton="ZH", age=35)


# ─── Components ──────────────────────────────────────────────────────────────


def federal_base_tax(taxable: float, tariff: str) -> float:
    if taxable <= 0:
        return 0.0
    tax = min(apply_brackets(taxable, FEDERAL_BRACKETS[tariff]), taxable * FEDERAL_MAX_RATE)
    return floor_to(tax, FEDERAL_ROUNDING)


def bvg_rate(age: int) -> float:
    for min_age, rate in BVG_AGE_RATES:
        if age >= min_age:
            return rate
    return 0.0


def coordinated_salary(gross: float) -> float:
    if gross <= BVG_ENTRY_THRESHOLD:
        return 0.0
    return max(0.0, min(gross - BVG_COORDINATION_DEDUCTION, BVG_MAX_INSURED_SALARY))


def social_insurance(gross: float, age: int, include_bvg: bool) -> dict[str, float]:
    bvg = 0.0
    if include_bvg:
        bvg = coordinated_salary(gross) * bvg_rate(age) * BVG_EMPLOYEE_SHARE
    return {
        "ahv_iv_eo": gross * AHV_IV_EO_RATE,
        "alv": min(gross, ALV_CAP) * ALV_RATE,
        "bvg": bvg,
    }


def standard_deductions(gross: float, filing_status: str, children: int) -> dict[str, float]:
    # single parents are taxed on the married tariff but keep the single premium deduction
    professional = min(max(gross * PROFESSIONAL_EXPENSES_RATE, PROFESSIONAL_EXPENSES_MIN),
                       PROFESSIONAL_EXPENSES_MAX)
    insurance = INSURANCE_DEDUCTION_MARRIED if filing_status == "married" else INSURANCE_DEDUCTION_SINGLE
    insurance += children * INSURANCE_DEDUCTION_PER_CHILD
    return {"professional_expenses": professional, "insurance_premiums": insurance}


def calculate(inputs: CHInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    tariff = inputs.tariff
    name, multiplier, _ = CANTONS[inputs.canton]

    c = normalize_contributions(
        {"pillar3a_contribution": inputs.contributions.pillar3a_contribution},
        get_contribution_limits(inputs),
        [gross_cap(gross, ("pillar3a_contribution",))],
    )
    pillar3a = c["pillar3a_contribution"]

    deductions = standard_deductions(gross, inputs.filing_status, inputs.number_of_children)
    total_deductions = sum(deductions.values()) + pillar3a
    taxable = max(0.0, gross - total_deductions)

    base_tax = federal_base_tax(taxable, tariff)
    child_deduction = inputs.number_of_children * FEDERAL_CHILD_DEDUCTION
    federal_tax = max(0.0, base_tax - child_deduction)
    total_cantonal = base_tax * multiplier
    cantonal_tax = total_cantonal * CANTONAL_SHARE
    municipal_tax = total_cantonal - cantonal_tax

    insurance = social_insurance(gross, inputs.age, inputs.contributions.include_bvg)
    total_insurance = sum(insurance.values())
    total_income_tax = federal_tax + total_cantonal
    health_cost = HEALTH_INSURANCE_MONTHLY * 12 if inputs.include_health_insurance else 0

    taxes = {
        "total_income_tax": total_income_tax,
        "federal_income_tax": federal_tax,
        "cantonal_income_tax": cantonal_tax,
        "municipal_income_tax": municipal_tax,
        **insurance,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=total_income_tax + total_insurance,
        voluntary=pillar3a,
        breakdown={
            "filing_status": inputs.filing_status,
            "canton": inputs.canton,
            "canton_name": name,
            "cantonal_multiplier": multiplier,
            "federal_base_tax": base_tax,
            "child_deduction": child_deduction,
            "social_security": {
                **insurance,
                "coordinated_salary": coordinated_salary(gross),
                "bvg_rate": bvg_rate(inputs.age) * BVG_EMPLOYEE_SHARE
                            if inputs.contributions.include_bvg else 0.0,
                "total": total_insurance,
            },
            "deductions": {**deductions, "pillar3a": pillar3a, "total": total_deductions},
            "health_insurance": {
                "annual_cost": health_cost,
                "monthly_cost": health_cost / 12,
                "is_included": inputs.include_health_insurance,
            },
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=CHInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
