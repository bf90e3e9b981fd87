"""
United Kingdom
==============
Income tax and Class 1 employee National Insurance for the 2026/27 tax
year, with the Scottish bands as a region.

Pension contributions are modelled as relief at source: the gross
contribution earns 20% basic-rate relief, plus 20% (higher rate) or 25%
(additional rate) claimed back. Only the net cost reduces take-home pay.
All amounts are rounded to the penny.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown, round_half_up
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
    code="UK",
    name="United Kingdom",
    currency=CurrencyInfo("GBP", "£", "British Pound", "en-GB"),
    tax_year=2027,
    last_updated="2026-02-02",
    supports_regions=True,
    default_region="rest_of_uk",
)

TAX_YEAR_LABEL = "2026/27"
RESIDENCY_TYPES = {"resident", "non_resident"}

PERSONAL_ALLOWANCE = 12570
PERSONAL_ALLOWANCE_TAPER_THRESHOLD = 100000

BANDS = {
    "rest_of_uk": build_brackets([(37700, 0.20), (125140, 0.40), (INF, 0.45)]),
    "scotland": build_brackets([
        (3967, 0.19), (16956, 0.20), (31092, 0.21), (62430, 0.42),
        (125140, 0.45), (INF, 0.48),
    ]),
}
HIGHER_RATE_THRESHOLD = 37700
ADDITIONAL_RATE_THRESHOLD = 125140

NI_PRIMARY_THRESHOLD = 12570
NI_UPPER_EARNINGS_LIMIT = 50270
NI_MAIN_RATE = 0.08
NI_ADDITIONAL_RATE = 0.02

PENSION_ANNUAL_ALLOWANCE = 60000
PENSION_BASIC_RELIEF = 0.20
PENSION_HIGHER_RELIEF = 0.20
PENSION_ADDITIONAL_RELIEF = 0.25

REGIONS = [
    RegionInfo("rest_of_uk", "England, Wales & Northern Ireland"),
    RegionInfo("scotland", "Scotland",
               notes="Scottish Income Tax applies to non-savings non-dividend income"),
]


def pence(value: float) -> float:
    return round_half_up(value, 2)


@dataclass
class UKContributions:
    pension_contribution: float = 0.0


@dataclass
class UKInputs(CalculatorInputs):
    country: str = "UK"
    residency_type: str = "resident"
    region: str = "rest_of_uk"
    contributions: UKContributions = field(default_factory=UKContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)
        check_choice("region", self.region, BANDS)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    return {
        "pension_contribution": ContributionLimit(
            PENSION_ANNUAL_ALLOWANCE,
            "Pension Annual Allowance",
            f"Maximum pension contribution with tax relief (£60,000 for {TAX_YEAR_LABEL})",
            True,
        ),
    }


def get_regions() -> list[RegionInfo]:
    return list(REGIONS)


def default_inputs() -> UKInputs:
    return UKInputs(gross_salary=35000, residency_type="resident", region="rest_of_uk")


# ─── Components ──────────────────────────────────────────────────────────────


def personal_allowance(income: float, is_resident: bool) -> tuple[float, float]:
    """Returns (allowance, reduction); £1 is withdrawn per £2 above the taper threshold."""
    if not is_resident:
        return 0.0, 0.0
    if income <= PERSONAL_ALLOWANCE_TAPER_THRESHOLD:
        return PERSONAL_ALLOWANCE, 0.0
    reduction = min((income - PERSONAL_ALLOWANCE_TAPER_THRESHOLD) / 2, PERSONAL_ALLOWANCE)
    return pence(PERSONAL_ALLOWANCE - reduction), pence(reduction)


def national_insurance(income: float) -> dict[str, float]:
    main_band = max(0.0, min(income, NI_UPPER_EARNINGS_LIMIT) - NI_PRIMARY_THRESHOLD)
    additional_band = max(0.0, income - NI_UPPER_EARNINGS_LIMIT)
    main = pence(main_band * NI_MAIN_RATE)
    additional = pence(additional_band * NI_ADDITIONAL_RATE)
    return {"main_contribution": main, "additional_contribution": additional,
            "total": pence(main + additional)}


def pension_relief(contribution: float, taxable: float) -> float:
    relief = pence(contribution * PENSION_BASIC_RELIEF)
    if taxable > ADDITIONAL_RATE_THRESHOLD:
        relief += pence(contribution * PENSION_ADDITIONAL_RELIEF)
    elif taxable > HIGHER_RATE_THRESHOLD:
        relief += pence(contribution * PENSION_HIGHER_RELIEF)
    return pence(relief)


def calculate(inputs: UKInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    is_resident = inputs.residency_type == "resident"

    c = normalize_contributions(
        {"pension_contribution": inputs.contributions.pension_contribution},
        get_contribution_limits(inputs),
        [gross_cap(gross, ("pension_contribution",))],
    )
    pension = c["pension_contribution"]

    allowance, reduction = personal_allowance(gross, is_resident)
    taxable = max(0.0, gross - allowance)
    bands = BANDS[inputs.region]
    brackets = [{**row, "tax": pence(row["tax"])} for row in bracket_breakdown(taxable, bands)]
    income_tax = pence(sum(row["tax"] for row in brackets))
    ni = national_insurance(gross)
    total_tax = pence(income_tax + ni["total"])

    relief = pension_relief(pension, taxable)
    net_pension_cost = min(max(0.0, pension - relief), max(0.0, gross - total_tax))

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        "national_insurance": ni["total"],
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=total_tax,
        voluntary=net_pension_cost,
        breakdown={
            "region": inputs.region,
            "is_resident": is_resident,
            "personal_allowance": allowance,
            "personal_allowance_reduction": reduction,
            "bracket_taxes": brackets,
            "national_insurance": {
                **ni,
                "primary_threshold": NI_PRIMARY_THRESHOLD,
                "upper_earnings_limit": NI_UPPER_EARNINGS_LIMIT,
                "main_rate": NI_MAIN_RATE,
                "additional_rate": NI_ADDITIONAL_RATE,
            },
            "pension_contribution": pension,
            "pension_net_cost": net_pension_cost,
            "pension_tax_relief": relief,
            "unrounded_income_tax": apply_brackets(taxable, bands),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=UKInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
