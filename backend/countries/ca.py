"""
Canada
======
Federal and provincial / territorial income tax for 2026 with CPP, CPP2,
EI and (in Quebec) QPIP premiums.

Basic personal amounts are non-refundable credits at each jurisdiction's
lowest rate; the federal BPA phases down between the fourth and fifth
bracket thresholds. RRSP contributions reduce taxable income.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown
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
    code="CA",
    name="Canada",
    currency=CurrencyInfo("CAD", "C$", "Canadian Dollar", "en-CA"),
    tax_year=2026,
    last_updated="2026-02-02",
    supports_regions=True,
    default_region="ON",
)

FEDERAL_BRACKETS = build_brackets([
    (58_523, 0.14), (117_045, 0.205), (181_440, 0.26), (258_482, 0.29), (INF, 0.33),
])
FEDERAL_BPA_MAX = 16_452
FEDERAL_BPA_MIN = 14_829
FEDERAL_BPA_PHASE_OUT = (181_440, 258_482)


@dataclass(frozen=True)
class Province:
    name: str
    brackets: list
    bpa: float
    is_quebec: bool = False


PROVINCES = {
    "AB": Province("Alberta", build_brackets([
        (61_200, 0.08), (154_259, 0.10), (185_111, 0.12), (246_813, 0.13),
        (370_220, 0.14), (INF, 0.15),
    ]), 15_935),
    "BC": Province("British Columbia", build_brackets([
        (50_363, 0.0506), (100_728, 0.077), (115_648, 0.105), (140_430, 0.1229),
        (190_405, 0.147), (265_545, 0.168), (INF, 0.205),
    ]), 12_958),
    "MB": Province("Manitoba", build_brackets([
        (47_000, 0.108), (100_000, 0.1275), (INF, 0.174),
    ]), 15_780),
    "NB": Province("New Brunswick", build_brackets([
        (51_306, 0.094), (102_614, 0.14), (166_280, 0.16), (INF, 0.195),
    ]), 13_999),
    "NL": Province("Newfoundland and Labrador", build_brackets([
        (44_288, 0.087), (88_576, 0.145), (157_280, 0.158), (220_000, 0.178), (INF, 0.198),
    ]), 11_151),
    "NS": Province("Nova Scotia", build_brackets([
        (30_507, 0.0879), (61_015, 0.1495), (95_883, 0.1667), (154_650, 0.175), (INF, 0.21),
    ]), 8_744),
    "NT": Province("Northwest Territories", build_brackets([
        (51_533, 0.059), (103_070, 0.086), (168_326, 0.122), (INF, 0.1405),
    ]), 17_093),
    "NU": Province("Nunavut", build_brackets([
        (54_707, 0.04), (109_415, 0.07), (177_881, 0.09), (INF, 0.115),
    ]), 18_767),
    "ON": Province("Ontario", build_brackets([
        (53_891, 0.0505), (107_785, 0.0915), (150_000, 0.1116), (220_000, 0.1216), (INF, 0.1316),
    ]), 12_989),
    "PE": Province("Prince Edward Island", build_brackets([
        (33_328, 0.0965), (64_656, 0.137), (INF, 0.167),
    ]), 13_500),
    "QC": Province("Quebec", build_brackets([
        (54_345, 0.14), (108_680, 0.19), (132_245, 0.24), (INF, 0.2575),
    ]), 18_952, is_quebec=True),
    "SK": Province("Saskatchewan", build_brackets([
        (57_917, 0.105), (165_057, 0.125), (INF, 0.145),
    ]), 20_381),
    "YT": Province("Yukon", build_brackets([
        (58_523, 0.064), (117_045, 0.09), (181_440, 0.109), (258_482, 0.12), (INF, 0.127),
    ]), 16_452),
}

# (threshold on Ontario tax, surtax rate on the excess)
ONTARIO_SURTAX = [(5_818, 0.20), (7_446, 0.36)]

CPP_BASIC_EXEMPTION = 3_500
CPP_YMPE = 74_600
CPP_RATE = 0.0595
CPP_MAX = 4_230.45
CPP2_YAMPE = 85_000
CPP2_RATE = 0.04
CPP2_MAX = 416.00

EI_MAX_INSURABLE = 68_900
EI_RATE = 0.0163
EI_MAX = 1_123.07
EI_QUEBEC_RATE = 0.013
EI_QUEBEC_MAX = 895.70
QPIP_RATE = 0.0043
QPIP_MAX = 442.90

RRSP_LIMIT = 32_490
RRSP_EARNED_INCOME_RATE = 0.18


@dataclass
class CAContributions:
    rrsp_contribution: float = 0.0


@dataclass
class CAInputs(CalculatorInputs):
    country: str = "CA"
    region: str = "ON"
    contributions: CAContributions = field(default_factory=CAContributions)

    def __post_init__(self):
        super().__post_init__()
        check_choice("region", self.region, PROVINCES)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    limit = RRSP_LIMIT
    if inputs is not None:
        limit = min(RRSP_LIMIT, inputs.gross_salary * RRSP_EARNED_INCOME_RATE)
    return {
        "rrsp_contribution": ContributionLimit(
            limit,
            "RRSP Contribution",
            "Registered Retirement Savings Plan contribution (18% of earned income, 2026 limit)",
            True,
        ),
    }


def get_regions() -> list[RegionInfo]:
    return [RegionInfo(code, province.name) for code, province in PROVINCES.items()]


def default_inputs() -> CAInputs:
    return CAInputs(gross_salary=80000, region="ON")


# ─── Components ──────────────────────────────────────────────────────────────


def federal_bpa(taxable: float) -> float:
    start, end = FEDERAL_BPA_PHASE_OUT
    if taxable <= start:
        return FEDERAL_BPA_MAX
    if taxable >= end:
        return FEDERAL_BPA_MIN
    return FEDERAL_BPA_MAX - (taxable - start) / (end - start) * (FEDERAL_BPA_MAX - FEDERAL_BPA_MIN)


def ontario_surtax(ontario_tax: float) -> float:
    surtax = 0.0
    for threshold, rate in ONTARIO_SURTAX:
        surtax += max(0.0, ontario_tax - threshold) * rate
    return surtax


def payroll_premiums(gross: float, is_quebec: bool) -> dict[str, float]:
    contributory = max(0.0, min(gross, CPP_YMPE) - CPP_BASIC_EXEMPTION)
    cpp = min(contributory * CPP_RATE, CPP_MAX)
    cpp2 = min(max(0.0, min(gross, CPP2_YAMPE) - CPP_YMPE) * CPP2_RATE, CPP2_MAX)
    insurable = min(gross, EI_MAX_INSURABLE)
    if is_quebec:
        ei = min(insurable * EI_QUEBEC_RATE, EI_QUEBEC_MAX)
        qpip = min(insurable * QPIP_RATE, QPIP_MAX)
    else:
        ei = min(insurable * EI_RATE, EI_MAX)
        qpip = 0.0
    return {"cpp_employee": cpp, "cpp2_employee": cpp2, "ei_employee": ei,
            "qpip_employee": qpip}


def calculate(inputs: CAInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    province = PROVINCES[inputs.region]

    c = normalize_contributions(
        {"rrsp_contribution": inputs.contributions.rrsp_contribution},
        get_contribution_limits(inputs),
        [gross_cap(gross, ("rrsp_contribution",))],
    )
    rrsp = c["rrsp_contribution"]
    taxable = max(0.0, gross - rrsp)

    federal_before_credits = apply_brackets(taxable, FEDERAL_BRACKETS)
    bpa = federal_bpa(taxable)
    federal_tax = max(0.0, federal_before_credits - bpa * FEDERAL_BRACKETS[0].rate)

    provincial_before_credits = apply_brackets(taxable, province.brackets)
    provincial_basic = max(0.0, provincial_before_credits - province.bpa * province.brackets[0].rate)
    surtax = ontario_surtax(provincial_before_credits) if inputs.region == "ON" else 0.0
    provincial_tax = provincial_basic + surtax

    premiums = payroll_premiums(gross, province.is_quebec)
    total_income_tax = federal_tax + provincial_tax

    taxes = {
        "total_income_tax": total_income_tax,
        "federal_income_tax": federal_tax,
        "provincial_income_tax": provincial_tax,
        **premiums,
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=total_income_tax + sum(premiums.values()),
        voluntary=rrsp,
        breakdown={
            "region": inputs.region,
            "region_name": province.name,
            "is_quebec": province.is_quebec,
            "federal_bracket_taxes": bracket_breakdown(taxable, FEDERAL_BRACKETS),
            "provincial_bracket_taxes": bracket_breakdown(taxable, province.brackets),
            "federal_bpa": bpa,
            "provincial_bpa": province.bpa,
            "federal_tax_before_credits": federal_before_credits,
            "provincial_tax_before_credits": provincial_before_credits,
            "provincial_surtax": surtax,
            "rrsp_deduction": rrsp,
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=CAInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
