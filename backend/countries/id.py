"""
Indonesia
=========
PPh 21 on employment income for 2026 with the job expense deduction, BPJS
employee contributions and the PTKP non-taxable threshold.

Taxable income is floored to the nearest 1,000 rupiah before the schedule
is applied. Tax and BPJS contributions are rounded to the rupiah.
"""

from dataclasses import dataclass, field

from brackets import INF, build_brackets, apply_brackets, bracket_breakdown, floor_to, round_half_up
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
    code="ID",
    name="Indonesia",
    currency=CurrencyInfo("IDR", "Rp", "Indonesian Rupiah", "id-ID"),
    tax_year=2026,
    last_updated="2026-02-02",
)

MARITAL_STATUSES = {"single", "married"}

TAX_BRACKETS = build_brackets([
    (60_000_000, 0.05), (250_000_000, 0.15), (500_000_000, 0.25),
    (5_000_000_000, 0.30), (INF, 0.35),
])
TAXABLE_ROUNDING = 1000

JOB_EXPENSE_RATE = 0.05
JOB_EXPENSE_CAP = 6_000_000

PTKP_PERSONAL = 54_000_000
PTKP_MARRIED = 4_500_000
PTKP_DEPENDENT = 4_500_000
PTKP_SPOUSE_INCOME_COMBINED = 54_000_000
MAX_DEPENDENTS = 3

# (employee rate, employer rate, monthly wage cap)
BPJS = {
    "health": (0.01, 0.04, 12_000_000),
    "jht": (0.02, 0.037, INF),
    "jp": (0.01, 0.02, 10_547_400),
}


@dataclass
class IDTaxReliefs:
    marital_status: str = "single"
    number_of_dependents: int = 0
    spouse_income_combined: bool = False

    def __post_init__(self):
        check_choice("marital_status", self.marital_status, MARITAL_STATUSES)
        self.number_of_dependents = non_negative(self.number_of_dependents)
        if self.marital_status != "married":
            self.spouse_income_combined = False


@dataclass
class IDInputs(CalculatorInputs):
    country: str = "ID"
    tax_reliefs: IDTaxReliefs = field(default_factory=IDTaxReliefs)


def get_contribution_limits(inputs=None) -> dict:
    return {}


def get_regions() -> list:
    return []


def default_inputs() -> IDInputs:
    return IDInputs(gross_salary=120_000_000)


def bpjs_contributions(gross: float) -> dict[str, float]:
    monthly = gross / 12
    result = {}
    for name, (employee_rate, employer_rate, cap) in BPJS.items():
        base = min(monthly, cap)
        result[f"{name}_employee"] = round_half_up(base * employee_rate * 12)
        result[f"{name}_employer"] = round_half_up(base * employer_rate * 12)
    return result


def ptkp(r: IDTaxReliefs) -> dict[str, float]:
    married = r.marital_status == "married"
    return {
        "personal": PTKP_PERSONAL,
        "married": PTKP_MARRIED if married else 0,
        "dependents": min(r.number_of_dependents, MAX_DEPENDENTS) * PTKP_DEPENDENT,
        "spouse_income_combined": PTKP_SPOUSE_INCOME_COMBINED if r.spouse_income_combined else 0,
    }


def calculate(inputs: IDInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary

    job_expense = min(gross * JOB_EXPENSE_RATE, JOB_EXPENSE_CAP)
    bpjs = bpjs_contributions(gross)
    # only the pension programmes are deductible
    pension_deduction = bpjs["jht_employee"] + bpjs["jp_employee"]
    net_income = max(0.0, gross - job_expense - pension_deduction)

    allowances = ptkp(inputs.tax_reliefs)
    before_rounding = max(0.0, net_income - sum(allowances.values()))
    taxable = floor_to(before_rounding, TAXABLE_ROUNDING)
    income_tax = round_half_up(apply_brackets(taxable, TAX_BRACKETS))

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        "bpjs_health": bpjs["health_employee"],
        "bpjs_jht": bpjs["jht_employee"],
        "bpjs_jp": bpjs["jp_employee"],
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=taxable,
        taxes=taxes,
        total_tax=income_tax + pension_deduction + bpjs["health_employee"],
        voluntary=0.0,
        breakdown={
            "job_expense": round_half_up(job_expense),
            "job_expense_cap": JOB_EXPENSE_CAP,
            "pension_deduction": pension_deduction,
            "ptkp": {**allowances, "total": sum(allowances.values())},
            "taxable_income_before_rounding": before_rounding,
            "bpjs": bpjs,
            "bracket_taxes": bracket_breakdown(taxable, TAX_BRACKETS),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=IDInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
