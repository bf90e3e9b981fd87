"""
Singapore
=========
Resident progressive income tax, CPF contributions and the personal relief
catalogue for Year of Assessment 2026.

CPF is computed on the monthly wage (capped at the ordinary-wage ceiling),
rounded to cents per month and annualised. Income tax is rounded to cents.
Foreigners pay no CPF and are taxed at the higher of the progressive
schedule and the 24% flat rate.
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
    code="SG",
    name="Singapore",
    currency=CurrencyInfo("SGD", "S$", "Singapore Dollar", "en-SG"),
    tax_year=2026,
    last_updated="2026-01-28",
)

RESIDENCY_TYPES = {"citizen_pr", "foreigner"}
PARENT_RELIEF_TYPES = {"none", "not_staying", "staying"}

TAX_BRACKETS = build_brackets([
    (20000, 0.0), (30000, 0.02), (40000, 0.035), (80000, 0.07),
    (120000, 0.115), (160000, 0.15), (200000, 0.18), (240000, 0.19),
    (280000, 0.195), (320000, 0.20), (500000, 0.22), (1000000, 0.23),
    (INF, 0.24),
])
NON_RESIDENT_FLAT_RATE = 0.24


# ─── CPF ─────────────────────────────────────────────────────────────────────

CPF_MONTHLY_CEILING = 8000

# (max_age, employee, employer, ordinary, special, medisave)
CPF_RATES = [
    (55, 0.20, 0.17, 0.6217, 0.1622, 0.2162),
    (60, 0.15, 0.145, 0.4237, 0.2373, 0.3390),
    (65, 0.095, 0.105, 0.2100, 0.3150, 0.4750),
    (70, 0.07, 0.085, 0.0645, 0.2903, 0.6452),
    (INF, 0.05, 0.075, 0.08, 0.08, 0.84),
]


# ─── Reliefs ─────────────────────────────────────────────────────────────────

CPF_RELIEF_CAP = 37740
SRS_LIMITS = {"citizen_pr": 15300, "foreigner": 35700}
CPF_TOP_UP_LIMIT = 8000
SPOUSE_RELIEF = 2000
QUALIFYING_CHILD_RELIEF = 4000
WORKING_MOTHER_RATES = (0.15, 0.20, 0.25)  # 1st, 2nd, 3rd+ child
WORKING_MOTHER_CAP_PER_CHILD = 50000
PARENT_RELIEF = {"none": 0, "not_staying": 5500, "staying": 9000}
MAX_PARENTS = 4
COURSE_FEES_CAP = 5500
TOTAL_RELIEF_CAP = 80000


@dataclass
class SGContributions:
    voluntary_cpf_top_up: float = 0.0
    srs_contribution: float = 0.0


@dataclass
class SGTaxReliefs:
    has_spouse_relief: bool = False
    number_of_children: int = 0
    is_working_mother: bool = False
    parent_relief: str = "none"
    number_of_parents: int = 0
    course_fees: float = 0.0

    def __post_init__(self):
        check_choice("parent_relief", self.parent_relief, PARENT_RELIEF_TYPES)
        self.number_of_children = non_negative(self.number_of_children)
        self.number_of_parents = min(non_negative(self.number_of_parents), MAX_PARENTS)
        self.course_fees = non_negative(self.course_fees)


@dataclass
class SGInputs(CalculatorInputs):
    country: str = "SG"
    residency_type: str = "citizen_pr"
    age: int = 30
    contributions: SGContributions = field(default_factory=SGContributions)
    tax_reliefs: SGTaxReliefs = field(default_factory=SGTaxReliefs)

    def __post_init__(self):
        super().__post_init__()
        check_choice("residency_type", self.residency_type, RESIDENCY_TYPES)
        self.age = non_negative(self.age)


def get_contribution_limits(inputs=None) -> dict[str, ContributionLimit]:
    residency = inputs.residency_type if inputs is not None else "citizen_pr"
    return {
        "voluntary_cpf_top_up": ContributionLimit(
            CPF_TOP_UP_LIMIT,
            "Voluntary CPF Top-up",
            "Tax relief up to S$8,000 for voluntary CPF contributions",
            True,
        ),
        "srs_contribution": ContributionLimit(
            SRS_LIMITS[residency],
            "SRS Contribution",
            "Supplementary Retirement Scheme - fully tax deductible",
            True,
        ),
    }


def get_regions() -> list:
    return []


def default_inputs() -> SGInputs:
    return SGInputs(gross_salary=60000, residency_type="citizen_pr", age=30)


# ─── Calculation ─────────────────────────────────────────────────────────────


def _cpf_rates(age: int):
    for max_age, *rates in CPF_RATES:
        if age <= max_age:
            return rates
    return CPF_RATES[-1][1:]


def calculate_cpf(gross: float, age: int, residency_type: str) -> dict[str, float]:
    """Annual CPF contributions and account allocations."""
    if residency_type == "foreigner":
        return {k: 0.0 for k in ("employee", "employer", "ordinary", "special", "medisave")}

    employee_rate, employer_rate, oa_rate, sa_rate, _ = _cpf_rates(age)
    wage = min(gross / 12, CPF_MONTHLY_CEILING)
    employee = round_half_up(wage * employee_rate, 2)
    employer = round_half_up(wage * employer_rate, 2)
    total = employee + employer
    ordinary = round_half_up(total * oa_rate, 2)
    special = round_half_up(total * sa_rate, 2)
    medisave = total - ordinary - special

    return {
        "employee": round_half_up(employee * 12, 2),
        "employer": round_half_up(employer * 12, 2),
        "ordinary": round_half_up(ordinary * 12, 2),
        "special": round_half_up(special * 12, 2),
        "medisave": round_half_up(medisave * 12, 2),
    }


def earned_income_relief(age: int) -> float:
    if age >= 60:
        return 8000
    if age >= 55:
        return 6000
    return 1000


def working_mother_relief(gross: float, children: int) -> float:
    relief = 0.0
    for i in range(children):
        rate = WORKING_MOTHER_RATES[min(i, len(WORKING_MOTHER_RATES) - 1)]
        relief += min(gross * rate, WORKING_MOTHER_CAP_PER_CHILD)
    return relief


def calculate_reliefs(inputs: SGInputs, cpf_employee: float, c: dict) -> dict[str, float]:
    r = inputs.tax_reliefs
    parents = r.number_of_parents if r.parent_relief != "none" else 0
    reliefs = {
        "earned_income": earned_income_relief(inputs.age),
        "cpf": min(cpf_employee, CPF_RELIEF_CAP),
        "srs": c["srs_contribution"],
        "cpf_top_up": c["voluntary_cpf_top_up"],
        "spouse": SPOUSE_RELIEF if r.has_spouse_relief else 0,
        "qualifying_child": QUALIFYING_CHILD_RELIEF * r.number_of_children,
        "working_mother": (
            working_mother_relief(inputs.gross_salary, r.number_of_children)
            if r.is_working_mother else 0
        ),
        "parent": PARENT_RELIEF[r.parent_relief] * parents,
        "course_fees": min(r.course_fees, COURSE_FEES_CAP),
    }
    return reliefs


def calculate(inputs: SGInputs):
    check_country(inputs, CONFIG.code)
    gross = inputs.gross_salary
    members = ("voluntary_cpf_top_up", "srs_contribution")
    c = normalize_contributions(
        {
            "voluntary_cpf_top_up": inputs.contributions.voluntary_cpf_top_up,
            "srs_contribution": inputs.contributions.srs_contribution,
        },
        get_contribution_limits(inputs),
        [gross_cap(gross, members)],
    )

    cpf = calculate_cpf(gross, inputs.age, inputs.residency_type)
    reliefs = calculate_reliefs(inputs, cpf["employee"], c)
    total_reliefs = min(sum(reliefs.values()), TOTAL_RELIEF_CAP)
    chargeable = max(0.0, gross - total_reliefs)

    income_tax = round_half_up(apply_brackets(chargeable, TAX_BRACKETS), 2)
    if inputs.residency_type == "foreigner":
        income_tax = max(income_tax, round_half_up(gross * NON_RESIDENT_FLAT_RATE, 2))

    taxes = {
        "total_income_tax": income_tax,
        "income_tax": income_tax,
        "cpf_employee": cpf["employee"],
        "cpf_employer": cpf["employer"],
    }

    return build_result(
        CONFIG,
        inputs,
        taxable_income=chargeable,
        taxes=taxes,
        total_tax=income_tax + cpf["employee"],
        voluntary=sum(c.values()),
        breakdown={
            "cpf_ordinary_account": cpf["ordinary"],
            "cpf_special_account": cpf["special"],
            "cpf_medisave_account": cpf["medisave"],
            "cpf_employee_total": cpf["employee"],
            "cpf_employer_total": cpf["employer"],
            "reliefs": reliefs,
            "total_reliefs": total_reliefs,
            "voluntary_contributions": sum(c.values()),
        },
    )


CALCULATOR = CountryCalculator(
    config=CONFIG,
    inputs_type=SGInputs,
    calculate=calculate,
    default_inputs=default_inputs,
    get_regions=get_regions,
    get_contribution_limits=get_contribution_limits,
)
