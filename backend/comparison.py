"""
Comparison Engine
=================
Converts one base-currency salary into every supported country's currency,
runs each country's calculator on inputs synthesised from a short
questionnaire, and ranks the results by net pay in the base currency.

Usage:
    fx = FxRates.from_payload({"base": "USD", "rates": {...}})
    output = compare(ComparisonInputs(base_salary=100000), fx)
"""

from dataclasses import asdict, dataclass, field
from typing import Optional

from config import (
    COMPARISON_PAY_FREQUENCY,
    DEFAULT_BASE_CURRENCY,
    DEFAULT_BASELINE_COUNTRY,
    MARITAL_STATUSES,
    RETIREMENT_MODES,
    get_logger,
)
from fx import FxRates
from models import (
    CalculationResult, CalculatorInputs, check_choice, finite_amount, inputs_from_dict, non_negative,
)
from registry import calculate_net_salary, get_calculator, supported_codes
from countries import us, us_states, sg, kr, nl, au, pt, th, hk, tw, uk, de, ca, ch
from countries import id as indonesia

logger = get_logger(__name__)


# ─── Inputs ──────────────────────────────────────────────────────────────────


@dataclass
class ComparisonAssumptions:
    is_resident: bool = True
    spouse_has_no_income: bool = False
    eligible_nl_30_ruling: bool = False
    eligible_pt_nhr2: bool = False
    us_state: str = "CA"
    age: int = 30
    has_young_children: bool = False
    has_private_health_insurance: bool = True
    retirement_contributions: str = "none"

    def __post_init__(self):
        check_choice("us_state", self.us_state, us_states.STATES)
        check_choice("retirement_contributions", self.retirement_contributions, RETIREMENT_MODES)
        self.age = non_negative(self.age)


@dataclass
class ComparisonInputs:
    base_salary: float = 0.0
    base_currency: str = DEFAULT_BASE_CURRENCY
    marital_status: str = "single"
    number_of_children: int = 0
    baseline_country: str = DEFAULT_BASELINE_COUNTRY
    assumptions: ComparisonAssumptions = field(default_factory=ComparisonAssumptions)

    def __post_init__(self):
        self.base_salary = max(0.0, finite_amount("base_salary", self.base_salary))
        self.base_currency = self.base_currency.upper()
        self.number_of_children = non_negative(self.number_of_children)
        check_choice("marital_status", self.marital_status, MARITAL_STATUSES)

    @property
    def is_married(self) -> bool:
        return self.marital_status == "married"

    @property
    def spouse_without_income(self) -> bool:
        return self.is_married and self.assumptions.spouse_has_no_income


def comparison_inputs_from_dict(data: dict) -> ComparisonInputs:
    """Build ComparisonInputs from a JSON object, defaulting missing fields."""
    return inputs_from_dict(ComparisonInputs, data, ComparisonInputs())


# ─── Results ─────────────────────────────────────────────────────────────────


@dataclass
class CountryComparison:
    country: str
    name: str
    currency: str
    rate: float
    gross_local: float
    net_local: float
    net_base: float
    take_home_rate: float
    effective_tax_rate: float
    assumptions: list[str]
    calculation: CalculationResult
    delta_base: float = 0.0
    delta_percent: float = 0.0
    us_state: Optional[str] = None
    us_contributions: Optional[us.USContributions] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ComparisonOutput:
    is_ready: bool
    results: list[CountryComparison] = field(default_factory=list)
    baseline: Optional[CountryComparison] = None
    fx_updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "is_ready": self.is_ready,
            "results": [row.to_dict() for row in self.results],
            "baseline": self.baseline.to_dict() if self.baseline else None,
            "fx_updated_at": self.fx_updated_at,
        }


# ─── Input Builders ──────────────────────────────────────────────────────────
#
# Each builder maps the questionnaire onto one country's inputs and reports
# whether a retirement contribution was actually applied.


def _build_us(q: ComparisonInputs, gross: float, is_max: bool):
    a = q.assumptions
    if q.is_married:
        filing_status = "married_jointly"
    elif q.number_of_children > 0:
        filing_status = "head_of_household"
    else:
        filing_status = "single"
    contributions = us.USContributions(
        traditional_401k=min(us.LIMIT_401K, gross) if is_max else 0.0,
    )
    inputs = us.USInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        state=a.us_state,
        filing_status=filing_status,
        contributions=contributions,
    )
    return inputs, contributions.traditional_401k > 0


def _build_sg(q: ComparisonInputs, gross: float, is_max: bool):
    a = q.assumptions
    residency = "citizen_pr" if a.is_resident else "foreigner"
    srs = min(sg.SRS_LIMITS[residency], gross) if is_max else 0.0
    inputs = sg.SGInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type=residency,
        age=a.age,
        contributions=sg.SGContributions(srs_contribution=srs),
        tax_reliefs=sg.SGTaxReliefs(
            has_spouse_relief=q.spouse_without_income,
            number_of_children=q.number_of_children,
        ),
    )
    return inputs, srs > 0


def _build_kr(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = kr.KRInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type="resident" if q.assumptions.is_resident else "non_resident",
        tax_reliefs=kr.KRTaxReliefs(
            number_of_dependents=1 if q.spouse_without_income else 0,
            number_of_children_under_20=q.number_of_children,
        ),
    )
    return inputs, False


def _build_nl(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = nl.NLInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        has_thirty_percent_ruling=q.assumptions.eligible_nl_30_ruling,
        has_young_children=q.assumptions.has_young_children,
    )
    return inputs, False


def _build_au(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = au.AUInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type="resident" if q.assumptions.is_resident else "non_resident",
        has_private_health_insurance=q.assumptions.has_private_health_insurance,
    )
    return inputs, False


def _build_pt(q: ComparisonInputs, gross: float, is_max: bool):
    a = q.assumptions
    if not a.is_resident:
        residency = "non_resident"
    elif a.eligible_pt_nhr2:
        residency = "nhr_2"
    else:
        residency = "resident"
    ppr = min(pt.ppr_limit(a.age), gross) if is_max and a.is_resident else 0.0
    inputs = pt.PTInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type=residency,
        filing_status="married_jointly" if q.is_married else "single",
        number_of_dependents=q.number_of_children,
        age=a.age,
        contributions=pt.PTContributions(ppr_contribution=ppr),
    )
    return inputs, ppr > 0


def _build_th(q: ComparisonInputs, gross: float, is_max: bool):
    a = q.assumptions
    rate, cap = th.FUND_CAPS["provident_fund"]
    provident_fund = min(gross * rate, cap) if is_max and a.is_resident else 0.0
    inputs = th.THInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type="resident" if a.is_resident else "non_resident",
        contributions=th.THContributions(provident_fund=provident_fund),
        tax_reliefs=th.THTaxReliefs(
            has_spouse=q.is_married,
            spouse_has_no_income=q.spouse_without_income,
            number_of_children=q.number_of_children,
        ),
    )
    return inputs, provident_fund > 0


def _build_hk(q: ComparisonInputs, gross: float, is_max: bool):
    a = q.assumptions
    voluntary = min(hk.VOLUNTARY_MPF_MAX, gross) if is_max and a.is_resident else 0.0
    inputs = hk.HKInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type="resident" if a.is_resident else "non_resident",
        contributions=hk.HKContributions(tax_deductible_voluntary_contributions=voluntary),
        tax_reliefs=hk.HKTaxReliefs(
            has_married_allowance=q.is_married,
            has_single_parent_allowance=not q.is_married and q.number_of_children > 0,
            number_of_children=q.number_of_children,
        ),
    )
    return inputs, voluntary > 0


def _build_id(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = indonesia.IDInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        tax_reliefs=indonesia.IDTaxReliefs(
            marital_status=q.marital_status,
            number_of_dependents=min(q.number_of_children, indonesia.MAX_DEPENDENTS),
            spouse_income_combined=q.spouse_without_income,
        ),
    )
    return inputs, False


def _build_tw(q: ComparisonInputs, gross: float, is_max: bool):
    pension = tw.pension_limit(gross) if is_max else 0.0
    inputs = tw.TWInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        contributions=tw.TWContributions(voluntary_pension_contribution=pension),
        tax_reliefs=tw.TWTaxReliefs(is_married=q.is_married),
    )
    return inputs, pension > 0


def _build_uk(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = uk.UKInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        residency_type="resident" if q.assumptions.is_resident else "non_resident",
        region="rest_of_uk",
    )
    return inputs, False


def _build_de(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = de.DEInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        state="BE",
        is_married=q.is_married,
        is_church_member=False,
        is_childless=q.number_of_children == 0,
    )
    if not is_max:
        return inputs, False

    # Rürup headroom depends on the bAV-reduced pension base, so fill bAV first
    bav = min(de.get_contribution_limits(inputs)["occupational_pension"].limit, gross)
    inputs.contributions = de.DEContributions(occupational_pension=bav)
    limits = de.get_contribution_limits(inputs)
    inputs.contributions = de.DEContributions(
        occupational_pension=bav,
        riester_contribution=min(limits["riester_contribution"].limit, gross),
        ruerup_contribution=min(limits["ruerup_contribution"].limit, gross),
    )
    c = inputs.contributions
    return inputs, c.occupational_pension + c.riester_contribution + c.ruerup_contribution > 0


def _build_ca(q: ComparisonInputs, gross: float, is_max: bool):
    inputs = ca.CAInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        region=ca.CONFIG.default_region,
    )
    if is_max:
        limit = ca.get_contribution_limits(inputs)["rrsp_contribution"].limit
        inputs.contributions = ca.CAContributions(rrsp_contribution=min(limit, gross))
    return inputs, inputs.contributions.rrsp_contribution > 0


def _build_ch(q: ComparisonInputs, gross: float, is_max: bool):
    if q.is_married:
        filing_status = "married"
    elif q.number_of_children > 0:
        filing_status = "single_parent"
    else:
        filing_status = "single"
    pillar3a = min(ch.pillar3a_limit(gross, include_bvg=True), gross) if is_max else 0.0
    inputs = ch.CHInputs(
        gross_salary=gross,
        pay_frequency=COMPARISON_PAY_FREQUENCY,
        filing_status=filing_status,
        canton=ch.CONFIG.default_region,
        age=q.assumptions.age,
        number_of_children=q.number_of_children,
        contributions=ch.CHContributions(pillar3a_contribution=pillar3a),
    )
    return inputs, pillar3a > 0


_INPUT_BUILDERS = {
    "US": _build_us,
    "SG": _build_sg,
    "KR": _build_kr,
    "NL": _build_nl,
    "AU": _build_au,
    "PT": _build_pt,
    "TH": _build_th,
    "HK": _build_hk,
    "ID": _build_id,
    "TW": _build_tw,
    "UK": _build_uk,
    "DE": _build_de,
    "CA": _build_ca,
    "CH": _build_ch,
}

# Countries whose summary states the residency the row was computed under
_RESIDENCY_COUNTRIES = {"HK", "KR", "TH", "AU", "PT", "ID", "DE", "UK", "TW"}


def build_country_inputs(code: str, q: ComparisonInputs, gross_local: float) -> tuple[CalculatorInputs, bool]:
    """Synthesise one country's inputs; returns (inputs, retirement_applied)."""
    builder = _INPUT_BUILDERS[code]
    return builder(q, gross_local, q.assumptions.retirement_contributions == "max")


def build_assumptions(code: str, q: ComparisonInputs, retirement_applied: bool) -> list[str]:
    """Human-readable list of the assumptions applied for one country."""
    a = q.assumptions
    kids = q.number_of_children
    summary = ["Married" if q.is_married else "Single"]
    if kids > 0:
        summary.append(f"{kids} kid{'s' if kids > 1 else ''}")

    if code == "SG":
        summary.append("Citizen/PR" if a.is_resident else "Foreigner")
        summary.append(f"Age {a.age}")
    elif code == "US":
        summary.append(f"State {a.us_state}")
    elif code == "NL":
        summary.append("30% ruling" if a.eligible_nl_30_ruling else "No ruling")
        summary.append("Youngest under 12" if a.has_young_children else "No young children")
    elif code == "PT":
        summary.append("NHR 2.0" if a.eligible_pt_nhr2 else "Standard regime")
        summary.append(f"Age {a.age}")
    elif code == "AU":
        summary.append("Private health" if a.has_private_health_insurance else "No private health")
    elif code == "CA":
        summary.append(f"Province {ca.CONFIG.default_region}")
    elif code == "CH":
        summary.append(f"Canton {ch.CONFIG.default_region}")
        summary.append(f"Age {a.age}")

    if code in _RESIDENCY_COUNTRIES:
        summary.append("Resident" if a.is_resident else "Non-resident")

    if code == "DE":
        summary.append("Married (joint threshold)" if q.is_married else "Single")
        if kids > 0:
            summary.append(f"{kids} child{'ren' if kids > 1 else ''} (no childless surcharge)")

    if code in ("SG", "TH") and q.spouse_without_income:
        summary.append("Spouse no income")
    if code == "HK" and not q.is_married and kids > 0:
        summary.append("Single parent")

    if retirement_applied:
        summary.append("Retirement: max")
    return summary


# ─── Engine ──────────────────────────────────────────────────────────────────


def compare(inputs: ComparisonInputs, fx_rates: Optional[FxRates]) -> ComparisonOutput:
    """
    Rank every supported country by net pay expressed in the base currency.

    Countries without a usable FX rate are left out. Without an FX snapshot
    the output is returned with is_ready False and no rows.
    """
    if fx_rates is None:
        return ComparisonOutput(is_ready=False)

    results = []
    for code in supported_codes():
        config = get_calculator(code).config
        rate = fx_rates.rate_for(config.currency.code)
        if rate is None:
            logger.debug("Skipping %s: no usable FX rate for %s", code, config.currency.code)
            continue

        gross_local = inputs.base_salary * rate
        country_inputs, retirement_applied = build_country_inputs(code, inputs, gross_local)
        calculation = calculate_net_salary(country_inputs)
        net_local = calculation.net_salary

        row = CountryComparison(
            country=code,
            name=config.name,
            currency=config.currency.code,
            rate=rate,
            gross_local=gross_local,
            net_local=net_local,
            net_base=net_local / rate,
            take_home_rate=net_local / gross_local if gross_local > 0 else 0.0,
            effective_tax_rate=calculation.effective_tax_rate,
            assumptions=build_assumptions(code, inputs, retirement_applied),
            calculation=calculation,
        )
        if code == "US":
            row.us_state = country_inputs.state
            row.us_contributions = country_inputs.contributions
        results.append(row)

    results.sort(key=lambda row: row.net_base, reverse=True)

    baseline = next((row for row in results if row.country == inputs.baseline_country), None)
    baseline_net = baseline.net_base if baseline else 0.0
    for row in results:
        row.delta_base = row.net_base - baseline_net if baseline_net else 0.0
        row.delta_percent = row.delta_base / baseline_net if baseline_net else 0.0

    logger.info(
        "Compared %d countries for %.2f %s (baseline %s)",
        len(results), inputs.base_salary, inputs.base_currency,
        baseline.country if baseline else "none",
    )
    return ComparisonOutput(
        is_ready=True,
        results=results,
        baseline=baseline,
        fx_updated_at=fx_rates.updated_at,
    )
