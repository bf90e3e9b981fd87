"""
US State Income Tax Tables
==========================
Brackets, standard deductions / personal exemptions, and state disability
insurance for the 50 states plus DC.

Every state is expressed the same way: a bracket list per filing status and
a deduction per filing status. Flat-tax states have a single open-ended
bracket, no-tax states a single 0% bracket.
"""

from dataclasses import dataclass
from typing import Callable

from brackets import INF, TaxBracket, build_brackets, apply_brackets


FILING_STATUSES = ("single", "married_jointly", "married_separately", "head_of_household")


@dataclass(frozen=True)
class StateTax:
    name: str
    tax_type: str  # "none" | "flat" | "progressive"
    brackets: dict[str, list[TaxBracket]]
    deductions: dict[str, float]
    notes: str = ""


def _fs(single, married_jointly, married_separately=None, head_of_household=None) -> dict:
    """Per-filing-status values; MFS defaults to single, HoH to single."""
    return {
        "single": single,
        "married_jointly": married_jointly,
        "married_separately": single if married_separately is None else married_separately,
        "head_of_household": single if head_of_household is None else head_of_household,
    }


def _same(value) -> dict:
    return {status: value for status in FILING_STATUSES}


def _progressive(name, notes, brackets_by_status, deductions=None) -> StateTax:
    return StateTax(
        name=name,
        tax_type="progressive",
        brackets={s: build_brackets(b) for s, b in brackets_by_status.items()},
        deductions=deductions or _same(0),
        notes=notes,
    )


def _flat(name, rate, deductions=None) -> StateTax:
    return StateTax(
        name=name,
        tax_type="flat",
        brackets=_same(build_brackets([(INF, rate)])),
        deductions=deductions or _same(0),
        notes=f"{rate * 100:g}%",
    )


def _none(name, notes="") -> StateTax:
    return StateTax(
        name=name,
        tax_type="none",
        brackets=_same(build_brackets([(INF, 0.0)])),
        deductions=_same(0),
        notes=notes,
    )


# ─── No Income Tax States ────────────────────────────────────────────────────

_NO_TAX = {
    "AK": _none("Alaska"),
    "FL": _none("Florida"),
    "NV": _none("Nevada"),
    "NH": _none("New Hampshire", "No wage tax"),
    "SD": _none("South Dakota"),
    "TN": _none("Tennessee"),
    "TX": _none("Texas"),
    "WA": _none("Washington"),
    "WY": _none("Wyoming"),
}


# ─── Flat Tax States ─────────────────────────────────────────────────────────

_FLAT = {
    "AZ": _flat("Arizona", 0.025, _fs(15000, 30000, 15000, 22500)),
    "CO": _flat("Colorado", 0.044),
    "GA": _flat("Georgia", 0.0539, _fs(12000, 24000, 12000, 18000)),
    "ID": _flat("Idaho", 0.058),
    "IL": _flat("Illinois", 0.0495),
    "IN": _flat("Indiana", 0.0305),
    "KY": _flat("Kentucky", 0.04, _fs(3160, 6320, 3160, 3160)),
    "MA": _flat("Massachusetts", 0.05),
    "MI": _flat("Michigan", 0.0425),
    "MS": _flat("Mississippi", 0.05),
    "NC": _flat("North Carolina", 0.0525, _fs(13100, 26200, 13100, 19650)),
    "ND": _flat("North Dakota", 0.0195),
    "PA": _flat("Pennsylvania", 0.0307),
    "SC": _flat("South Carolina", 0.064),
    "UT": _flat("Utah", 0.0485),
}


# ─── Progressive States ──────────────────────────────────────────────────────

_CA_SINGLE = [
    (11055, 0.01), (26210, 0.02), (41370, 0.04), (57430, 0.06), (72580, 0.08),
    (370760, 0.093), (444910, 0.103), (741510, 0.113), (1000000, 0.123), (INF, 0.133),
]
_CA_MFJ = [
    (22110, 0.01), (52420, 0.02), (82740, 0.04), (114860, 0.06), (145160, 0.08),
    (741520, 0.093), (889820, 0.103), (1483040, 0.113), (2000000, 0.123), (INF, 0.133),
]
_CA_HOH = [
    (22130, 0.01), (52440, 0.02), (67600, 0.04), (83660, 0.06), (98820, 0.08),
    (504230, 0.093), (605110, 0.103), (1000000, 0.113), (1008460, 0.123), (INF, 0.133),
]

_NY_SINGLE = [
    (8500, 0.04), (11700, 0.045), (13900, 0.0525), (80650, 0.0585), (215400, 0.0625),
    (1077550, 0.0685), (5000000, 0.0965), (25000000, 0.103), (INF, 0.109),
]
_NY_MFJ = [
    (17150, 0.04), (23600, 0.045), (27900, 0.0525), (161550, 0.0585), (323200, 0.0625),
    (2155350, 0.0685), (5000000, 0.0965), (25000000, 0.103), (INF, 0.109),
]
_NY_HOH = [
    (12800, 0.04), (17650, 0.045), (20900, 0.0525), (107650, 0.0585), (269300, 0.0625),
    (1616450, 0.0685), (5000000, 0.0965), (25000000, 0.103), (INF, 0.109),
]

_NJ_SINGLE = [
    (20000, 0.014), (35000, 0.0175), (40000, 0.035), (75000, 0.05525),
    (500000, 0.0637), (1000000, 0.0897), (INF, 0.1075),
]
_NJ_JOINT = [
    (20000, 0.014), (50000, 0.0175), (70000, 0.0245), (80000, 0.035),
    (150000, 0.05525), (500000, 0.0637), (1000000, 0.0897), (INF, 0.1075),
]

_HI_SINGLE = [
    (2400, 0.014), (4800, 0.032), (9600, 0.055), (14400, 0.064), (19200, 0.068),
    (24000, 0.072), (36000, 0.076), (48000, 0.079), (150000, 0.0825),
    (175000, 0.09), (200000, 0.10), (INF, 0.11),
]
_HI_MFJ = [
    (4800, 0.014), (9600, 0.032), (19200, 0.055), (28800, 0.064), (38400, 0.068),
    (48000, 0.072), (72000, 0.076), (96000, 0.079), (300000, 0.0825),
    (350000, 0.09), (400000, 0.10), (INF, 0.11),
]
_HI_HOH = [
    (3600, 0.014), (7200, 0.032), (14400, 0.055), (21600, 0.064), (28800, 0.068),
    (36000, 0.072), (54000, 0.076), (72000, 0.079), (225000, 0.0825),
    (262500, 0.09), (300000, 0.10), (INF, 0.11),
]

_PROGRESSIVE = {
    "AL": _progressive(
        "Alabama", "2-5%",
        _fs([(500, 0.02), (3000, 0.04), (INF, 0.05)],
            [(1000, 0.02), (6000, 0.04), (INF, 0.05)]),
        _fs(3000, 8500, 4250, 5200),
    ),
    "AR": _progressive(
        "Arkansas", "2-3.9%",
        _same([(5100, 0.02), (INF, 0.039)]),
        _fs(2340, 4680, 2340, 2340),
    ),
    "CA": _progressive(
        "California", "1-13.3%",
        _fs(_CA_SINGLE, _CA_MFJ, _CA_SINGLE, _CA_HOH),
        _fs(5540, 11080, 5540, 11080),
    ),
    "CT": _progressive(
        "Connecticut", "3-6.99%",
        _fs([(10000, 0.03), (50000, 0.05), (100000, 0.055), (200000, 0.06),
             (250000, 0.065), (500000, 0.069), (INF, 0.0699)],
            [(20000, 0.03), (100000, 0.05), (200000, 0.055), (400000, 0.06),
             (500000, 0.065), (1000000, 0.069), (INF, 0.0699)],
            None,
            [(16000, 0.03), (80000, 0.05), (160000, 0.055), (320000, 0.06),
             (400000, 0.065), (800000, 0.069), (INF, 0.0699)]),
        _fs(15000, 24000, 12000, 19000),
    ),
    "DC": _progressive(
        "District of Columbia", "4-10.75%",
        _same([(10000, 0.04), (40000, 0.06), (60000, 0.065), (250000, 0.085),
               (500000, 0.0925), (1000000, 0.0975), (INF, 0.1075)]),
        _fs(14600, 29200, 14600, 21900),
    ),
    "DE": _progressive(
        "Delaware", "2.2-6.6%",
        _same([(2000, 0.0), (5000, 0.022), (10000, 0.039), (20000, 0.048),
               (25000, 0.052), (60000, 0.0555), (INF, 0.066)]),
        _fs(3250, 6500, 3250, 3250),
    ),
    "HI": _progressive(
        "Hawaii", "1.4-11%",
        _fs(_HI_SINGLE, _HI_MFJ, _HI_SINGLE, _HI_HOH),
        _fs(2200, 4400, 2200, 3212),
    ),
    "IA": _progressive(
        "Iowa", "4.4-5.7%",
        _fs([(6210, 0.044), (31050, 0.0482), (INF, 0.057)],
            [(12420, 0.044), (62100, 0.0482), (INF, 0.057)]),
        _fs(2210, 5450, 2210, 5450),
    ),
    "KS": _progressive(
        "Kansas", "3.1-5.7%",
        _fs([(15000, 0.031), (30000, 0.0525), (INF, 0.057)],
            [(30000, 0.031), (60000, 0.0525), (INF, 0.057)]),
        _fs(3500, 8000, 4000, 6000),
    ),
    "LA": _progressive(
        "Louisiana", "1.85-4.25%",
        _fs([(12500, 0.0185), (50000, 0.035), (INF, 0.0425)],
            [(25000, 0.0185), (100000, 0.035), (INF, 0.0425)]),
        _fs(4500, 9000, 4500, 4500),
    ),
    "ME": _progressive(
        "Maine", "5.8-7.15%",
        _fs([(26050, 0.058), (61600, 0.0675), (INF, 0.0715)],
            [(52100, 0.058), (123250, 0.0675), (INF, 0.0715)],
            None,
            [(39100, 0.058), (92450, 0.0675), (INF, 0.0715)]),
        _fs(14600, 29200, 14600, 21900),
    ),
    "MD": _progressive(
        "Maryland", "2-5.75%",
        _fs([(1000, 0.02), (2000, 0.03), (3000, 0.04), (100000, 0.0475),
             (125000, 0.05), (150000, 0.0525), (250000, 0.055), (INF, 0.0575)],
            [(1000, 0.02), (2000, 0.03), (3000, 0.04), (150000, 0.0475),
             (175000, 0.05), (225000, 0.0525), (300000, 0.055), (INF, 0.0575)],
            None,
            [(1000, 0.02), (2000, 0.03), (3000, 0.04), (150000, 0.0475),
             (175000, 0.05), (225000, 0.0525), (300000, 0.055), (INF, 0.0575)]),
        _fs(2550, 5150, 2550, 5150),
    ),
    "MN": _progressive(
        "Minnesota", "5.35-9.85%",
        _fs([(31690, 0.0535), (104090, 0.068), (193240, 0.0785), (INF, 0.0985)],
            [(46330, 0.0535), (184040, 0.068), (321450, 0.0785), (INF, 0.0985)],
            [(23165, 0.0535), (92020, 0.068), (160725, 0.0785), (INF, 0.0985)],
            [(39010, 0.0535), (156370, 0.068), (256880, 0.0785), (INF, 0.0985)]),
        _fs(14575, 29150, 14575, 21900),
    ),
    "MO": _progressive(
        "Missouri", "2-4.8%",
        _same([(1207, 0.0), (2414, 0.02), (3621, 0.025), (4828, 0.03),
               (6035, 0.035), (7242, 0.04), (8449, 0.045), (INF, 0.048)]),
        _fs(14600, 29200, 14600, 21900),
    ),
    "MT": _progressive(
        "Montana", "4.7-5.9%",
        _fs([(20500, 0.047), (INF, 0.059)],
            [(41000, 0.047), (INF, 0.059)]),
        _fs(5540, 11080, 5540, 8310),
    ),
    "NE": _progressive(
        "Nebraska", "2.46-5.84%",
        _fs([(3700, 0.0246), (22170, 0.0351), (35730, 0.0501), (INF, 0.0584)],
            [(7390, 0.0246), (44350, 0.0351), (71460, 0.0501), (INF, 0.0584)],
            None,
            [(6620, 0.0246), (33090, 0.0351), (53600, 0.0501), (INF, 0.0584)]),
        _fs(7900, 15800, 7900, 11600),
    ),
    "NJ": _progressive(
        "New Jersey", "1.4-10.75%",
        _fs(_NJ_SINGLE, _NJ_JOINT, _NJ_SINGLE, _NJ_JOINT),
        _fs(1000, 2000, 1000, 1500),
    ),
    "NM": _progressive(
        "New Mexico", "1.7-5.9%",
        _fs([(5500, 0.017), (11000, 0.032), (16000, 0.047), (210000, 0.049), (INF, 0.059)],
            [(8000, 0.017), (16000, 0.032), (24000, 0.047), (315000, 0.049), (INF, 0.059)],
            [(4000, 0.017), (8000, 0.032), (12000, 0.047), (157500, 0.049), (INF, 0.059)],
            [(8000, 0.017), (16000, 0.032), (24000, 0.047), (315000, 0.049), (INF, 0.059)]),
        _fs(14600, 29200, 14600, 21900),
    ),
    "NY": _progressive(
        "New York", "4-10.9%",
        _fs(_NY_SINGLE, _NY_MFJ, _NY_SINGLE, _NY_HOH),
        _fs(8000, 16050, 8000, 11200),
    ),
    "OH": _progressive(
        "Ohio", "0-3.5%",
        _same([(26050, 0.0), (100000, 0.0275), (INF, 0.035)]),
        _fs(2400, 4800, 2400, 2400),
    ),
    "OK": _progressive(
        "Oklahoma", "0.25-4.75%",
        _fs([(1000, 0.0025), (2500, 0.0075), (3750, 0.0175), (4900, 0.0275),
             (7200, 0.0375), (INF, 0.0475)],
            [(2000, 0.0025), (5000, 0.0075), (7500, 0.0175), (9800, 0.0275),
             (12200, 0.0375), (INF, 0.0475)],
            None,
            [(2000, 0.0025), (5000, 0.0075), (7500, 0.0175), (9800, 0.0275),
             (12200, 0.0375), (INF, 0.0475)]),
        _fs(6350, 12700, 6350, 9350),
    ),
    "OR": _progressive(
        "Oregon", "4.75-9.9%",
        _fs([(4300, 0.0475), (10750, 0.0675), (125000, 0.0875), (INF, 0.099)],
            [(8600, 0.0475), (21500, 0.0675), (250000, 0.0875), (INF, 0.099)],
            None,
            [(8600, 0.0475), (21500, 0.0675), (250000, 0.0875), (INF, 0.099)]),
        _fs(2605, 5210, 2605, 4195),
    ),
    "RI": _progressive(
        "Rhode Island", "3.75-5.99%",
        _same([(77450, 0.0375), (176050, 0.0475), (INF, 0.0599)]),
        _fs(10550, 21100, 10550, 15825),
    ),
    "VA": _progressive(
        "Virginia", "2-5.75%",
        _same([(3000, 0.02), (5000, 0.03), (17000, 0.05), (INF, 0.0575)]),
        _fs(8500, 17000, 8500, 8500),
    ),
    "VT": _progressive(
        "Vermont", "3.35-8.75%",
        _fs([(45400, 0.0335), (110050, 0.066), (229550, 0.076), (INF, 0.0875)],
            [(75850, 0.0335), (183400, 0.066), (279450, 0.076), (INF, 0.0875)],
            [(37925, 0.0335), (91700, 0.066), (139725, 0.076), (INF, 0.0875)],
            [(60700, 0.0335), (156700, 0.066), (254450, 0.076), (INF, 0.0875)]),
        _fs(7000, 15700, 7850, 11600),
    ),
    "WI": _progressive(
        "Wisconsin", "3.5-7.65%",
        _fs([(14320, 0.035), (28640, 0.044), (315310, 0.053), (INF, 0.0765)],
            [(19090, 0.035), (38190, 0.044), (420420, 0.053), (INF, 0.0765)],
            [(9545, 0.035), (19095, 0.044), (210210, 0.053), (INF, 0.0765)]),
        _fs(13230, 24480, 11510, 16290),
    ),
    "WV": _progressive(
        "West Virginia", "2.36-5.12%",
        _same([(10000, 0.0236), (25000, 0.0315), (40000, 0.0354), (60000, 0.0472),
               (INF, 0.0512)]),
        _fs(2000, 4000, 2000, 2000),
    ),
}

STATES: dict[str, StateTax] = {**_NO_TAX, **_FLAT, **_PROGRESSIVE}


# ─── State Disability Insurance ──────────────────────────────────────────────


def _sdi_ca(gross: float) -> float:
    return gross * 0.012


def _sdi_ny(gross: float) -> float:
    # DBL capped at $31.20/yr plus Paid Family Leave
    dbl = min(gross * 0.005, 31.20)
    pfl = min(gross, 91830) * 0.00373
    return dbl + pfl


def _sdi_nj(gross: float) -> float:
    return min(gross, 165800) * 0.006


def _sdi_hi(gross: float) -> float:
    return min(gross, 65600) * 0.005


def _sdi_ri(gross: float) -> float:
    return min(gross, 89400) * 0.012


_STATE_SDI_FN: dict[str, Callable[[float], float]] = {
    "CA": _sdi_ca,
    "NY": _sdi_ny,
    "NJ": _sdi_nj,
    "HI": _sdi_hi,
    "RI": _sdi_ri,
}


# ─── Public API ──────────────────────────────────────────────────────────────


def state_taxable_income(state: str, gross: float, pre_tax: float, filing_status: str) -> float:
    return max(0.0, gross - pre_tax - STATES[state].deductions[filing_status])


def calculate_state_tax(state: str, taxable_income: float, filing_status: str) -> float:
    return apply_brackets(taxable_income, STATES[state].brackets[filing_status])


def calculate_sdi(state: str, gross: float) -> float:
    sdi_fn = _STATE_SDI_FN.get(state)
    return sdi_fn(gross) if sdi_fn else 0.0
