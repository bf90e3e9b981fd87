"""
Calculator Registry
===================
Maps country codes to their calculators and exposes the lookups the API
and the comparison engine use.

Registration happens once at import time, in display order.
"""

from config import get_logger
from contributions import limits_to_dict
from errors import UnsupportedCountry
from models import CalculationResult, CalculatorInputs, CountryCalculator, inputs_from_dict
from countries import us, sg, kr, nl, au, pt, th, hk, tw, uk, de, ca, ch
from countries import id as indonesia

logger = get_logger(__name__)


_CALCULATORS: dict[str, CountryCalculator] = {}


def register(calculator: CountryCalculator) -> None:
    code = calculator.config.code
    if code in _CALCULATORS:
        raise ValueError(f"Calculator for '{code}' is already registered")
    _CALCULATORS[code] = calculator


for _module in (us, sg, kr, nl, au, pt, th, hk, indonesia, tw, uk, de, ca, ch):
    register(_module.CALCULATOR)

logger.info("Registered %d country calculators: %s", len(_CALCULATORS), ", ".join(_CALCULATORS))


# ─── Lookups ─────────────────────────────────────────────────────────────────


def get_calculator(code: str) -> CountryCalculator:
    try:
        return _CALCULATORS[code]
    except KeyError:
        raise UnsupportedCountry(code) from None


def is_country_supported(code: str) -> bool:
    return code in _CALCULATORS


def get_supported_countries() -> list[dict]:
    """[{code, name}] in registration order."""
    return [{"code": code, "name": calc.config.name} for code, calc in _CALCULATORS.items()]


def supported_codes() -> list[str]:
    return list(_CALCULATORS)


def get_country_config(code: str):
    return get_calculator(code).config


def get_default_inputs(code: str) -> CalculatorInputs:
    return get_calculator(code).default_inputs()


def get_regions(code: str) -> list:
    return get_calculator(code).get_regions()


def get_contribution_limits(code: str, inputs=None) -> dict:
    return get_calculator(code).get_contribution_limits(inputs)


def contribution_limits_dict(code: str, inputs=None) -> dict:
    return limits_to_dict(get_contribution_limits(code, inputs))


# ─── Calculation ─────────────────────────────────────────────────────────────


def calculate_net_salary(inputs: CalculatorInputs) -> CalculationResult:
    """Dispatch inputs to the calculator for inputs.country."""
    calculator = get_calculator(inputs.country)
    logger.debug("Calculating %s: gross=%s", inputs.country, inputs.gross_salary)
    return calculator.calculate(inputs)


def build_inputs(code: str, payload: dict) -> CalculatorInputs:
    """
    Build a country's inputs from a JSON payload merged over its defaults.

    A "country" key in the payload, if present, must agree with code.
    """
    calculator = get_calculator(code)
    payload = dict(payload or {})
    country = payload.pop("country", code)
    if country != code:
        raise ValueError(f"country in body ('{country}') does not match '{code}'")
    return inputs_from_dict(calculator.inputs_type, payload, calculator.default_inputs())
