"""
Tests for the shared calculation engine.

Covers: brackets, contributions, models, registry, and the invariants every
country calculator must honour.
Run with: cd backend && python -m pytest tests/ -v
"""

import sys
from dataclasses import replace
from pathlib import Path

# Ensure backend directory is on path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

# ═══════════════════════════════════════════════════════════════════════════════
# BRACKET TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from brackets import (
    INF,
    TaxBracket,
    apply_brackets,
    bracket_breakdown,
    build_brackets,
    floor_to,
    marginal_rate,
    round_half_up,
    validate_brackets,
)
from countries import us, us_states, sg, kr, nl, au, pt, th, hk, tw, uk, ca, ch
from countries import id as indonesia

SIMPLE = build_brackets([(10000, 0.10), (40000, 0.20), (INF, 0.30)])


def all_bracket_tables():
    """Every progressive table shipped with the calculators, by label."""
    tables = {
        "SG": sg.TAX_BRACKETS,
        "KR": kr.TAX_BRACKETS,
        "NL combined": nl.COMBINED_BRACKETS,
        "NL income tax": nl.INCOME_TAX_BRACKETS,
        "AU resident": au.RESIDENT_BRACKETS,
        "AU non-resident": au.NON_RESIDENT_BRACKETS,
        "PT": pt.IRS_BRACKETS,
        "TH": th.TAX_BRACKETS,
        "HK": hk.TAX_BRACKETS,
        "ID": indonesia.TAX_BRACKETS,
        "TW": tw.TAX_BRACKETS,
        "CA federal": ca.FEDERAL_BRACKETS,
    }
    for status, brackets in us.FEDERAL_BRACKETS.items():
        tables[f"US federal {status}"] = brackets
    for code, state in us_states.STATES.items():
        for status, brackets in state.brackets.items():
            tables[f"US {code} {status}"] = brackets
    for region, brackets in uk.BANDS.items():
        tables[f"UK {region}"] = brackets
    for code, province in ca.PROVINCES.items():
        tables[f"CA {code}"] = province.brackets
    for tariff, brackets in ch.FEDERAL_BRACKETS.items():
        tables[f"CH federal {tariff}"] = brackets
    return tables


class TestBrackets:
    """Test progressive bracket construction and application."""

    def test_build_brackets_contiguous(self):
        """Brackets start at 0 and each starts where the previous ends."""
        assert SIMPLE[0] == TaxBracket(0.0, 10000, 0.10)
        assert SIMPLE[1].lower == 10000 and SIMPLE[2].lower == 40000, (
            f"Expected contiguous brackets, got {SIMPLE}"
        )

    def test_apply_brackets_spans_all(self):
        """Tax at 50K = 1000 + 6000 + 3000."""
        tax = apply_brackets(50000, SIMPLE)
        assert tax == pytest.approx(10000.0), f"Expected 10000, got {tax}"

    def test_apply_brackets_zero_and_negative(self):
        """No income means no tax."""
        assert apply_brackets(0, SIMPLE) == 0.0
        assert apply_brackets(-500, SIMPLE) == 0.0

    def test_continuity_at_boundaries(self):
        """Tax is continuous across every bracket boundary."""
        eps = 0.01
        for label, brackets in all_bracket_tables().items():
            for bracket in brackets[:-1]:
                below = apply_brackets(bracket.upper - eps, brackets)
                above = apply_brackets(bracket.upper + eps, brackets)
                next_rate = marginal_rate(bracket.upper, brackets)
                step = bracket.rate * eps + next_rate * eps
                assert above - below == pytest.approx(step, abs=1e-4), (
                    f"{label}: discontinuity at {bracket.upper}"
                )

    def test_non_decreasing(self):
        """Tax never falls as income rises."""
        for label, brackets in all_bracket_tables().items():
            previous = 0.0
            for income in range(0, 2_000_001, 25_000):
                tax = apply_brackets(income, brackets)
                assert tax >= previous, f"{label}: tax fell at {income}"
                previous = tax

    def test_breakdown_sums_to_tax(self):
        """Per-bracket rows add up to the total and the open bracket has max None."""
        rows = bracket_breakdown(50000, SIMPLE)
        assert len(rows) == 3
        assert sum(row["tax"] for row in rows) == pytest.approx(apply_brackets(50000, SIMPLE))
        assert rows[-1]["max"] is None, f"Open bracket should serialise max=None, got {rows[-1]}"
        assert rows[-1]["taxable_amount"] == pytest.approx(10000)

    def test_marginal_rate(self):
        """Marginal rate is the rate of the bracket the next unit falls in."""
        assert marginal_rate(5000, SIMPLE) == 0.10
        assert marginal_rate(10000, SIMPLE) == 0.20
        assert marginal_rate(1e9, SIMPLE) == 0.30


class TestBracketValidation:
    """Test the bracket invariant checker."""

    def test_all_shipped_tables_valid(self):
        """Every shipped table is contiguous, open-ended, with non-decreasing rates."""
        for label, brackets in all_bracket_tables().items():
            try:
                validate_brackets(brackets)
            except ValueError as e:
                pytest.fail(f"{label}: {e}")

    def test_rejects_gap(self):
        """A gap between brackets is rejected."""
        bad = [TaxBracket(0, 100, 0.1), TaxBracket(200, INF, 0.2)]
        with pytest.raises(ValueError, match="gap"):
            validate_brackets(bad)

    def test_rejects_decreasing_rate(self):
        """A falling marginal rate is rejected."""
        bad = build_brackets([(100, 0.2), (INF, 0.1)])
        with pytest.raises(ValueError, match="rate decreases"):
            validate_brackets(bad)

    def test_rejects_closed_top(self):
        """The last bracket must be open-ended."""
        with pytest.raises(ValueError, match="open-ended"):
            validate_brackets(build_brackets([(100, 0.1)]))

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            validate_brackets([])


class TestRounding:
    """Test rounding helpers."""

    def test_round_half_up(self):
        """Halves round up, unlike the builtin round()."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.125, 2) == 0.13
        assert round(2.5) == 2, "Builtin round() is banker's rounding"

    def test_floor_to(self):
        """Floor to a step, tolerating float noise."""
        assert floor_to(56_400_999, 1000) == 56_400_000
        assert floor_to(123.47, 0.05) == pytest.approx(123.45)
        assert floor_to(0.15, 0.05) == pytest.approx(0.15)


# ═══════════════════════════════════════════════════════════════════════════════
# CONTRIBUTION TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from contributions import ContributionLimit, SharedCap, gross_cap, limits_to_dict, normalize_contributions


class TestContributions:
    """Test normalisation of contribution elections."""

    LIMITS = {
        "a": ContributionLimit(100, "A", "", True),
        "b": ContributionLimit(300, "B", "", True),
    }

    def test_individual_limits(self):
        """Elections are clamped to their own limit and at zero."""
        result = normalize_contributions({"a": 250, "b": -10}, self.LIMITS)
        assert result == {"a": 100, "b": 0.0}, f"Got {result}"

    def test_unlimited_kind_only_clamped_at_zero(self):
        result = normalize_contributions({"c": 1e6}, self.LIMITS)
        assert result == {"c": 1e6}

    def test_shared_cap_priority_order(self):
        """Earlier members keep their amount; later ones get what is left."""
        cap = SharedCap("joint", 250, ("a", "b"))
        result = normalize_contributions({"a": 100, "b": 300}, self.LIMITS, [cap])
        assert result == {"a": 100, "b": 150}, f"Got {result}"

    def test_shared_cap_never_exceeded(self):
        """The members of a shared cap never sum above its ceiling."""
        cap = SharedCap("joint", 120, ("b", "a"))
        for a, b in [(0, 0), (100, 300), (50, 50), (100, 10)]:
            result = normalize_contributions({"a": a, "b": b}, self.LIMITS, [cap])
            assert result["a"] + result["b"] <= 120, f"{a}/{b} -> {result}"

    def test_gross_cap(self):
        """Contributions never exceed the salary they come out of."""
        cap = gross_cap(80, ("a", "b"))
        result = normalize_contributions({"a": 100, "b": 300}, self.LIMITS, [cap])
        assert result == {"a": 80, "b": 0}, f"Got {result}"

    def test_thai_retirement_cap(self):
        """Thai PF, RMF and SSF share a 500K ceiling, filled in that order."""
        inputs = th.THInputs(gross_salary=3_000_000)
        result = normalize_contributions(
            {"provident_fund": 450_000, "rmf": 500_000, "ssf": 200_000},
            th.get_contribution_limits(inputs),
            th.SHARED_CAPS,
        )
        assert result == {"provident_fund": 450_000, "rmf": 50_000, "ssf": 0}, f"Got {result}"

    def test_limits_to_dict(self):
        d = limits_to_dict(self.LIMITS)
        assert d["a"] == {"limit": 100, "name": "A", "description": "", "pre_tax": True}


# ═══════════════════════════════════════════════════════════════════════════════
# MODEL TESTS
# ═══════════════════════════════════════════════════════════════════════════════

from models import inputs_from_dict, check_choice


class TestInputsFromDict:
    """Test JSON-style dict to typed inputs conversion."""

    def test_merges_over_base(self):
        """Missing fields keep the base's values, nested objects may be partial."""
        base = us.default_inputs()
        inputs = inputs_from_dict(
            us.USInputs, {"gross_salary": 85000, "contributions": {"hsa": 1000}}, base
        )
        assert inputs.gross_salary == 85000
        assert inputs.state == base.state
        assert inputs.contributions.hsa == 1000
        assert inputs.contributions.hsa_coverage_type == "self"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown field 'salary'"):
            inputs_from_dict(us.USInputs, {"salary": 1}, us.default_inputs())

    def test_wrong_type_rejected(self):
        with pytest.raises(ValueError, match="must be a number"):
            inputs_from_dict(us.USInputs, {"gross_salary": "lots"}, us.default_inputs())
        with pytest.raises(ValueError, match="must be a boolean"):
            inputs_from_dict(nl.NLInputs, {"has_young_children": 1}, nl.default_inputs())

    def test_invalid_choice_rejected(self):
        """Unknown option values raise with the valid options listed."""
        with pytest.raises(ValueError, match="filing_status must be one of"):
            inputs_from_dict(us.USInputs, {"filing_status": "widowed"}, us.default_inputs())

    def test_check_choice_message(self):
        with pytest.raises(ValueError) as exc:
            check_choice("region", "XX", {"a", "b"})
        assert str(exc.value) == "region must be one of ['a', 'b'], got 'XX'"

    def test_non_finite_numbers_rejected(self):
        """NaN and infinities raise ValueError instead of reaching the rounding helpers."""
        with pytest.raises(ValueError, match="gross_salary must be a finite number"):
            us.USInputs(gross_salary=float("inf"))
        with pytest.raises(ValueError, match="gross_salary must be a finite number"):
            inputs_from_dict(us.USInputs, {"gross_salary": float("nan")}, us.default_inputs())
        with pytest.raises(ValueError, match="finite number"):
            inputs_from_dict(us.USInputs, {"contributions": {"traditional_401k": float("inf")}},
                             us.default_inputs())

    def test_negative_salary_clamped(self):
        """Out-of-range numbers are clamped, not rejected."""
        inputs = us.USInputs(gross_salary=-5000)
        assert inputs.gross_salary == 0.0


# ═══════════════════════════════════════════════════════════════════════════════
# REGISTRY TESTS
# ═══════════════════════════════════════════════════════════════════════════════

import registry
from errors import InvalidCountryInput, UnsupportedCountry

EXPECTED_ORDER = ["US", "SG", "KR", "NL", "AU", "PT", "TH", "HK", "ID", "TW", "UK", "DE", "CA", "CH"]


class TestRegistry:
    """Test country registration and dispatch."""

    def test_registration_order(self):
        codes = registry.supported_codes()
        assert codes == EXPECTED_ORDER, f"Got {codes}"

    def test_supported_countries_shape(self):
        countries = registry.get_supported_countries()
        assert countries[0] == {"code": "US", "name": "United States"}
        assert len(countries) == 14

    def test_unknown_country(self):
        """Unknown codes raise UnsupportedCountry, which is a ValueError."""
        assert not registry.is_country_supported("FR")
        with pytest.raises(UnsupportedCountry):
            registry.get_country_config("FR")
        with pytest.raises(ValueError, match="Unsupported country: 'FR'"):
            registry.build_inputs("FR", {})

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            registry.register(us.CALCULATOR)

    def test_mismatched_inputs_rejected(self):
        """A calculator refuses another country's inputs."""
        with pytest.raises(InvalidCountryInput):
            sg.calculate(us.default_inputs())

    def test_build_inputs_country_mismatch(self):
        with pytest.raises(ValueError, match="does not match"):
            registry.build_inputs("US", {"country": "SG"})

    def test_build_inputs_uses_defaults(self):
        inputs = registry.build_inputs("SG", {"gross_salary": 90000})
        assert inputs.gross_salary == 90000
        assert inputs.residency_type == "citizen_pr"

    def test_regions(self):
        us_regions = registry.get_regions("US")
        assert len(us_regions) == 51, f"Expected 50 states + DC, got {len(us_regions)}"
        assert registry.get_regions("SG") == []
        assert {r.code for r in registry.get_regions("CH")} == set(ch.CANTONS)

    def test_default_region_is_listed(self):
        """Countries with regions list their default region."""
        for code in EXPECTED_ORDER:
            config = registry.get_country_config(code)
            if config.supports_regions:
                codes = {r.code for r in registry.get_regions(code)}
                assert config.default_region in codes, f"{code}: {config.default_region} missing"

    def test_contribution_limits_dict(self):
        limits = registry.contribution_limits_dict("US")
        assert limits["traditional_401k"]["limit"] == 24000
        assert registry.contribution_limits_dict("ID") == {}


# ═══════════════════════════════════════════════════════════════════════════════
# CROSS-COUNTRY INVARIANTS
# ═══════════════════════════════════════════════════════════════════════════════

from config import PERIODS_PER_YEAR


@pytest.fixture(params=EXPECTED_ORDER)
def code(request):
    return request.param


class TestCalculatorInvariants:
    """Properties every country calculator must satisfy."""

    def test_zero_gross(self, code):
        """Gross 0 gives net 0 and an effective rate of 0, never NaN."""
        inputs = replace(registry.get_default_inputs(code), gross_salary=0)
        result = registry.calculate_net_salary(inputs)
        assert result.net_salary == pytest.approx(0.0), f"{code}: net {result.net_salary}"
        assert result.effective_tax_rate == 0.0, f"{code}: rate {result.effective_tax_rate}"

    def test_net_plus_deductions_is_gross(self, code):
        """net + total deductions == gross across a range of salaries."""
        default = registry.get_default_inputs(code)
        for factor in (0.5, 1, 2, 5):
            inputs = replace(default, gross_salary=default.gross_salary * factor)
            result = registry.calculate_net_salary(inputs)
            assert result.net_salary + result.total_deductions == pytest.approx(inputs.gross_salary), (
                f"{code} x{factor}: {result.net_salary} + {result.total_deductions}"
            )

    def test_effective_rate_in_range(self, code):
        """Default contribution settings never tax more than the salary."""
        default = registry.get_default_inputs(code)
        for factor in (0.5, 1, 2, 5):
            inputs = replace(default, gross_salary=default.gross_salary * factor)
            result = registry.calculate_net_salary(inputs)
            assert 0.0 <= result.effective_tax_rate <= 1.0, (
                f"{code} x{factor}: effective rate {result.effective_tax_rate:.1%}"
            )

    def test_idempotent(self, code):
        """Same inputs, same output."""
        inputs = registry.get_default_inputs(code)
        first = registry.calculate_net_salary(inputs).to_dict()
        second = registry.calculate_net_salary(inputs).to_dict()
        assert first == second

    def test_per_period(self, code):
        """Per-period figures divide the annual ones by the pay frequency."""
        for frequency, periods in PERIODS_PER_YEAR.items():
            inputs = replace(registry.get_default_inputs(code), pay_frequency=frequency)
            result = registry.calculate_net_salary(inputs)
            assert result.per_period.frequency == frequency
            assert result.per_period.net == pytest.approx(result.net_salary / periods)
            assert result.per_period.gross == pytest.approx(result.gross_salary / periods)

    def test_breakdown_tagged(self, code):
        """The breakdown carries the country code and the currency matches the config."""
        result = registry.calculate_net_salary(registry.get_default_inputs(code))
        config = registry.get_country_config(code)
        assert result.breakdown["type"] == code
        assert result.country == code
        assert result.currency == config.currency.code

    def test_deductions_split(self, code):
        """total_deductions is total_tax plus non-negative voluntary contributions."""
        result = registry.calculate_net_salary(registry.get_default_inputs(code))
        assert result.total_deductions >= result.total_tax - 1e-9
        assert result.total_tax >= 0
