"""
Tests for the per-country calculators.

Covers: worked examples per jurisdiction plus the reliefs, regimes and
contribution rules that move the result.
Run with: cd backend && python -m pytest tests/ -v
"""

import sys
from dataclasses import replace
from pathlib import Path

# Ensure backend directory is on path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from countries import us, sg, kr, nl, au, pt, th, hk, tw, uk, de, ca, ch
from countries import id as indonesia


# ═══════════════════════════════════════════════════════════════════════════════
# UNITED STATES
# ═══════════════════════════════════════════════════════════════════════════════


class TestUnitedStates:
    """Federal, state, FICA and SDI."""

    def test_california_single_100k(self):
        """100K single in CA: every component computed and totalled."""
        result = us.calculate(us.default_inputs())
        taxes = result.taxes
        assert taxes["federal_income_tax"] == pytest.approx(13382.0)
        assert taxes["state_income_tax"] == pytest.approx(5230.49)
        assert taxes["social_security"] == pytest.approx(6200.0)
        assert taxes["medicare"] == pytest.approx(1450.0)
        assert taxes["state_disability_insurance"] == pytest.approx(1200.0)
        assert result.total_tax == pytest.approx(27462.49), f"Got {result.total_tax}"
        assert result.net_salary == pytest.approx(100000 - 27462.49)

    def test_no_income_tax_state(self):
        """Washington has no state income tax or SDI."""
        ca_result = us.calculate(us.default_inputs())
        wa_result = us.calculate(us.USInputs(gross_salary=100000, state="WA"))
        assert wa_result.taxes["state_income_tax"] == 0.0
        assert wa_result.net_salary > ca_result.net_salary, (
            f"WA should keep more than CA: WA={wa_result.net_salary}, CA={ca_result.net_salary}"
        )

    def test_social_security_wage_base(self):
        """Social Security stops at the wage base."""
        result = us.calculate(us.USInputs(gross_salary=300000, state="TX"))
        assert result.taxes["social_security"] == pytest.approx(181200 * 0.062)
        assert result.taxes["additional_medicare"] == pytest.approx(100000 * 0.009)

    def test_401k_reduces_federal_taxable(self):
        """Pre-tax 401(k) lowers taxable income and leaves as a voluntary deduction."""
        inputs = us.USInputs(
            gross_salary=100000, contributions=us.USContributions(traditional_401k=10000)
        )
        result = us.calculate(inputs)
        assert result.taxable_income == pytest.approx(100000 - 10000 - 15400)
        assert result.total_deductions == pytest.approx(result.total_tax + 10000)

    def test_contributions_clamped_to_limits(self):
        """Elections above the statutory limits are clamped."""
        inputs = us.USInputs(
            gross_salary=200000,
            contributions=us.USContributions(traditional_401k=50000, roth_ira=20000, hsa=9000),
        )
        c = us.calculate(inputs).breakdown["contributions"]
        assert c == {"traditional_401k": 24000, "hsa": 4400, "roth_ira": 7000}, f"Got {c}"

    def test_head_of_household_pays_less(self):
        single = us.calculate(us.USInputs(gross_salary=80000, state="TX"))
        hoh = us.calculate(us.USInputs(gross_salary=80000, state="TX",
                                       filing_status="head_of_household"))
        assert hoh.total_tax < single.total_tax

    def test_unknown_state_rejected(self):
        with pytest.raises(ValueError, match="state must be one of"):
            us.USInputs(gross_salary=1, state="ZZ")


# ═══════════════════════════════════════════════════════════════════════════════
# SINGAPORE
# ═══════════════════════════════════════════════════════════════════════════════


class TestSingapore:
    """CPF, reliefs and the non-resident floor."""

    def test_citizen_60k(self):
        """Citizen aged 30: 20% CPF, reliefs for CPF and earned income."""
        result = sg.calculate(sg.default_inputs())
        assert result.taxes["cpf_employee"] == pytest.approx(12000)
        assert result.taxable_income == pytest.approx(47000)
        assert result.taxes["income_tax"] == pytest.approx(1040)
        assert result.total_tax == pytest.approx(13040)

    def test_foreigner_no_cpf_flat_floor(self):
        """Foreigners pay no CPF and at least the 24% flat rate."""
        result = sg.calculate(sg.SGInputs(gross_salary=60000, residency_type="foreigner"))
        assert result.taxes["cpf_employee"] == 0.0
        assert result.taxes["income_tax"] == pytest.approx(14400)

    def test_srs_limit_by_residency(self):
        citizen = sg.get_contribution_limits(sg.SGInputs(gross_salary=1))
        foreigner = sg.get_contribution_limits(sg.SGInputs(gross_salary=1, residency_type="foreigner"))
        assert citizen["srs_contribution"].limit == 15300
        assert foreigner["srs_contribution"].limit == 35700

    def test_child_relief_lowers_tax(self):
        base = sg.SGInputs(gross_salary=120000)
        with_kids = replace(base, tax_reliefs=sg.SGTaxReliefs(number_of_children=2))
        assert sg.calculate(with_kids).total_tax < sg.calculate(base).total_tax


# ═══════════════════════════════════════════════════════════════════════════════
# SOUTH KOREA
# ═══════════════════════════════════════════════════════════════════════════════


class TestSouthKorea:
    """Income tax, local tax and social insurance."""

    def test_local_tax_is_ten_percent(self):
        result = kr.calculate(kr.default_inputs())
        assert result.taxes["local_income_tax"] == pytest.approx(
            round(result.taxes["income_tax"] * 0.10), abs=1
        )

    def test_children_lower_tax(self):
        base = kr.default_inputs()
        with_kids = replace(base, tax_reliefs=kr.KRTaxReliefs(number_of_children_under_20=2))
        assert kr.calculate(with_kids).taxes["income_tax"] < kr.calculate(base).taxes["income_tax"]

    def test_pension_floor_applies(self):
        """Low earners pay national pension on the floor amount."""
        insurance = kr.social_insurance(3_000_000)
        assert insurance["national_pension"] == pytest.approx(round(370_000 * 0.045) * 12)

    def test_pension_contribution_earns_credit(self):
        base = kr.default_inputs()
        saving = replace(base, contributions=kr.KRContributions(personal_pension_contribution=3_000_000))
        assert kr.calculate(saving).taxes["income_tax"] < kr.calculate(base).taxes["income_tax"]


# ═══════════════════════════════════════════════════════════════════════════════
# NETHERLANDS / AUSTRALIA / PORTUGAL
# ═══════════════════════════════════════════════════════════════════════════════


class TestNetherlands:
    def test_thirty_percent_ruling(self):
        """The ruling exempts 30% of salary."""
        ruling = nl.calculate(nl.NLInputs(gross_salary=80000, has_thirty_percent_ruling=True))
        assert ruling.taxable_income == pytest.approx(56000)
        assert ruling.total_tax < nl.calculate(nl.NLInputs(gross_salary=80000)).total_tax

    def test_young_children_credit(self):
        base = nl.calculate(nl.NLInputs(gross_salary=55000))
        kids = nl.calculate(nl.NLInputs(gross_salary=55000, has_young_children=True))
        assert kids.total_tax < base.total_tax


class TestAustralia:
    def test_medicare_levy_surcharge(self):
        """Without private cover high earners pay the surcharge."""
        covered = au.calculate(au.AUInputs(gross_salary=150000))
        uncovered = au.calculate(au.AUInputs(gross_salary=150000, has_private_health_insurance=False))
        assert covered.taxes["medicare_levy_surcharge"] == 0.0
        assert uncovered.taxes["medicare_levy_surcharge"] == pytest.approx(150000 * 0.0125)

    def test_non_resident_no_levy(self):
        result = au.calculate(au.AUInputs(gross_salary=100000, residency_type="non_resident"))
        assert result.taxes["medicare_levy"] == 0.0


class TestPortugal:
    def test_nhr_flat_rate(self):
        """NHR 2.0 pays a flat 20% plus social security."""
        result = pt.calculate(pt.PTInputs(gross_salary=35000, residency_type="nhr_2"))
        assert result.taxes["income_tax"] == pytest.approx(7000)
        assert result.taxes["social_security"] == pytest.approx(3850)

    def test_non_resident(self):
        result = pt.calculate(pt.PTInputs(gross_salary=35000, residency_type="non_resident"))
        assert result.taxes["income_tax"] == pytest.approx(8750)
        assert result.taxes["social_security"] == 0.0

    def test_ppr_credit(self):
        """PPR contributions earn a 20% credit, limit by age."""
        assert pt.ppr_limit(30) == 2000
        base = pt.calculate(pt.default_inputs())
        saving = pt.calculate(replace(pt.default_inputs(), contributions=pt.PTContributions(5000)))
        assert base.taxes["total_income_tax"] - saving.taxes["total_income_tax"] == pytest.approx(400)

    def test_dependent_credit(self):
        base = pt.calculate(pt.default_inputs())
        kids = pt.calculate(replace(pt.default_inputs(), number_of_dependents=2))
        assert base.taxes["total_income_tax"] - kids.taxes["total_income_tax"] == pytest.approx(1200)


# ═══════════════════════════════════════════════════════════════════════════════
# THAILAND / HONG KONG
# ═══════════════════════════════════════════════════════════════════════════════


class TestThailand:
    def test_resident_600k(self):
        """600K: 100K expenses, 60K personal, 9K social security allowances."""
        result = th.calculate(th.default_inputs())
        assert result.taxes["social_security"] == pytest.approx(9000)
        assert result.taxable_income == pytest.approx(431000)
        assert result.taxes["income_tax"] == pytest.approx(20600)
        assert result.total_tax == pytest.approx(29600)

    def test_non_resident_flat_floor(self):
        result = th.calculate(th.THInputs(gross_salary=600000, residency_type="non_resident"))
        assert result.taxes["income_tax"] == pytest.approx(90000)

    def test_retirement_funds_share_cap(self):
        """PF, RMF and SSF together never exceed 500K."""
        inputs = th.THInputs(
            gross_salary=3_000_000,
            contributions=th.THContributions(provident_fund=450_000, rmf=500_000, ssf=200_000),
        )
        result = th.calculate(inputs)
        voluntary = result.total_deductions - result.total_tax
        assert voluntary == pytest.approx(500_000), f"Got {voluntary}"

    def test_spouse_income_flag_requires_spouse(self):
        reliefs = th.THTaxReliefs(has_spouse=False, spouse_has_no_income=True)
        assert reliefs.spouse_has_no_income is False


class TestHongKong:
    def test_resident_420k(self):
        """MPF capped at 18K; progressive beats standard rate."""
        result = hk.calculate(hk.default_inputs())
        assert result.taxes["mpf_employee"] == pytest.approx(18000)
        assert result.taxable_income == pytest.approx(270000)
        assert result.taxes["income_tax"] == pytest.approx(27900)

    def test_married_allowance(self):
        inputs = replace(hk.default_inputs(), tax_reliefs=hk.HKTaxReliefs(has_married_allowance=True))
        assert hk.calculate(inputs).taxes["income_tax"] == pytest.approx(7800)

    def test_married_excludes_single_parent(self):
        reliefs = hk.HKTaxReliefs(has_married_allowance=True, has_single_parent_allowance=True)
        assert reliefs.has_single_parent_allowance is False

    def test_non_resident_no_allowances(self):
        inputs = replace(hk.default_inputs(), residency_type="non_resident")
        assert hk.calculate(inputs).taxes["income_tax"] == pytest.approx(50340)

    def test_standard_rate_cap(self):
        """High earners pay at most the standard rate on net income."""
        result = hk.calculate(hk.HKInputs(gross_salary=10_000_000))
        net_income = result.breakdown["net_income"]
        expected = 5_000_000 * 0.15 + (net_income - 5_000_000) * 0.16
        assert result.taxes["income_tax"] == pytest.approx(expected)

    def test_mpf_below_minimum(self):
        assert hk.mandatory_mpf(7000 * 12) == (0.0, 0.0)


# ═══════════════════════════════════════════════════════════════════════════════
# INDONESIA / TAIWAN
# ═══════════════════════════════════════════════════════════════════════════════


class TestIndonesia:
    def test_single_120m(self):
        """Job expense capped at 6M, JHT + JP deducted, PTKP 54M, floored to 1000."""
        result = indonesia.calculate(indonesia.default_inputs())
        assert result.taxable_income == 56_400_000
        assert result.taxes["income_tax"] == 2_820_000
        assert result.taxes["bpjs_health"] == 1_200_000
        assert result.taxes["bpjs_jht"] == 2_400_000
        assert result.taxes["bpjs_jp"] == 1_200_000
        assert result.total_tax == 7_620_000
        assert result.net_salary == 112_380_000

    def test_taxable_floored_to_thousand(self):
        result = indonesia.calculate(indonesia.IDInputs(gross_salary=120_000_999))
        assert result.taxable_income % 1000 == 0

    def test_dependents_capped_at_three(self):
        reliefs = indonesia.IDTaxReliefs(number_of_dependents=5)
        assert indonesia.ptkp(reliefs)["dependents"] == 3 * 4_500_000

    def test_married_with_combined_spouse_income(self):
        reliefs = indonesia.IDTaxReliefs(
            marital_status="married", number_of_dependents=2, spouse_income_combined=True
        )
        result = indonesia.calculate(indonesia.IDInputs(gross_salary=120_000_000, tax_reliefs=reliefs))
        assert result.taxes["income_tax"] == 0

    def test_spouse_flag_cleared_when_single(self):
        reliefs = indonesia.IDTaxReliefs(spouse_income_combined=True)
        assert reliefs.spouse_income_combined is False


class TestTaiwan:
    def test_default_720k(self):
        result = tw.calculate(tw.default_inputs())
        insurance = result.breakdown["social_insurance"]["total"]
        assert insurance == 24912, f"Got {insurance}"
        assert result.taxable_income == pytest.approx(231088)
        assert result.taxes["income_tax"] == 11554

    def test_pension_limit(self):
        assert tw.pension_limit(720_000) == pytest.approx(43200)
        assert tw.get_contribution_limits()["voluntary_pension_contribution"].limit == pytest.approx(108000)

    def test_gold_card_halves_excess(self):
        inputs = tw.TWInputs(gross_salary=10_000_000,
                             tax_reliefs=tw.TWTaxReliefs(is_gold_card_holder=True))
        gold = tw.calculate(inputs).breakdown["gold_card"]
        assert gold["is_applied"]
        assert gold["exemption_amount"] == pytest.approx(
            (gold["taxable_income_before_exemption"] - 3_000_000) / 2
        )


# ═══════════════════════════════════════════════════════════════════════════════
# UNITED KINGDOM
# ═══════════════════════════════════════════════════════════════════════════════


class TestUnitedKingdom:
    def test_default_35k(self):
        result = uk.calculate(uk.default_inputs())
        assert result.taxes["income_tax"] == pytest.approx(4486)
        assert result.taxes["national_insurance"] == pytest.approx(1794.40)
        assert result.net_salary == pytest.approx(28719.60)

    def test_personal_allowance_taper(self):
        assert uk.personal_allowance(110000, True) == (7570, 5000)
        assert uk.personal_allowance(125140, True) == (0, 12570)
        assert uk.personal_allowance(50000, False) == (0.0, 0.0)

    def test_scotland_pays_more_at_50k(self):
        ruk = uk.calculate(uk.UKInputs(gross_salary=50000))
        scotland = uk.calculate(uk.UKInputs(gross_salary=50000, region="scotland"))
        assert scotland.taxes["income_tax"] > ruk.taxes["income_tax"]

    def test_pension_net_cost(self):
        """A basic-rate taxpayer's pension costs 80% of the contribution."""
        inputs = replace(uk.default_inputs(), contributions=uk.UKContributions(5000))
        result = uk.calculate(inputs)
        assert result.total_deductions - result.total_tax == pytest.approx(4000)


# ═══════════════════════════════════════════════════════════════════════════════
# GERMANY
# ═══════════════════════════════════════════════════════════════════════════════


class TestGermany:
    def test_tariff(self):
        """Basic allowance is tax-free; zone 3 is 42% less a constant."""
        assert de.tariff(12348) == 0.0
        assert de.tariff(100000) == 30864.0

    def test_splitting(self):
        assert de.income_tax(80000, True) == 2 * de.tariff(40000)
        single = de.calculate(de.DEInputs(gross_salary=80000))
        married = de.calculate(de.DEInputs(gross_salary=80000, is_married=True))
        assert married.taxes["income_tax"] < single.taxes["income_tax"]

    def test_solidarity_surcharge(self):
        assert de.solidarity_surcharge(15000, "single") == 0.0
        assert de.solidarity_surcharge(100000, "single") == 5500

    def test_church_tax_by_state(self):
        berlin = de.calculate(de.DEInputs(gross_salary=80000, state="BE", is_church_member=True))
        bavaria = de.calculate(de.DEInputs(gross_salary=80000, state="BY", is_church_member=True))
        assert bavaria.taxes["church_tax"] < berlin.taxes["church_tax"]
        assert de.calculate(de.DEInputs(gross_salary=80000)).taxes["church_tax"] == 0.0

    def test_childless_care_surcharge(self):
        base = de.calculate(de.default_inputs())
        childless = de.calculate(replace(de.default_inputs(), is_childless=True))
        assert base.taxes["pension_insurance"] == 5115
        diff = childless.taxes["long_term_care_insurance"] - base.taxes["long_term_care_insurance"]
        assert diff == 440, f"Got {diff}"

    def test_contribution_limits(self):
        limits = de.get_contribution_limits()
        assert limits["occupational_pension"].limit == 8112
        assert limits["riester_contribution"].limit == 2100
        assert limits["ruerup_contribution"].limit == 30826

    def test_ruerup_reduced_by_statutory_pension(self):
        limit = de.get_contribution_limits(de.default_inputs())["ruerup_contribution"].limit
        assert limit == pytest.approx(30826 - 2 * 55000 * 0.093)


# ═══════════════════════════════════════════════════════════════════════════════
# CANADA / SWITZERLAND
# ═══════════════════════════════════════════════════════════════════════════════


class TestCanada:
    def test_ontario_80k(self):
        result = ca.calculate(ca.default_inputs())
        taxes = result.taxes
        assert taxes["cpp_employee"] == pytest.approx(4230.45)
        assert taxes["cpp2_employee"] == pytest.approx(216)
        assert taxes["ei_employee"] == pytest.approx(1123.07)
        assert taxes["qpip_employee"] == 0.0
        assert taxes["federal_income_tax"] == pytest.approx(10292.725)
        assert taxes["provincial_income_tax"] == pytest.approx(4454.5245)

    def test_quebec_premiums(self):
        result = ca.calculate(ca.CAInputs(gross_salary=80000, region="QC"))
        assert result.taxes["ei_employee"] == pytest.approx(895.70)
        assert result.taxes["qpip_employee"] == pytest.approx(68900 * 0.0043)

    def test_federal_bpa_phase_out(self):
        assert ca.federal_bpa(100000) == 16452
        assert ca.federal_bpa(300000) == 14829
        assert 14829 < ca.federal_bpa(220000) < 16452

    def test_rrsp_limit(self):
        limits = ca.get_contribution_limits(ca.CAInputs(gross_salary=100000))
        assert limits["rrsp_contribution"].limit == pytest.approx(18000)
        assert ca.get_contribution_limits()["rrsp_contribution"].limit == 32490


class TestSwitzerland:
    def test_federal_base_tax(self):
        """Schedule rounded down to 5 centimes, capped at 11.5%."""
        assert ch.federal_base_tax(85500, "single") == pytest.approx(1705.65)
        assert ch.federal_base_tax(10_000_000, "single") == pytest.approx(1_150_000)

    def test_social_insurance(self):
        insurance = ch.social_insurance(90000, 35, include_bvg=True)
        assert insurance["ahv_iv_eo"] == pytest.approx(4770)
        assert insurance["alv"] == pytest.approx(990)
        assert insurance["bvg"] == pytest.approx(63540 * 0.10 * 0.5)

    def test_canton_multiplier(self):
        zug = ch.calculate(replace(ch.default_inputs(), canton="ZG"))
        geneva = ch.calculate(replace(ch.default_inputs(), canton="GE"))
        assert zug.total_tax < geneva.total_tax

    def test_married_tariff_lower(self):
        single = ch.calculate(ch.default_inputs())
        married = ch.calculate(replace(ch.default_inputs(), filing_status="married"))
        assert married.total_tax < single.total_tax

    def test_single_parent_insurance_deduction(self):
        """Single parents use the married tariff but the single premium deduction."""
        inputs = replace(ch.default_inputs(), gross_salary=90000,
                         filing_status="single_parent", number_of_children=1)
        result = ch.calculate(inputs)
        married = ch.calculate(replace(inputs, filing_status="married"))
        premiums = result.breakdown["deductions"]["insurance_premiums"]
        assert premiums == 1800 + 700, f"Got {premiums}"
        assert married.breakdown["deductions"]["insurance_premiums"] == 3600 + 700
        assert result.breakdown["federal_base_tax"] >= married.breakdown["federal_base_tax"]

    def test_health_insurance_not_withheld(self):
        with_health = ch.calculate(ch.default_inputs())
        without = ch.calculate(replace(ch.default_inputs(), include_health_insurance=False))
        assert with_health.net_salary == without.net_salary
        assert with_health.breakdown["health_insurance"]["annual_cost"] == 393 * 12

    def test_pillar3a_limit(self):
        assert ch.pillar3a_limit(90000, include_bvg=True) == 7258
        assert ch.pillar3a_limit(90000, include_bvg=False) == pytest.approx(18000)
        assert ch.pillar3a_limit(500000, include_bvg=False) == 36288
