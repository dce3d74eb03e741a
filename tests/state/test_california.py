"""Tests for California Form 540."""

from datetime import date
from decimal import Decimal

import pytest

from calculator.state.configs.state_2025.california import (
    CA_2025,
    CaliforniaCalculator,
    compute_exemption_credits,
    compute_renters_credit,
)
from models import (
    Adjustments,
    DeductionMethod,
    Deductions,
    FilingStatus,
    ItemizedDeductions,
    JurisdictionConfig,
    ResidencyType,
)


@pytest.fixture
def ca():
    return CaliforniaCalculator()


class TestCaliforniaConfig:
    """California configuration."""

    def test_basic_properties(self):
        assert CA_2025.state_code == "CA"
        assert CA_2025.state_name == "California"
        assert CA_2025.form_label == "CA Form 540"
        assert CA_2025.is_flat_tax is False

    @pytest.mark.parametrize("status", ["single", "married_joint", "married_separate", "head_of_household"])
    def test_nine_brackets(self, status):
        brackets = CA_2025.get_brackets(status)

        assert len(brackets) == 9
        assert brackets[0] == (0, 0.01)
        assert brackets[-1][1] == 0.123

    def test_standard_deduction(self):
        assert CA_2025.get_standard_deduction("single") == 570600
        assert CA_2025.get_standard_deduction("married_joint") == 1141200


class TestForm540:
    """Full-year resident returns."""

    def test_single_wage_earner(self, ca, state_wage_return, run_state):
        result = run_state(ca, state_wage_return("CA"))
        detail = result.detail

        assert detail.ca_agi.amount == 6000000
        assert detail.ca_deduction.amount == 570600
        assert detail.ca_taxable_income.amount == 5429400
        assert detail.ca_tax.amount == 179253
        assert detail.exemption_credits.amount == 15300
        assert result.tax_after_credits == 163953
        assert result.state_withholding == 250000
        assert result.overpaid == 86047
        assert result.amount_owed == 0
        assert result.apportionment_ratio is None
        assert result.form_label == "CA Form 540"

    def test_withholding_traces_to_box17(self, ca, state_wage_return, run_state):
        result = run_state(ca, state_wage_return("CA"))

        assert result.detail.state_withholding.inputs == ("w2:w2-1:box17",)

    def test_other_state_withholding_ignored(self, ca, state_wage_return, run_state):
        tax_return = state_wage_return("PA", jurisdictions=(JurisdictionConfig(state_code="CA"),))

        result = run_state(ca, tax_return)

        assert result.state_withholding == 0
        assert result.amount_owed == 163953

    def test_hsa_add_back(self, ca, state_wage_return, run_state):
        tax_return = state_wage_return("CA", adjustments=Adjustments(hsa_deduction=100000))

        result = run_state(ca, tax_return)

        assert result.detail.hsa_add_back.amount == 100000
        assert result.detail.hsa_add_back.inputs == ("adjustments.hsa",)
        assert result.state_agi == 6000000
        assert result.detail.ca_agi.inputs == ("form1040.line11", "scheduleCA.hsaAddBack")

    def test_itemized_excludes_state_income_tax(self, ca, state_wage_return, run_state):
        tax_return = state_wage_return("CA", deductions=Deductions(
            method=DeductionMethod.ITEMIZED,
            itemized=ItemizedDeductions(mortgage_interest=2000000, real_estate_tax=500000,
                                        state_local_income_tax=400000),
        ))

        result = run_state(ca, tax_return)

        assert result.detail.deduction_method == DeductionMethod.ITEMIZED
        assert result.detail.ca_deduction.amount == 2500000
        assert "itemized.realEstateTaxes" in result.detail.ca_deduction.inputs

    def test_mental_health_tax(self, ca, make_w2, run_state):
        from models import TaxReturn
        tax_return = TaxReturn(
            w2s=(make_w2(wages=150000000, withheld=0, state="CA", state_wages=150000000),),
            jurisdictions=(JurisdictionConfig(state_code="CA"),),
        )

        result = run_state(ca, tax_return)

        assert result.detail.mental_health_tax.amount == 494294
        assert result.detail.exemption_credits.amount == 0
        assert result.state_tax == result.detail.ca_tax.amount + 494294

    def test_node_labels_cover_emitted_nodes(self, ca, state_wage_return, run_state):
        tax_return = state_wage_return("CA", adjustments=Adjustments(hsa_deduction=100000))

        result = run_state(ca, tax_return)

        for node_id, _ in ca.collect_traced_values(result):
            assert node_id in ca.node_labels


class TestCredits:

    @pytest.mark.parametrize("status,deps,agi,expected", [
        (FilingStatus.SINGLE, 0, 6000000, 15300),
        (FilingStatus.MARRIED_JOINT, 2, 1000000, 125600),
        (FilingStatus.HEAD_OF_HOUSEHOLD, 1, 1000000, 62800),
        (FilingStatus.SINGLE, 0, 150000000, 0),
    ])
    def test_exemption_credits(self, status, deps, agi, expected):
        assert compute_exemption_credits(status, deps, agi) == expected

    def test_exemption_phase_out_partial(self):
        """One $2,500 step over the threshold removes 6%."""
        assert compute_exemption_credits(FilingStatus.SINGLE, 0, 25220300 + 1) == 15300 - 918

    @pytest.mark.parametrize("excess,expected", [
        (250000, 14382),
        (250001, 13464),
        (2500000, 6120),
        (2500001, 5202),
    ])
    def test_exemption_phase_out_step_boundaries(self, excess, expected):
        """Each started $2,500 step removes $9.18, counted in whole cents."""
        assert compute_exemption_credits(FilingStatus.SINGLE, 0, 25220300 + excess) == expected

    @pytest.mark.parametrize("status,agi,rent_paid,expected", [
        (FilingStatus.SINGLE, 5000000, True, 6000),
        (FilingStatus.SINGLE, 5000000, False, 0),
        (FilingStatus.SINGLE, 5399401, True, 0),
        (FilingStatus.MARRIED_JOINT, 10000000, True, 12000),
    ])
    def test_renters_credit(self, status, agi, rent_paid, expected):
        assert compute_renters_credit(status, agi, rent_paid) == expected


class TestApportionment:
    """Part-year and nonresident returns."""

    def test_part_year_by_days(self, ca, state_wage_return, run_state):
        jurisdiction = JurisdictionConfig(
            state_code="CA", residency_type=ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1)
        )

        result = run_state(ca, state_wage_return("CA", jurisdictions=(jurisdiction,)))

        assert result.apportionment_ratio == Decimal("0.5041")
        assert result.detail.ca_tax.amount == 90361
        assert result.detail.exemption_credits.amount == 7713
        assert result.tax_after_credits == 82648
        assert result.residency_type == ResidencyType.PART_YEAR

    def test_nonresident_no_renters_credit(self, ca, make_w2, run_state):
        from models import TaxReturn
        tax_return = TaxReturn(
            w2s=(
                make_w2(id="ca", wages=2500000, withheld=0, state="CA", state_wages=2500000),
                make_w2(id="nv", wages=2500000, withheld=0),
            ),
            jurisdictions=(
                JurisdictionConfig(state_code="CA", residency_type=ResidencyType.NONRESIDENT, rent_paid=True),
            ),
        )

        result = run_state(ca, tax_return)

        assert result.apportionment_ratio == Decimal("0.5")
        assert result.detail.renters_credit.amount == 0
