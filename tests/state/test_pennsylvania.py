"""Tests for Pennsylvania PA-40."""

from datetime import date
from decimal import Decimal

import pytest

from calculator.state.configs.state_2025.pennsylvania import PA_2025, PennsylvaniaCalculator
from models import (
    CapitalTransaction,
    Form1099DIV,
    Form1099INT,
    Form8949Category,
    JurisdictionConfig,
    ResidencyType,
    ScheduleEProperty,
    TaxReturn,
)


@pytest.fixture
def pa():
    return PennsylvaniaCalculator()


class TestPA40:
    """Income classes and the flat rate."""

    def test_config(self):
        assert PA_2025.flat_rate == 0.0307
        assert PA_2025.form_label == "PA-40"

    def test_compensation_from_pa_w2(self, pa, state_wage_return, run_state):
        result = run_state(pa, state_wage_return("PA", state_withheld=184200))
        detail = result.detail

        assert detail.compensation.amount == 6000000
        assert detail.compensation.inputs == ("w2:w2-1:box16",)
        assert detail.tax.amount == 184200
        assert result.overpaid == 0
        assert result.amount_owed == 0
        assert result.apportionment_ratio is None

    def test_non_pa_w2_uses_box1_for_residents(self, pa, make_w2, run_state):
        tax_return = TaxReturn(
            w2s=(make_w2(id="nj", state="NJ", state_wages=6000000),),
            jurisdictions=(JurisdictionConfig(state_code="PA"),),
        )

        result = run_state(pa, tax_return)

        assert result.detail.compensation.inputs == ("w2:nj:box1",)
        assert result.detail.compensation.amount == 6000000

    def test_interest_includes_tax_exempt(self, pa, state_wage_return, run_state):
        tax_return = state_wage_return(
            "PA",
            form1099_ints=(Form1099INT(id="i1", payer_name="Bank", box1=50000, box8=10000),),
            form1099_divs=(Form1099DIV(id="d1", payer_name="Fund", box1a=30000, box2a=7000),),
        )

        result = run_state(pa, tax_return)

        assert result.detail.interest.amount == 60000
        assert result.detail.interest.inputs == ("1099int:i1:box1", "1099int:i1:box8")
        assert result.detail.dividends.amount == 37000
        assert result.detail.dividends.inputs == ("1099div:d1:box1a", "1099div:d1:box2a")

    def test_capital_loss_does_not_offset_wages(self, pa, state_wage_return, run_state):
        tax_return = state_wage_return(
            "PA",
            capital_transactions=(
                CapitalTransaction(id="t1", proceeds=100000, adjusted_basis=900000, category=Form8949Category.A),
            ),
        )

        result = run_state(pa, tax_return)

        assert result.detail.net_gains.amount == 0
        assert result.detail.net_gains.inputs != ()
        assert result.state_taxable_income == 6000000
        assert result.state_tax == 184200

    def test_rental_income_class(self, pa, state_wage_return, run_state):
        tax_return = state_wage_return(
            "PA", schedule_e_properties=(ScheduleEProperty(id="p1", rents_received=1200000, repairs=200000),),
        )

        result = run_state(pa, tax_return)

        assert result.detail.rents_royalties.amount == 1000000
        assert result.state_taxable_income == 7000000

    def test_node_labels_cover_emitted_nodes(self, pa, state_wage_return, run_state):
        result = run_state(pa, state_wage_return("PA"))

        for node_id, _ in pa.collect_traced_values(result):
            assert node_id in pa.node_labels


class TestResidency:

    def test_nonresident_taxes_pa_source_compensation_only(self, pa, make_w2, run_state):
        tax_return = TaxReturn(
            w2s=(
                make_w2(id="pa", wages=3000000, withheld=0, state="PA", state_wages=3000000),
                make_w2(id="ny", wages=3000000, withheld=0),
            ),
            form1099_ints=(Form1099INT(id="i1", payer_name="Bank", box1=50000),),
            jurisdictions=(JurisdictionConfig(state_code="PA", residency_type=ResidencyType.NONRESIDENT),),
        )

        result = run_state(pa, tax_return)

        assert result.apportionment_ratio == Decimal("1")
        assert result.detail.compensation.amount == 3000000
        assert result.detail.interest.amount == 0
        assert result.state_tax == 92100

    def test_part_year_apportions_tax(self, pa, state_wage_return, run_state):
        jurisdiction = JurisdictionConfig(
            state_code="PA", residency_type=ResidencyType.PART_YEAR, move_out_date=date(2025, 6, 30)
        )

        result = run_state(pa, state_wage_return("PA", jurisdictions=(jurisdiction,)))

        assert result.apportionment_ratio == Decimal("0.4959")
        assert result.detail.tax.amount == 91345
        assert result.detail.tax.source.description == "apportioned at 0.4959"
