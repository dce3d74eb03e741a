"""Tests for input models, traced values and cent arithmetic."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from calculator.decimal_math import apply_rate, clamp_ratio, format_cents, ratio, to_cents
from models import (
    ComputedSource,
    DocumentSource,
    FilingStatus,
    Form1099INT,
    JurisdictionConfig,
    ResidencyType,
    TaxReturn,
    TracedValue,
    UserEntrySource,
    W2,
    cents,
    dollars,
    iter_traced_values,
    traced_from_computation,
    traced_from_document,
    traced_from_user_entry,
)


class TestTracedValue:

    def test_document_value_is_leaf(self):
        value = traced_from_document(6000000, "W-2", "w2-1", "box1", "Wages")

        assert value.is_leaf
        assert value.inputs == ()
        assert value.source == DocumentSource("W-2", "w2-1", "box1", "Wages")

    def test_computed_value_keeps_input_order(self):
        value = traced_from_computation(10, "form1040.line9", ["b", "a", "c"])

        assert not value.is_leaf
        assert value.inputs == ("b", "a", "c")
        assert isinstance(value.source, ComputedSource)

    def test_user_entry(self):
        value = traced_from_user_entry(50000, "estimatedPayments.q1")

        assert value.is_leaf
        assert isinstance(value.source, UserEntrySource)

    @pytest.mark.parametrize("amount", [100.5, "100", Decimal("1"), True])
    def test_amount_must_be_integer_cents(self, amount):
        with pytest.raises(TypeError):
            TracedValue(amount=amount, source=ComputedSource("x"))

    @pytest.mark.parametrize("confidence", [-0.1, 1.5])
    def test_confidence_range(self, confidence):
        with pytest.raises(ValueError, match="confidence"):
            TracedValue(amount=1, source=ComputedSource("x"), confidence=confidence)

    def test_unknown_source_rejected(self):
        with pytest.raises(TypeError, match="source"):
            TracedValue(amount=1, source="w2")

    def test_frozen(self):
        value = traced_from_computation(1, "x")

        with pytest.raises(AttributeError):
            value.amount = 2

    def test_iter_walks_nested_records(self):
        a = traced_from_computation(1, "a")
        b = traced_from_computation(2, "b")

        assert list(iter_traced_values((a, [b], 3, None))) == [a, b]


class TestCents:

    @pytest.mark.parametrize("value,expected", [
        (100.10, 10010),
        ("-50.5", -5050),
        (Decimal("0.005"), 1),
        (0, 0),
    ])
    def test_cents(self, value, expected):
        assert cents(value) == expected

    def test_dollars(self):
        assert dollars(123456) == Decimal("1234.56")

    @pytest.mark.parametrize("amount,expected", [
        (123456, "$1,234.56"),
        (-5000, "-$50.00"),
        (5, "$0.05"),
        (0, "$0.00"),
        (100000000, "$1,000,000.00"),
    ])
    def test_format_cents(self, amount, expected):
        assert format_cents(amount) == expected

    def test_apply_rate_rounds_half_up(self):
        assert apply_rate(123457, 0.22) == 27161
        assert apply_rate(5, Decimal("0.5")) == 3
        assert to_cents(Decimal("-123.5")) == -124

    def test_ratio(self):
        assert ratio(181, 365) == Decimal("0.4959")
        assert ratio(10, 0) == Decimal("0")
        assert clamp_ratio(Decimal("1.2")) == Decimal("1")
        assert clamp_ratio(Decimal("-0.1")) == Decimal("0")


class TestDocuments:

    def test_w2_state_uppercased(self):
        w2 = W2(id="w", employer_name="Acme", box15_state="ca")

        assert w2.box15_state == "CA"

    def test_w2_empty_state_is_none(self):
        assert W2(id="w", employer_name="Acme", box15_state="").box15_state is None

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            W2(id="w", employer_name="Acme", box1=-1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            Form1099INT(id="i", payer_name="Bank", box99=1)

    def test_documents_are_frozen(self):
        w2 = W2(id="w", employer_name="Acme")

        with pytest.raises(ValidationError):
            w2.box1 = 100


class TestJurisdictionConfig:

    def test_code_uppercased(self):
        assert JurisdictionConfig(state_code="pa").state_code == "PA"

    def test_defaults_to_full_year(self):
        config = JurisdictionConfig(state_code="CA")

        assert config.residency_type == ResidencyType.FULL_YEAR
        assert config.rent_paid is False

    def test_move_out_before_move_in_rejected(self):
        with pytest.raises(ValidationError, match="move_out_date"):
            JurisdictionConfig(
                state_code="CA",
                residency_type=ResidencyType.PART_YEAR,
                move_in_date=date(2025, 7, 1),
                move_out_date=date(2025, 3, 1),
            )

    def test_empty_code_rejected(self):
        with pytest.raises(ValidationError):
            JurisdictionConfig(state_code="")


class TestTaxReturn:

    def test_duplicate_document_ids_rejected(self, make_w2):
        with pytest.raises(ValidationError, match="Duplicate document id 'w2-1'"):
            TaxReturn(w2s=(make_w2(), make_w2()))

    def test_same_id_in_different_collections_allowed(self, make_w2):
        tax_return = TaxReturn(
            w2s=(make_w2(id="doc-1"),),
            form1099_ints=(Form1099INT(id="doc-1", payer_name="Bank"),),
        )

        assert len(tax_return.w2s) == 1

    @pytest.mark.parametrize("status,dependents,expected", [
        (FilingStatus.SINGLE, 0, 1),
        (FilingStatus.MARRIED_JOINT, 0, 2),
        (FilingStatus.HEAD_OF_HOUSEHOLD, 2, 3),
    ])
    def test_exemption_count(self, status, dependents, expected):
        from models import Dependent
        tax_return = TaxReturn(
            filing_status=status,
            dependents=tuple(Dependent(relationship="son", age=4) for _ in range(dependents)),
        )

        assert tax_return.exemption_count == expected

    def test_model_copy_leaves_original(self, single_wage_return):
        changed = single_wage_return.model_copy(update={"filing_status": FilingStatus.MARRIED_SEPARATE})

        assert single_wage_return.filing_status == FilingStatus.SINGLE
        assert changed.filing_status == FilingStatus.MARRIED_SEPARATE
