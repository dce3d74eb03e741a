"""Tests for jurisdiction quality gates."""

from datetime import date
from decimal import Decimal

import pytest

from calculator.state import StateCalculatorRegistry, StateResult, default_registry
from models import JurisdictionConfig, ResidencyType, TaxReturn
from validation import (
    GateCategory,
    GateResult,
    GateSeverity,
    GateViolation,
    run_all_gates,
    validate_cross_state_consistency,
    validate_registry_consistency,
    validate_state_result,
)


def make_result(**overrides) -> StateResult:
    """A balanced full-year result owing $100."""
    fields = dict(
        state_code="CA",
        form_label="CA Form 540",
        residency_type=ResidencyType.FULL_YEAR,
        state_agi=6000000,
        state_taxable_income=5000000,
        state_tax=150000,
        state_credits=10000,
        tax_after_credits=140000,
        state_withholding=130000,
        overpaid=0,
        amount_owed=10000,
    )
    fields.update(overrides)
    return StateResult(**fields)


def gates(result: GateResult):
    return [v.gate for v in result.violations]


class TestRegistryGates:

    def test_compiled_in_modules_are_consistent(self):
        result = validate_registry_consistency(default_registry())

        assert result.passed
        assert result.violations == ()

    def test_code_mismatch(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("XX", 2025, stub_calculator("YY"))

        result = validate_registry_consistency(registry)

        assert not result.passed
        assert gates(result) == ["registry.state-code-mismatch"]
        assert result.violations[0].category == GateCategory.REGISTRY

    def test_year_mismatch(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2026, stub_calculator("A"))

        assert "registry.tax-year-mismatch" in gates(validate_registry_consistency(registry))

    def test_empty_labels_is_warning(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A", labels={}))

        result = validate_registry_consistency(registry)

        assert result.passed
        assert [v.severity for v in result.violations] == [GateSeverity.WARNING]


class TestComputationGates:

    def test_valid_result_passes(self):
        result = validate_state_result(make_result(), JurisdictionConfig(state_code="CA"))

        assert result.passed
        assert result.violations == ()

    def test_code_and_residency_mismatch(self):
        config = JurisdictionConfig(state_code="IL", residency_type=ResidencyType.NONRESIDENT)

        result = validate_state_result(make_result(apportionment_ratio=Decimal("0.5")), config)

        assert "compute.state-code-mismatch" in gates(result)
        assert "compute.residency-mismatch" in gates(result)

    @pytest.mark.parametrize("field,gate", [
        ("state_taxable_income", "compute.negative-taxable-income"),
        ("state_tax", "compute.negative-state-tax"),
        ("state_credits", "compute.negative-credits"),
    ])
    def test_negative_amounts(self, field, gate):
        result = validate_state_result(make_result(**{field: -1}), JurisdictionConfig(state_code="CA"))

        assert not result.passed
        assert gate in gates(result)

    def test_overpaid_and_owed(self):
        result = validate_state_result(
            make_result(overpaid=5000, amount_owed=15000), JurisdictionConfig(state_code="CA")
        )

        assert "compute.overpaid-and-owed" in gates(result)

    @pytest.mark.parametrize("amount_owed,passes", [
        (10000, True),
        (10001, True),  # within a cent
        (10002, False),
    ])
    def test_balance_tolerance(self, amount_owed, passes):
        result = validate_state_result(make_result(amount_owed=amount_owed), JurisdictionConfig(state_code="CA"))

        assert result.passed is passes

    def test_balance_tolerance_configurable(self):
        result = validate_state_result(
            make_result(amount_owed=10001), JurisdictionConfig(state_code="CA"), tolerance=0
        )

        assert gates(result) == ["compute.balance-mismatch"]

    def test_missing_ratio_is_warning(self):
        config = JurisdictionConfig(state_code="CA", residency_type=ResidencyType.NONRESIDENT)

        result = validate_state_result(make_result(residency_type=ResidencyType.NONRESIDENT), config)

        assert result.passed
        assert gates(result) == ["compute.missing-apportionment"]
        assert result.warnings[0].state_code == "CA"

    def test_ratio_out_of_range(self):
        config = JurisdictionConfig(state_code="CA", residency_type=ResidencyType.NONRESIDENT)

        result = validate_state_result(
            make_result(residency_type=ResidencyType.NONRESIDENT, apportionment_ratio=Decimal("1.2")), config
        )

        assert gates(result) == ["compute.invalid-apportionment"]

    def test_part_year_needs_dates(self):
        config = JurisdictionConfig(state_code="CA", residency_type=ResidencyType.PART_YEAR)

        result = validate_state_result(
            make_result(residency_type=ResidencyType.PART_YEAR, apportionment_ratio=Decimal("1")), config
        )

        assert gates(result) == ["compute.missing-residency-dates"]

    def test_part_year_with_date_passes(self):
        config = JurisdictionConfig(
            state_code="CA", residency_type=ResidencyType.PART_YEAR, move_in_date=date(2025, 7, 1)
        )

        result = validate_state_result(
            make_result(residency_type=ResidencyType.PART_YEAR, apportionment_ratio=Decimal("0.5041")), config
        )

        assert result.passed
        assert result.violations == ()

    def test_empty_form_label(self):
        result = validate_state_result(make_result(form_label=""), JurisdictionConfig(state_code="CA"))

        assert gates(result) == ["compute.missing-form-label"]


class TestCrossStateGates:

    @pytest.fixture
    def tax_return(self, make_w2):
        return TaxReturn(
            w2s=(make_w2(state="CA", state_wages=6000000, state_withheld=130000),),
            jurisdictions=(JurisdictionConfig(state_code="CA"), JurisdictionConfig(state_code="IL")),
        )

    def test_missing_result(self, tax_return):
        result = validate_cross_state_consistency(tax_return, [make_result()], 6000000)

        assert not result.passed
        assert gates(result) == ["cross-state.missing-result"]
        assert result.violations[0].state_code == "IL"

    def test_no_income_tax_state_not_expected(self, make_w2):
        tax_return = TaxReturn(
            w2s=(make_w2(state="CA", state_wages=6000000, state_withheld=130000),),
            jurisdictions=(JurisdictionConfig(state_code="CA"), JurisdictionConfig(state_code="TX")),
        )

        assert validate_cross_state_consistency(tax_return, [make_result()], 6000000).passed

    def test_duplicate_codes(self, make_w2):
        tax_return = TaxReturn(
            w2s=(make_w2(state="CA", state_wages=6000000, state_withheld=130000),),
            jurisdictions=(JurisdictionConfig(state_code="CA"), JurisdictionConfig(state_code="ca")),
        )

        result = validate_cross_state_consistency(tax_return, [make_result()], 6000000)

        assert gates(result) == ["cross-state.duplicate-state-codes"]

    def test_withholding_exceeds_w2(self, tax_return):
        results = [make_result(), make_result(state_code="IL", form_label="IL-1040")]

        result = validate_cross_state_consistency(tax_return, results, 6000000)

        assert result.passed
        assert gates(result) == ["cross-state.withholding-exceeds-w2"]

    @pytest.mark.parametrize("state_agi,flagged", [
        (6000000, False),
        (8900000, False),
        (9100000, True),
        (2900000, True),
    ])
    def test_agi_deviation(self, make_w2, state_agi, flagged):
        tax_return = TaxReturn(
            w2s=(make_w2(state="CA", state_wages=6000000, state_withheld=130000),),
            jurisdictions=(JurisdictionConfig(state_code="CA"),),
        )

        result = validate_cross_state_consistency(tax_return, [make_result(state_agi=state_agi)], 6000000)

        assert result.passed
        assert ("cross-state.agi-deviation" in gates(result)) is flagged

    def test_agi_deviation_skips_nonresidents(self, make_w2):
        tax_return = TaxReturn(
            w2s=(make_w2(state="CA", state_wages=6000000, state_withheld=130000),),
            jurisdictions=(JurisdictionConfig(state_code="CA", residency_type=ResidencyType.NONRESIDENT),),
        )
        result = make_result(residency_type=ResidencyType.NONRESIDENT, state_agi=100)

        assert validate_cross_state_consistency(tax_return, [result], 6000000).violations == ()


class TestRunAllGates:

    def test_aggregates_violations(self):
        warning = GateViolation("a", GateCategory.COMPUTATION, GateSeverity.WARNING, "w")
        error = GateViolation("b", GateCategory.CROSS_STATE, GateSeverity.ERROR, "e")

        combined = run_all_gates([
            GateResult(passed=True, violations=(warning,)),
            GateResult(passed=False, violations=(error,)),
        ])

        assert combined.passed is False
        assert combined.violations == (warning, error)
        assert combined.errors == [error]
        assert combined.warnings == [warning]

    def test_warnings_alone_pass(self):
        warning = GateViolation("a", GateCategory.COMPUTATION, GateSeverity.WARNING, "w")

        assert run_all_gates([GateResult(passed=True, violations=(warning,))]).passed

    def test_empty(self):
        assert run_all_gates([]) == GateResult(passed=True, violations=())
