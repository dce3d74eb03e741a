"""Tests for the jurisdiction module registry."""

import pytest

from calculator.state import (
    NO_INCOME_TAX_STATES,
    RegistryError,
    StateCalculatorRegistry,
    default_registry,
    register_state,
)
from calculator.state.configs.state_2025 import (
    CaliforniaCalculator,
    IllinoisCalculator,
    PennsylvaniaCalculator,
)
from provenance import FEDERAL_NODE_LABELS


class TestDefaultRegistry:
    """Compiled-in modules."""

    def test_supported_states(self):
        assert default_registry().get_supported_states(2025) == ["CA", "IL", "PA"]

    @pytest.mark.parametrize("code,cls", [
        ("CA", CaliforniaCalculator),
        ("ca", CaliforniaCalculator),
        ("IL", IllinoisCalculator),
        ("PA", PennsylvaniaCalculator),
    ])
    def test_lookup(self, code, cls):
        assert isinstance(default_registry().get_calculator(code, 2025), cls)

    def test_unknown_code_and_year(self):
        registry = default_registry()

        assert registry.get_calculator("ZZ", 2025) is None
        assert registry.get_calculator("CA", 2019) is None
        assert registry.is_supported("CA", 2025)
        assert not registry.is_supported("CA", 2019)

    def test_no_income_tax_states_unregistered(self):
        registry = default_registry()

        for code in NO_INCOME_TAX_STATES:
            assert not registry.is_supported(code, 2025)

    def test_labels_merge_federal_and_modules(self):
        labels = default_registry().build_node_labels(FEDERAL_NODE_LABELS)

        assert labels["form1040.line11"] == "Adjusted gross income"
        assert labels["form540.caAGI"] == "California adjusted gross income"
        assert labels["il1040.netIncome"] == "Illinois net income"
        assert labels["pa40.totalTaxableIncome"] == "Total PA taxable income"


class TestIsolatedRegistry:
    """Registries built directly, as tests and embedders do."""

    def test_duplicate_registration_rejected(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A"))

        with pytest.raises(RegistryError):
            registry.register("a", 2025, stub_calculator("A"))

    def test_same_code_other_year_allowed(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A"))
        registry.register("A", 2026, stub_calculator("A"))

        assert [(code, year) for code, year, _ in registry.registrations()] == [("A", 2025), ("A", 2026)]

    def test_label_collision_with_base(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A", labels={"form1040.line11": "Clash"}))

        with pytest.raises(RegistryError, match="form1040.line11"):
            registry.build_node_labels(FEDERAL_NODE_LABELS)

    def test_label_collision_between_modules(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A", labels={"shared.node": "A"}))
        registry.register("B", 2025, stub_calculator("B", labels={"shared.node": "B"}))

        with pytest.raises(RegistryError, match="A/2025"):
            registry.build_node_labels()

    def test_labels_rebuilt_after_registration(self, stub_calculator):
        registry = StateCalculatorRegistry()
        registry.register("A", 2025, stub_calculator("A"))
        assert "stubB.tax" not in registry.build_node_labels()

        registry.register("B", 2025, stub_calculator("B"))

        assert "stubB.tax" in registry.build_node_labels()

    def test_returned_labels_are_copies(self, stub_registry):
        labels = stub_registry.build_node_labels()
        labels["stubA.tax"] = "changed"

        assert stub_registry.build_node_labels()["stubA.tax"] == "A tax"

    def test_decorator_targets_given_registry(self, stub_calculator):
        registry = StateCalculatorRegistry()

        @register_state("Q", 2025, registry=registry)
        class QCalculator(stub_calculator):
            def __init__(self):
                super().__init__("Q")

        assert isinstance(registry.get_calculator("Q", 2025), QCalculator)
        assert default_registry().get_calculator("Q", 2025) is None

    def test_clear(self, stub_registry):
        stub_registry.clear()

        assert stub_registry.get_supported_states(2025) == []
