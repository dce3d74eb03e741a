"""State module registry for code-based lookup."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Optional, Type

from calculator.state.base_state_calculator import BaseStateCalculator

logger = logging.getLogger(__name__)


# States without income tax
NO_INCOME_TAX_STATES = frozenset({
    "AK",  # Alaska
    "FL",  # Florida
    "NV",  # Nevada
    "SD",  # South Dakota
    "TX",  # Texas
    "WA",  # Washington
    "WY",  # Wyoming
    "TN",  # Tennessee (no tax on wages)
    "NH",  # New Hampshire (no tax on wages)
})


class RegistryError(Exception):
    """Duplicate registration or node-label collision."""


class StateCalculatorRegistry:
    """
    Registry for state tax modules.

    Modules register per (state code, tax year). Registration is static:
    the compiled-in modules under ``calculator.state.configs`` register
    themselves on import through ``register_state``.

    Tests build isolated registries by instantiating this class directly.
    """

    def __init__(self):
        # Storage: state_code -> tax_year -> calculator instance
        self._calculators: Dict[str, Dict[int, BaseStateCalculator]] = {}
        self._labels: Optional[Dict[str, str]] = None
        self._labels_key: Optional[int] = None

    def register(
        self,
        state_code: str,
        tax_year: int,
        calculator: BaseStateCalculator,
    ) -> None:
        """
        Register a module for a state and year.

        Args:
            state_code: Jurisdiction code (e.g., "CA", "NY")
            tax_year: Tax year this module handles
            calculator: The module instance

        Raises:
            RegistryError: If the state/year is already registered
        """
        state_upper = state_code.upper()
        years = self._calculators.setdefault(state_upper, {})
        if tax_year in years:
            raise RegistryError(f"State module already registered for {state_upper} {tax_year}")
        years[tax_year] = calculator
        self._labels = None
        logger.debug(f"Registered state module {state_upper} for {tax_year}: {type(calculator).__name__}")

    def get_calculator(self, state_code: str, tax_year: int) -> Optional[BaseStateCalculator]:
        """
        Get the module for a state and year.

        Returns:
            Module instance or None if not registered
        """
        return self._calculators.get(state_code.upper(), {}).get(tax_year)

    def get_supported_states(self, tax_year: int) -> List[str]:
        """Sorted list of state codes with a module for the tax year."""
        return sorted(code for code, years in self._calculators.items() if tax_year in years)

    def is_supported(self, state_code: str, tax_year: int) -> bool:
        return tax_year in self._calculators.get(state_code.upper(), {})

    def registrations(self) -> List[tuple]:
        """(state_code, tax_year, module) for every registration, sorted."""
        return [
            (code, year, calc)
            for code in sorted(self._calculators)
            for year, calc in sorted(self._calculators[code].items())
        ]

    def build_node_labels(self, base_labels: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Merge base labels with every registered module's labels.

        Built once and cached until the next registration.

        Raises:
            RegistryError: If two sources declare the same node id
        """
        cache_key = id(base_labels) if base_labels is not None else None
        if self._labels is not None and self._labels_key == cache_key:
            return dict(self._labels)

        merged: Dict[str, str] = dict(base_labels or {})
        owners: Dict[str, str] = {node_id: "base" for node_id in merged}
        for code, year, calc in self.registrations():
            owner = f"{code}/{year}"
            for node_id, label in calc.node_labels.items():
                if node_id in merged:
                    logger.error(f"Node label collision on '{node_id}' between {owners[node_id]} and {owner}")
                    raise RegistryError(
                        f"Node label '{node_id}' declared by both {owners[node_id]} and {owner}"
                    )
                merged[node_id] = label
                owners[node_id] = owner

        self._labels = merged
        self._labels_key = cache_key
        return dict(merged)

    def clear(self) -> None:
        """Clear all registered modules. Useful for testing."""
        self._calculators.clear()
        self._labels = None


_default_registry = StateCalculatorRegistry()


def default_registry() -> StateCalculatorRegistry:
    """Process-wide registry holding the compiled-in state modules."""
    # Importing configs registers the compiled-in modules
    from calculator.state import configs  # noqa: F401
    return _default_registry


def register_state(
    state_code: str,
    tax_year: int,
    registry: Optional[StateCalculatorRegistry] = None,
) -> Callable:
    """
    Decorator to register a state module.

    Usage:
        @register_state("CA", 2025)
        class CaliforniaCalculator(BaseStateCalculator):
            ...
    """
    def decorator(cls: Type[BaseStateCalculator]) -> Type[BaseStateCalculator]:
        (registry or _default_registry).register(state_code, tax_year, cls())
        return cls
    return decorator
