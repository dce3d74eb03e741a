"""State tax calculation module."""

from calculator.state.state_tax_config import StateTaxConfig
from calculator.state.state_registry import (
    NO_INCOME_TAX_STATES,
    RegistryError,
    StateCalculatorRegistry,
    default_registry,
    register_state,
)
from calculator.state.base_state_calculator import BaseStateCalculator, StateResult

# Import configs to register state calculators
from calculator.state import configs  # noqa: F401

__all__ = [
    "StateTaxConfig",
    "StateCalculatorRegistry",
    "RegistryError",
    "NO_INCOME_TAX_STATES",
    "default_registry",
    "register_state",
    "BaseStateCalculator",
    "StateResult",
]
