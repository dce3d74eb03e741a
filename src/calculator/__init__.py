from .tax_year_config import TaxYearConfig
from .form_1040 import Form1040Result, compute_form_1040
from .state import (
    StateCalculatorRegistry,
    StateTaxConfig,
    StateResult,
    BaseStateCalculator,
    RegistryError,
    NO_INCOME_TAX_STATES,
    default_registry,
    register_state,
)

__all__ = [
    "TaxYearConfig",
    "Form1040Result",
    "compute_form_1040",
    "StateCalculatorRegistry",
    "StateTaxConfig",
    "StateResult",
    "BaseStateCalculator",
    "RegistryError",
    "NO_INCOME_TAX_STATES",
    "default_registry",
    "register_state",
]
