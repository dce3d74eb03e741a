"""2025 state modules. Importing this package registers them."""

from calculator.state.configs.state_2025.california import CaliforniaCalculator
from calculator.state.configs.state_2025.illinois import IllinoisCalculator
from calculator.state.configs.state_2025.pennsylvania import PennsylvaniaCalculator

__all__ = [
    "CaliforniaCalculator",
    "IllinoisCalculator",
    "PennsylvaniaCalculator",
]
