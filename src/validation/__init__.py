"""Quality gates over jurisdiction results."""

from .quality_gates import (
    GateCategory,
    GateResult,
    GateSeverity,
    GateViolation,
    run_all_gates,
    validate_cross_state_consistency,
    validate_registry_consistency,
    validate_state_result,
)

__all__ = [
    'GateCategory',
    'GateResult',
    'GateSeverity',
    'GateViolation',
    'run_all_gates',
    'validate_cross_state_consistency',
    'validate_registry_consistency',
    'validate_state_result',
]
