"""
Quality gates for jurisdiction results.

Gates are advisory: they never raise. Each check returns a GateResult
listing its violations, and a result passes when none of them is an
error. Three families run after a computation:

- registry: every registered module is internally consistent
- computation: one StateResult is well-formed against its configuration
- cross-state: the set of results agrees with the input aggregate
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional, Sequence, TYPE_CHECKING

from calculator.state.state_registry import NO_INCOME_TAX_STATES
from models.jurisdiction import JurisdictionConfig, ResidencyType

if TYPE_CHECKING:
    from calculator.state.base_state_calculator import StateResult
    from calculator.state.state_registry import StateCalculatorRegistry
    from models.tax_return import TaxReturn


class GateSeverity(str, Enum):
    """Violation severity."""
    ERROR = "error"        # Fails the gate
    WARNING = "warning"    # Reported, gate still passes


class GateCategory(str, Enum):
    REGISTRY = "registry"
    COMPUTATION = "computation"
    CROSS_STATE = "cross-state"


@dataclass(frozen=True)
class GateViolation:
    """A single finding from a quality gate."""
    gate: str
    category: GateCategory
    severity: GateSeverity
    message: str
    state_code: Optional[str] = None


@dataclass(frozen=True)
class GateResult:
    """Outcome of one or more gates."""
    passed: bool
    violations: tuple = ()

    @property
    def errors(self) -> List[GateViolation]:
        return [v for v in self.violations if v.severity == GateSeverity.ERROR]

    @property
    def warnings(self) -> List[GateViolation]:
        return [v for v in self.violations if v.severity == GateSeverity.WARNING]


def _result(violations: Sequence[GateViolation]) -> GateResult:
    return GateResult(
        passed=not any(v.severity == GateSeverity.ERROR for v in violations),
        violations=tuple(violations),
    )


# =============================================================================
# REGISTRY GATES
# =============================================================================

def validate_registry_consistency(registry: "StateCalculatorRegistry") -> GateResult:
    """Check that every registered module agrees with its registration key."""
    violations: List[GateViolation] = []

    def add(gate: str, severity: GateSeverity, message: str, code: str) -> None:
        violations.append(GateViolation(gate, GateCategory.REGISTRY, severity, message, code))

    for code, year, calc in registry.registrations():
        if not calc.code:
            add("registry.missing-state-code", GateSeverity.ERROR,
                f"{code}: module has an empty state code", code)
        elif calc.code.upper() != code:
            add("registry.state-code-mismatch", GateSeverity.ERROR,
                f"{code}: module reports state code '{calc.code}'", code)
        if calc.config.tax_year != year:
            add("registry.tax-year-mismatch", GateSeverity.ERROR,
                f"{code}: registered for {year} but configured for {calc.config.tax_year}", code)
        if not calc.name:
            add("registry.missing-state-name", GateSeverity.ERROR,
                f"{code}: module has an empty state name", code)
        if not calc.form_label:
            add("registry.missing-form-label", GateSeverity.ERROR,
                f"{code}: module has an empty form label", code)
        if not calc.node_labels:
            add("registry.empty-node-labels", GateSeverity.WARNING,
                f"{code}: module declares no node labels", code)

    return _result(violations)


# =============================================================================
# COMPUTATION GATES
# =============================================================================

_NON_NEGATIVE_FIELDS = (
    ("state_taxable_income", "compute.negative-taxable-income"),
    ("state_tax", "compute.negative-state-tax"),
    ("state_credits", "compute.negative-credits"),
    ("tax_after_credits", "compute.negative-tax-after-credits"),
    ("state_withholding", "compute.negative-withholding"),
    ("overpaid", "compute.negative-overpaid"),
    ("amount_owed", "compute.negative-amount-owed"),
)


def validate_state_result(
    result: "StateResult",
    config: JurisdictionConfig,
    tolerance: int = 1,
) -> GateResult:
    """
    Validate one jurisdiction result against the configuration it ran with.

    Args:
        result: The module's envelope
        config: Jurisdiction configuration from the input aggregate
        tolerance: Allowed rounding drift in the balance equation, in cents

    Returns:
        GateResult for the computation gates
    """
    violations: List[GateViolation] = []
    code = result.state_code

    def add(gate: str, message: str, severity: GateSeverity = GateSeverity.ERROR) -> None:
        violations.append(GateViolation(gate, GateCategory.COMPUTATION, severity, message, code))

    if code != config.state_code:
        add("compute.state-code-mismatch", f"{code}: result does not match configured state {config.state_code}")
    if result.residency_type != config.residency_type:
        add(
            "compute.residency-mismatch",
            f"{code}: residency {result.residency_type.value} does not match configured "
            f"{config.residency_type.value}",
        )

    for attr, gate in _NON_NEGATIVE_FIELDS:
        amount = getattr(result, attr)
        if amount < 0:
            add(gate, f"{code}: {attr} is negative ({amount})")

    if result.overpaid > 0 and result.amount_owed > 0:
        add(
            "compute.overpaid-and-owed",
            f"{code}: both overpaid ({result.overpaid}) and amount_owed ({result.amount_owed}) are positive",
        )

    # overpaid - owed == withholding - tax after credits
    balance = result.state_withholding - result.tax_after_credits
    reported = result.overpaid - result.amount_owed
    if abs(balance - reported) > tolerance:
        add(
            "compute.balance-mismatch",
            f"{code}: withholding - tax_after_credits = {balance}, but overpaid - amount_owed = {reported}",
        )

    if config.residency_type != ResidencyType.FULL_YEAR:
        ratio = result.apportionment_ratio
        if ratio is None:
            add(
                "compute.missing-apportionment",
                f"{code}: part-year/nonresident return has no apportionment ratio",
                GateSeverity.WARNING,
            )
        elif ratio < Decimal("0") or ratio > Decimal("1"):
            add("compute.invalid-apportionment", f"{code}: apportionment ratio {ratio} is outside 0..1")

    if config.residency_type == ResidencyType.PART_YEAR and not (config.move_in_date or config.move_out_date):
        add("compute.missing-residency-dates", f"{code}: part-year residency needs a move-in or move-out date")

    if not result.form_label:
        add("compute.missing-form-label", f"{code}: result has an empty form label")

    return _result(violations)


# =============================================================================
# CROSS-STATE GATES
# =============================================================================

def validate_cross_state_consistency(
    tax_return: "TaxReturn",
    results: Sequence["StateResult"],
    federal_agi: int,
    agi_deviation_threshold: float = 0.5,
    tolerance: int = 1,
) -> GateResult:
    """
    Validate the set of jurisdiction results against the input aggregate.

    States without an income tax are never expected to produce a result.
    """
    violations: List[GateViolation] = []

    def add(gate: str, severity: GateSeverity, message: str, code: Optional[str] = None) -> None:
        violations.append(GateViolation(gate, GateCategory.CROSS_STATE, severity, message, code))

    codes = [c.state_code for c in tax_return.jurisdictions]
    duplicates = sorted({c for c in codes if codes.count(c) > 1})
    if duplicates:
        add("cross-state.duplicate-state-codes", GateSeverity.ERROR,
            f"Duplicate state codes in jurisdictions: {', '.join(duplicates)}")

    computed = {r.state_code for r in results}
    for code in dict.fromkeys(codes):
        if code not in computed and code not in NO_INCOME_TAX_STATES:
            add("cross-state.missing-result", GateSeverity.ERROR,
                f"No compute result for configured state {code}", code)

    total_withholding = sum(r.state_withholding for r in results)
    w2_withholding = sum(w2.box17_state_income_tax for w2 in tax_return.w2s)
    if total_withholding > w2_withholding + tolerance:
        add("cross-state.withholding-exceeds-w2", GateSeverity.WARNING,
            f"Total state withholding ({total_withholding}) exceeds W-2 state withholding ({w2_withholding})")

    if federal_agi > 0:
        for result in results:
            if result.residency_type != ResidencyType.FULL_YEAR:
                continue
            deviation = abs(result.state_agi - federal_agi) / federal_agi
            if deviation > agi_deviation_threshold:
                add(
                    "cross-state.agi-deviation",
                    GateSeverity.WARNING,
                    f"{result.state_code}: state AGI ({result.state_agi}) deviates more than "
                    f"{agi_deviation_threshold:.0%} from federal AGI ({federal_agi})",
                    result.state_code,
                )

    return _result(violations)


def run_all_gates(results: Iterable[GateResult]) -> GateResult:
    """Combine gate results; passes iff no error-severity violation remains."""
    violations: List[GateViolation] = []
    for result in results:
        violations.extend(result.violations)
    return _result(violations)
