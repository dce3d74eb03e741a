"""
Orchestrator: one TaxReturn in, one traced ComputeResult out.

The federal return runs first. Each configured jurisdiction then runs
through its registered module against the finished federal result, the
provenance collector stores every traced value, and quality gates check
the jurisdiction results. A run does no I/O and never mutates its input.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from calculator.form_1040 import Form1040Result, compute_form_1040
from calculator.schedule_b import ScheduleBResult
from calculator.state.base_state_calculator import BaseStateCalculator, StateResult
from calculator.state.state_registry import (
    NO_INCOME_TAX_STATES,
    StateCalculatorRegistry,
    default_registry,
)
from calculator.tax_year_config import TaxYearConfig
from config.settings import EngineSettings, UnregisteredJurisdictionPolicy, get_settings
from models.jurisdiction import JurisdictionConfig
from models.tax_return import TaxReturn
from provenance.collector import collect_all_values
from provenance.labels import FEDERAL_NODE_LABELS
from provenance.store import ProvenanceStore
from validation.quality_gates import (
    GateResult,
    run_all_gates,
    validate_cross_state_consistency,
    validate_state_result,
)

logger = logging.getLogger(__name__)


class UnsupportedJurisdictionError(Exception):
    """A configured jurisdiction has no registered module."""

    def __init__(self, state_code: str, tax_year: int):
        self.state_code = state_code
        self.tax_year = tax_year
        super().__init__(f"No state module registered for {state_code} {tax_year}")


@dataclass(frozen=True)
class ComputeResult:
    """
    Output aggregate of one run.

    Attributes:
        form1040: Federal result, with its nested schedules
        schedule_b: Schedule B, which always runs
        state_results: Jurisdiction results in configuration order
        values: Every traced value of the run, keyed by node id
        executed_schedules: "B", then "1"/"A"/"D"/"E" when present, then
            each jurisdiction's form label
        quality_gates: Gate findings; None when no jurisdiction ran
        labels: Read-only node labels the run was built with
    """

    form1040: Form1040Result
    schedule_b: ScheduleBResult
    state_results: Tuple[StateResult, ...]
    values: ProvenanceStore
    executed_schedules: Tuple[str, ...]
    quality_gates: Optional[GateResult] = None
    labels: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "labels", MappingProxyType(dict(self.labels)))


def _year_config(tax_year: int, settings: EngineSettings) -> TaxYearConfig:
    try:
        return TaxYearConfig.for_year(tax_year)
    except ValueError:
        logger.warning(
            f"Tax year {tax_year} is not supported; using {settings.default_tax_year} constants"
        )
        return TaxYearConfig.for_year(settings.default_tax_year)


def _resolve_jurisdictions(
    tax_return: TaxReturn,
    registry: StateCalculatorRegistry,
    tax_year: int,
    settings: EngineSettings,
) -> List[Tuple[BaseStateCalculator, JurisdictionConfig]]:
    """Pair each configured jurisdiction with its module, in configuration order."""
    policy = settings.unregistered_jurisdiction_policy
    planned = []
    seen = set()
    for jurisdiction in tax_return.jurisdictions:
        code = jurisdiction.state_code
        if code in seen:
            logger.warning(f"Jurisdiction {code} configured more than once; computing the first only")
            continue
        seen.add(code)
        calculator = registry.get_calculator(code, tax_year)
        if calculator is not None:
            planned.append((calculator, jurisdiction))
            continue

        if code in NO_INCOME_TAX_STATES:
            logger.debug(f"Skipping {code}: no state income tax")
        elif policy == UnregisteredJurisdictionPolicy.ERROR:
            logger.error(f"No state module registered for {code} {tax_year}")
            raise UnsupportedJurisdictionError(code, tax_year)
        elif policy == UnregisteredJurisdictionPolicy.WARN:
            logger.warning(f"Skipping {code}: no state module registered for {tax_year}")
        else:
            logger.debug(f"Skipping {code}: no state module registered for {tax_year}")
    return planned


def _run_jurisdictions(
    planned: List[Tuple[BaseStateCalculator, JurisdictionConfig]],
    tax_return: TaxReturn,
    federal: Form1040Result,
    settings: EngineSettings,
) -> List[StateResult]:
    def run(item: Tuple[BaseStateCalculator, JurisdictionConfig]) -> StateResult:
        calculator, jurisdiction = item
        return calculator.compute(tax_return, federal, jurisdiction)

    if settings.parallel_jurisdictions and len(planned) > 1:
        # map() yields in submission order, whatever order the modules finish in
        with ThreadPoolExecutor(max_workers=settings.max_workers) as executor:
            return list(executor.map(run, planned))
    return [run(item) for item in planned]


def _executed_schedules(federal: Form1040Result, state_results: List[StateResult]) -> Tuple[str, ...]:
    executed = ["B"]
    if federal.schedule_1 is not None:
        executed.append("1")
    if federal.schedule_a is not None:
        executed.append("A")
    if federal.schedule_d is not None:
        executed.append("D")
    if federal.schedule_e is not None:
        executed.append("E")
    executed.extend(result.form_label for result in state_results)
    return tuple(executed)


def _run_gates(
    tax_return: TaxReturn,
    planned: List[Tuple[BaseStateCalculator, JurisdictionConfig]],
    state_results: List[StateResult],
    federal: Form1040Result,
    settings: EngineSettings,
) -> GateResult:
    gates = [
        validate_state_result(result, jurisdiction, settings.balance_tolerance_cents)
        for (_, jurisdiction), result in zip(planned, state_results)
    ]
    gates.append(validate_cross_state_consistency(
        tax_return,
        state_results,
        federal.agi,
        settings.agi_deviation_threshold,
        settings.balance_tolerance_cents,
    ))
    return run_all_gates(gates)


def compute_all(
    tax_return: TaxReturn,
    registry: Optional[StateCalculatorRegistry] = None,
    settings: Optional[EngineSettings] = None,
) -> ComputeResult:
    """
    Compute the federal return and every configured jurisdiction.

    Args:
        tax_return: Immutable input aggregate
        registry: State modules to use; defaults to the compiled-in registry
        settings: Engine settings; defaults to ``get_settings()``

    Returns:
        ComputeResult with every computed value traced

    Raises:
        UnsupportedJurisdictionError: A jurisdiction has no module and the
            policy is ``error``
        DuplicateNodeError: Two sources emitted the same node id
    """
    if registry is None:
        registry = default_registry()
    if settings is None:
        settings = get_settings()

    config = _year_config(tax_return.tax_year, settings)
    federal = compute_form_1040(tax_return, config)

    planned = _resolve_jurisdictions(tax_return, registry, config.tax_year, settings)
    state_results = _run_jurisdictions(planned, tax_return, federal, settings)

    values = collect_all_values(
        federal,
        tax_return,
        [(calculator, result) for (calculator, _), result in zip(planned, state_results)],
        include_zero_document_leaves=settings.include_zero_document_leaves,
    )

    quality_gates = None
    if state_results:
        quality_gates = _run_gates(tax_return, planned, state_results, federal, settings)
        for violation in quality_gates.violations:
            logger.debug(f"Quality gate {violation.gate} ({violation.severity.value}): {violation.message}")

    executed = _executed_schedules(federal, state_results)
    logger.debug(
        f"Computed {tax_return.tax_year} return: {len(values)} values, "
        f"schedules={','.join(executed)}"
    )

    return ComputeResult(
        form1040=federal,
        schedule_b=federal.schedule_b,
        state_results=tuple(state_results),
        values=values,
        executed_schedules=executed,
        quality_gates=quality_gates,
        labels=registry.build_node_labels(FEDERAL_NODE_LABELS),
    )
