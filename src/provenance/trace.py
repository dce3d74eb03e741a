"""
Compute traces: on-demand derivation trees over a provenance store.

``build_trace`` resolves a node and, for computed nodes, every input it
names, in order. A node missing from the store becomes a zero-valued
leaf, so a bad id or a dangling input never raises. There is no cycle
guard here; ``topological_sort`` is the integrity check for that.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from calculator.decimal_math import format_cents
from models.traced import (
    ComputedSource,
    DocumentSource,
    TracedValue,
    UserEntrySource,
    traced_zero,
)


@dataclass(frozen=True)
class ComputeTrace:
    """One node of a derivation tree."""

    node_id: str
    label: str
    output: TracedValue
    inputs: Tuple["ComputeTrace", ...] = ()
    citation: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.inputs


def build_trace(result: Any, node_id: str, labels: Optional[Mapping[str, str]] = None) -> ComputeTrace:
    """
    Reconstruct the derivation tree of a node.

    Args:
        result: A ComputeResult (anything with ``values`` and ``labels``)
        node_id: Node to explain
        labels: Display labels; defaults to the labels the run was built with

    Returns:
        ComputeTrace rooted at ``node_id``
    """
    if labels is None:
        labels = getattr(result, "labels", None) or {}
    return _build(result.values, node_id, labels)


def _build(values: Mapping[str, TracedValue], node_id: str, labels: Mapping[str, str]) -> ComputeTrace:
    value = values.get(node_id)
    if value is None:
        return ComputeTrace(
            node_id=node_id,
            label=labels.get(node_id, f"Unknown ({node_id})"),
            output=traced_zero(node_id),
        )

    source = value.source
    if isinstance(source, DocumentSource):
        label = source.description or labels.get(node_id, node_id)
        return ComputeTrace(node_id, label, value, (), value.citation)

    if isinstance(source, ComputedSource):
        label = labels.get(node_id) or source.description or node_id
        children = tuple(_build(values, input_id, labels) for input_id in source.inputs)
        return ComputeTrace(node_id, label, value, children, value.citation)

    if isinstance(source, UserEntrySource):
        label = labels.get(node_id) or source.description or node_id
        return ComputeTrace(node_id, label, value, (), value.citation)

    raise TypeError(f"Unknown value source: {source!r}")


def format_trace(trace: ComputeTrace, depth: int = 0) -> List[str]:
    """Indented lines: two spaces per level and ``|- `` below the root."""
    prefix = "" if depth == 0 else "  " * depth + "|- "
    citation = f" [{trace.citation}]" if trace.citation else ""
    lines = [f"{prefix}{trace.label}: {format_cents(trace.output.amount)}{citation}"]
    for child in trace.inputs:
        lines.extend(format_trace(child, depth + 1))
    return lines


def explain_line(result: Any, node_id: str, labels: Optional[Mapping[str, str]] = None) -> str:
    """
    Human-readable breakdown of a node.

    Example:
        Adjusted gross income: $60,000.00 [Form 1040, Line 11]
          |- Total income: $60,000.00 [Form 1040, Line 9]
            |- Wages, salaries, tips: $60,000.00 [Form 1040, Line 1a]
    """
    return "\n".join(format_trace(build_trace(result, node_id, labels)))
