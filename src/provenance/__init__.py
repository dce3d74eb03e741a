"""Provenance graph: store, collector, traces and ordering."""

from provenance.store import DuplicateNodeError, ProvenanceStore, ProvenanceStoreBuilder
from provenance.labels import FEDERAL_NODE_LABELS
from provenance.documents import resolve_document_ref
from provenance.collector import collect_all_values
from provenance.trace import ComputeTrace, build_trace, explain_line
from provenance.topology import CycleDetectedError, topological_sort

__all__ = [
    "DuplicateNodeError",
    "ProvenanceStore",
    "ProvenanceStoreBuilder",
    "FEDERAL_NODE_LABELS",
    "resolve_document_ref",
    "collect_all_values",
    "ComputeTrace",
    "build_trace",
    "explain_line",
    "CycleDetectedError",
    "topological_sort",
]
