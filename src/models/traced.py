"""
Traced values - the explainability backbone of the engine.

Every monetary figure produced by a computation carries its provenance:
the document field it was read from, the computed node and inputs it was
derived from, or the UI field the taxpayer typed it into.

Amounts are always integer cents. Floating point never enters the model.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Iterator, Optional, Tuple, Union


# =============================================================================
# VALUE SOURCES
# =============================================================================

@dataclass(frozen=True)
class DocumentSource:
    """A value read directly from a source document (W-2 box, 1099 field, ...)."""
    document_type: str
    document_id: str
    field: str
    description: Optional[str] = None


@dataclass(frozen=True)
class ComputedSource:
    """A value produced by a computation node from other nodes."""
    node_id: str
    inputs: Tuple[str, ...] = ()
    description: Optional[str] = None


@dataclass(frozen=True)
class UserEntrySource:
    """A value the taxpayer entered by hand; no further derivation."""
    field: str
    entered_at: Optional[str] = None
    description: Optional[str] = None


ValueSource = Union[DocumentSource, ComputedSource, UserEntrySource]

SOURCE_TYPES = (DocumentSource, ComputedSource, UserEntrySource)


# =============================================================================
# TRACED VALUE
# =============================================================================

@dataclass(frozen=True)
class TracedValue:
    """
    A monetary amount with full provenance tracking.

    Attributes:
        amount: Integer cents (10050 == $100.50)
        source: Where the amount came from
        confidence: 0..1, 1.0 for certain values, lower for OCR/heuristics
        citation: Optional form/line citation, e.g. "Form 1040, Line 1a"
    """
    amount: int
    source: ValueSource
    confidence: float = 1.0
    citation: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise TypeError(f"TracedValue amount must be integer cents, got {self.amount!r}")
        if not isinstance(self.source, SOURCE_TYPES):
            raise TypeError(f"Unknown value source: {self.source!r}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within 0..1, got {self.confidence}")

    @property
    def is_leaf(self) -> bool:
        return not isinstance(self.source, ComputedSource)

    @property
    def inputs(self) -> Tuple[str, ...]:
        """Input node ids for computed values, empty for leaves."""
        if isinstance(self.source, ComputedSource):
            return self.source.inputs
        return ()


# =============================================================================
# HELPERS
# =============================================================================

def cents(dollars: Union[int, float, str, Decimal]) -> int:
    """
    Convert a dollar amount to integer cents, rounding half up.

    >>> cents(100.10)
    10010
    >>> cents("-50.5")
    -5050
    """
    value = dollars if isinstance(dollars, Decimal) else Decimal(str(dollars))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def dollars(amount_in_cents: int) -> Decimal:
    """Convert integer cents back to a Decimal dollar amount for display."""
    return (Decimal(amount_in_cents) / 100).quantize(Decimal("0.01"))


def traced_from_document(
    amount: int,
    document_type: str,
    document_id: str,
    field: str,
    description: Optional[str] = None,
    citation: Optional[str] = None,
    confidence: float = 1.0,
) -> TracedValue:
    """Create a TracedValue read from a tax document."""
    return TracedValue(
        amount=amount,
        source=DocumentSource(
            document_type=document_type,
            document_id=document_id,
            field=field,
            description=description,
        ),
        confidence=confidence,
        citation=citation,
    )


def traced_from_computation(
    amount: int,
    node_id: str,
    inputs: Iterable[str] = (),
    citation: Optional[str] = None,
    description: Optional[str] = None,
) -> TracedValue:
    """Create a TracedValue produced by a computation node."""
    return TracedValue(
        amount=amount,
        source=ComputedSource(
            node_id=node_id,
            inputs=tuple(inputs),
            description=description,
        ),
        citation=citation,
    )


def traced_from_user_entry(
    amount: int,
    field: str,
    entered_at: Optional[str] = None,
    description: Optional[str] = None,
) -> TracedValue:
    """Create a TracedValue typed in directly by the taxpayer."""
    return TracedValue(
        amount=amount,
        source=UserEntrySource(field=field, entered_at=entered_at, description=description),
    )


def traced_zero(node_id: str, citation: Optional[str] = None) -> TracedValue:
    """Zero-valued computed placeholder for unused lines."""
    return traced_from_computation(0, node_id, (), citation)


def iter_traced_values(obj: Any) -> Iterator[TracedValue]:
    """
    Yield every TracedValue held by a result record, depth first.

    Walks dataclass fields and tuples/lists in declaration order; anything
    else (counts, flags, enums) is skipped.
    """
    if isinstance(obj, TracedValue):
        yield obj
    elif is_dataclass(obj) and not isinstance(obj, type):
        for f in fields(obj):
            yield from iter_traced_values(getattr(obj, f.name))
    elif isinstance(obj, (tuple, list)):
        for item in obj:
            yield from iter_traced_values(item)
