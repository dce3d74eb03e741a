"""
Document leaves: which fields of which source documents become provenance
leaves, and how a document node id resolves back against the TaxReturn.

Node id conventions:

    w2:<id>:box1                  W-2 box, also box2, box16, box17
    1099int:<id>:box1             1099-INT box
    1099div:<id>:box1a            1099-DIV box
    1099misc:<id>:box3            1099-MISC box
    1099g:<id>:box1               1099-G box
    1099b:<id>:federalTaxWithheld 1099-B withholding
    broker:<name>:<category>      sales from one broker in one Form 8949 box
    tx:<id>                       one sale, when no 1099-B is on file
    scheduleE:<id>:<field>        rents / royalties / expenses of a property
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from calculator.schedule_a import ITEMIZED_INPUT_FIELDS
from calculator.schedule_d import broker_name_for
from models.tax_return import TaxReturn
from provenance.labels import FEDERAL_NODE_LABELS


@dataclass(frozen=True)
class DocumentKind:
    """One information-return type and the fields it reports."""

    prefix: str
    collection: str
    document_type: str
    issuer_attr: str
    # leaf field -> model attribute
    fields: Tuple[Tuple[str, str], ...]


DOCUMENT_KINDS: Tuple[DocumentKind, ...] = (
    DocumentKind("w2", "w2s", "W-2", "employer_name", (
        ("box1", "box1"),
        ("box2", "box2"),
        ("box16", "box16_state_wages"),
        ("box17", "box17_state_income_tax"),
    )),
    DocumentKind("1099int", "form1099_ints", "1099-INT", "payer_name", (
        ("box1", "box1"),
        ("box3", "box3"),
        ("box4", "box4"),
        ("box8", "box8"),
    )),
    DocumentKind("1099div", "form1099_divs", "1099-DIV", "payer_name", (
        ("box1a", "box1a"),
        ("box1b", "box1b"),
        ("box2a", "box2a"),
        ("box4", "box4"),
        ("box11", "box11"),
    )),
    DocumentKind("1099misc", "form1099_miscs", "1099-MISC", "payer_name", (
        ("box1", "box1"),
        ("box2", "box2"),
        ("box3", "box3"),
        ("box4", "box4"),
    )),
    DocumentKind("1099g", "form1099_gs", "1099-G", "payer_name", (
        ("box1", "box1"),
        ("box2", "box2"),
        ("box4", "box4"),
    )),
    DocumentKind("1099b", "form1099_bs", "1099-B", "broker_name", (
        ("federalTaxWithheld", "federal_tax_withheld"),
    )),
)

_KINDS_BY_PREFIX = {kind.prefix: kind for kind in DOCUMENT_KINDS}

_FIELD_LABELS = {
    "federalTaxWithheld": "Federal tax withheld",
}

SCHEDULE_E_FIELDS = {
    "rentsReceived": "Rents received",
    "royaltiesReceived": "Royalties received",
    "expenses": "Total expenses",
}

ESTIMATED_TAX_LABELS = {
    "q1": "Q1 estimated payment (Apr 15)",
    "q2": "Q2 estimated payment (Jun 15)",
    "q3": "Q3 estimated payment (Sep 15)",
    "q4": "Q4 estimated payment (Jan 15)",
}

_DOCUMENT_REF = re.compile(r"^(w2|1099int|1099div|1099misc|1099g|1099b):(.+?):(.+)$")
_BROKER_REF = re.compile(r"^broker:(.+):([ABDE])$")
_TX_REF = re.compile(r"^tx:(.+)$")
_SCHEDULE_E_REF = re.compile(r"^scheduleE:(.+?):(.+)$")
_ESTIMATED_REF = re.compile(r"^estimatedTax\.(q[1-4])$")


def box_label(field: str) -> str:
    """
    Display label for a document field.

    >>> box_label("box1a")
    'Box 1a'
    >>> box_label("federalTaxWithheld")
    'Federal tax withheld'
    """
    if field in _FIELD_LABELS:
        return _FIELD_LABELS[field]
    return re.sub(r"^box", "Box ", field)


def document_description(kind: DocumentKind, document: Any, field: str) -> str:
    return f"{kind.document_type} from {getattr(document, kind.issuer_attr)} ({box_label(field)})"


def reported_fields(kind: DocumentKind, document: Any) -> List[Tuple[str, int]]:
    """
    (field, amount) for every field the document reports.

    W-2 state boxes only exist when box 15 names a state.
    """
    result = []
    for field, attr in kind.fields:
        if kind.prefix == "w2" and field in ("box16", "box17") and not document.box15_state:
            continue
        result.append((field, getattr(document, attr)))
    return result


def sale_description(broker_name: str, count: int, category: str) -> str:
    plural = "" if count == 1 else "s"
    return f"{broker_name} - {count} sale{plural} (Category {category})"


def property_label(address: str) -> str:
    return address or "Property"


def resolve_document_ref(tax_return: TaxReturn, ref_id: str) -> Tuple[str, int]:
    """
    Resolve a document node id straight against the input aggregate.

    Returns:
        (label, amount); unknown refs give ("Unknown (<ref>)", 0)
    """
    m = _DOCUMENT_REF.match(ref_id)
    if m:
        prefix, doc_id, field = m.groups()
        kind = _KINDS_BY_PREFIX[prefix]
        document = next((d for d in getattr(tax_return, kind.collection) if d.id == doc_id), None)
        if document is None:
            return f"Unknown {kind.document_type} ({doc_id})", 0
        attr = dict(kind.fields).get(field)
        amount = getattr(document, attr) if attr else 0
        return document_description(kind, document, field), amount

    m = _BROKER_REF.match(ref_id)
    if m:
        broker_name, category = m.groups()
        txs = [
            t for t in tax_return.capital_transactions
            if t.category.value == category and broker_name_for(tax_return, t) == broker_name
        ]
        return sale_description(broker_name, len(txs), category), sum(t.gain_loss for t in txs)

    m = _TX_REF.match(ref_id)
    if m:
        tx = next((t for t in tax_return.capital_transactions if t.id == m.group(1)), None)
        if tx is None:
            return f"Unknown transaction ({m.group(1)})", 0
        return f"Sale of {tx.description}", tx.gain_loss

    m = _SCHEDULE_E_REF.match(ref_id)
    if m:
        prop_id, field = m.groups()
        prop = next((p for p in tax_return.schedule_e_properties if p.id == prop_id), None)
        if prop is None:
            return f"Unknown property ({prop_id})", 0
        label = f"{property_label(prop.address)} - {SCHEDULE_E_FIELDS.get(field, field)}"
        return label, schedule_e_amount(prop, field)

    if ref_id in ITEMIZED_INPUT_FIELDS and tax_return.deductions.itemized is not None:
        amount = getattr(tax_return.deductions.itemized, ITEMIZED_INPUT_FIELDS[ref_id])
        return FEDERAL_NODE_LABELS.get(ref_id, ref_id), amount

    m = _ESTIMATED_REF.match(ref_id)
    if m:
        quarter = m.group(1)
        return ESTIMATED_TAX_LABELS[quarter], getattr(tax_return.estimated_payments, quarter)

    return f"Unknown ({ref_id})", 0


def schedule_e_amount(prop: Any, field: str) -> int:
    amounts: Dict[str, int] = {
        "rentsReceived": prop.rents_received,
        "royaltiesReceived": prop.royalties_received,
        "expenses": prop.total_expenses,
    }
    return amounts.get(field, 0)
