"""
Provenance collector.

Walks the federal result, the input aggregate and every jurisdiction
result, and emits one traced value per quantity into a ProvenanceStore:

- computed lines, with the node ids they were derived from
- document leaves for every field a source document reports
- explanatory constants (standard deduction, itemized inputs) as
  computed nodes without inputs
- estimated payments as user-entry leaves
- jurisdiction nodes, through each module's ``collect_traced_values``
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence, Tuple, TYPE_CHECKING

from calculator.schedule_a import ITEMIZED_INPUT_FIELDS
from calculator.schedule_d import broker_name_for, transaction_leaf_id
from models.tax_return import TaxReturn
from models.traced import (
    ComputedSource,
    iter_traced_values,
    traced_from_computation,
    traced_from_document,
    traced_from_user_entry,
)
from provenance.documents import (
    DOCUMENT_KINDS,
    ESTIMATED_TAX_LABELS,
    SCHEDULE_E_FIELDS,
    box_label,
    document_description,
    property_label,
    reported_fields,
    sale_description,
    schedule_e_amount,
)
from provenance.labels import FEDERAL_NODE_LABELS
from provenance.store import ProvenanceStore, ProvenanceStoreBuilder

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from calculator.state.base_state_calculator import BaseStateCalculator, StateResult

logger = logging.getLogger(__name__)


def collect_all_values(
    form1040: "Form1040Result",
    tax_return: TaxReturn,
    jurisdiction_results: Sequence[Tuple["BaseStateCalculator", "StateResult"]] = (),
    include_zero_document_leaves: bool = True,
) -> ProvenanceStore:
    """
    Build the provenance store for one run.

    Args:
        form1040: Federal result; its nested schedules are walked too
        tax_return: Input aggregate the document leaves are read from
        jurisdiction_results: (module, result) per computed jurisdiction
        include_zero_document_leaves: Emit document fields reporting zero

    Returns:
        ProvenanceStore in insertion order

    Raises:
        DuplicateNodeError: If two sources emit the same node id
    """
    builder = ProvenanceStoreBuilder()

    _collect_federal(builder, form1040)
    _collect_pseudo_nodes(builder, form1040, tax_return)
    _collect_documents(builder, tax_return, include_zero_document_leaves)
    _collect_capital_transactions(builder, tax_return, include_zero_document_leaves)

    for module, result in jurisdiction_results:
        for node_id, value in module.collect_traced_values(result):
            builder.add(node_id, value)

    store = builder.build()
    logger.debug(f"Collected {len(store)} provenance nodes ({len(jurisdiction_results)} jurisdictions)")
    return store


def _collect_federal(builder: ProvenanceStoreBuilder, form1040: "Form1040Result") -> None:
    for value in iter_traced_values(form1040):
        if isinstance(value.source, ComputedSource):
            builder.add(value.source.node_id, value)


def _collect_pseudo_nodes(
    builder: ProvenanceStoreBuilder,
    form1040: "Form1040Result",
    tax_return: TaxReturn,
) -> None:
    builder.add("standardDeduction", traced_from_computation(
        form1040.standard_deduction,
        "standardDeduction",
        (),
        description=f"Standard deduction ({tax_return.filing_status.value})",
    ))

    itemized = tax_return.deductions.itemized
    if itemized is not None:
        for node_id, attr in ITEMIZED_INPUT_FIELDS.items():
            builder.add(node_id, traced_from_computation(
                getattr(itemized, attr), node_id, (), description=FEDERAL_NODE_LABELS[node_id]
            ))

    estimated = tax_return.estimated_payments
    if estimated.total > 0:
        for quarter, label in ESTIMATED_TAX_LABELS.items():
            node_id = f"estimatedTax.{quarter}"
            builder.add(node_id, traced_from_user_entry(getattr(estimated, quarter), node_id, description=label))


def _collect_documents(builder: ProvenanceStoreBuilder, tax_return: TaxReturn, include_zero: bool) -> None:
    for kind in DOCUMENT_KINDS:
        for document in getattr(tax_return, kind.collection):
            for field, amount in reported_fields(kind, document):
                if amount == 0 and not include_zero:
                    continue
                builder.add(f"{kind.prefix}:{document.id}:{field}", traced_from_document(
                    amount,
                    kind.document_type,
                    document.id,
                    box_label(field),
                    description=document_description(kind, document, field),
                ))

    for prop in tax_return.schedule_e_properties:
        for field, text in SCHEDULE_E_FIELDS.items():
            amount = schedule_e_amount(prop, field)
            if amount == 0 and not include_zero:
                continue
            builder.add(f"scheduleE:{prop.id}:{field}", traced_from_document(
                amount,
                "Schedule E",
                prop.id,
                text,
                description=f"{property_label(prop.address)} - {text}",
            ))


def _collect_capital_transactions(builder: ProvenanceStoreBuilder, tax_return: TaxReturn, include_zero: bool) -> None:
    """One leaf per broker and Form 8949 box with 1099-Bs on file, else one per sale."""
    if tax_return.form1099_bs:
        groups: Dict[str, list] = {}
        for tx in tax_return.capital_transactions:
            groups.setdefault(transaction_leaf_id(tax_return, tx), []).append(tx)
        for node_id, txs in groups.items():
            amount = sum(t.gain_loss for t in txs)
            if amount == 0 and not include_zero:
                continue
            broker = broker_name_for(tax_return, txs[0])
            category = txs[0].category.value
            builder.add(node_id, traced_from_document(
                amount,
                "1099-B",
                node_id,
                "Net Gain/Loss",
                description=sale_description(broker, len(txs), category),
            ))
        return

    for tx in tax_return.capital_transactions:
        if tx.gain_loss == 0 and not include_zero:
            continue
        builder.add(transaction_leaf_id(tax_return, tx), traced_from_document(
            tx.gain_loss,
            "Transaction",
            tx.id,
            "Gain/Loss",
            description=f"Sale of {tx.description}",
        ))
