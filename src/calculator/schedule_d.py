"""
Schedule D - Capital Gains and Losses, with Form 8949 category totals.

Part I:   Short-term (Lines 1a-7)
Part II:  Long-term (Lines 8a-15)
Part III: Summary (Lines 16, 21)

Losses are limited to $3,000 ($1,500 married filing separately) on Line 21;
the unused portion carries forward.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from models.documents import CapitalTransaction, Form8949Category
from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_computation, traced_zero
from calculator.tax_year_config import TaxYearConfig


def transaction_leaf_id(tax_return: TaxReturn, tx: CapitalTransaction) -> str:
    """
    Node id of the document leaf a sale rolls up into.

    With 1099-B statements on file, sales are grouped per broker and
    Form 8949 box (``broker:<name>:<category>``); otherwise each sale is its
    own leaf (``tx:<id>``).
    """
    if not tax_return.form1099_bs:
        return f"tx:{tx.id}"
    return f"broker:{broker_name_for(tax_return, tx)}:{tx.category.value}"


def broker_name_for(tax_return: TaxReturn, tx: CapitalTransaction) -> str:
    for statement in tax_return.form1099_bs:
        if statement.id == tx.source_1099b_id:
            return statement.broker_name or "Unknown"
    return "Unknown"


def _unique(ids: List[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(ids))


@dataclass(frozen=True)
class Form8949CategoryTotals:
    category: Form8949Category
    transaction_count: int
    total_proceeds: TracedValue
    total_basis: TracedValue
    total_adjustments: TracedValue
    total_gain_loss: TracedValue


def compute_form_8949_totals(
    tax_return: TaxReturn,
    category: Form8949Category,
) -> Form8949CategoryTotals:
    txs = [t for t in tax_return.capital_transactions if t.category == category]
    leaf_ids = _unique([transaction_leaf_id(tax_return, t) for t in txs])
    prefix = f"form8949.{category.value}"
    label = f"Form 8949, Box {category.value}"

    return Form8949CategoryTotals(
        category=category,
        transaction_count=len(txs),
        total_proceeds=traced_from_computation(
            sum(t.proceeds for t in txs), f"{prefix}.proceeds", leaf_ids, f"{label} - Total Proceeds"
        ),
        total_basis=traced_from_computation(
            sum(t.adjusted_basis for t in txs), f"{prefix}.basis", leaf_ids, f"{label} - Total Basis"
        ),
        total_adjustments=traced_from_computation(
            sum(t.adjustment_amount for t in txs), f"{prefix}.adjustments", leaf_ids,
            f"{label} - Total Adjustments",
        ),
        total_gain_loss=traced_from_computation(
            sum(t.gain_loss for t in txs), f"{prefix}.gainLoss", leaf_ids, f"{label} - Total Gain/Loss"
        ),
    )


@dataclass(frozen=True)
class ScheduleDResult:
    categories: Tuple[Form8949CategoryTotals, ...]

    line1a: TracedValue  # Box A gain/loss
    line1b: TracedValue  # Box B gain/loss
    line6: TracedValue  # Short-term loss carryover (negative)
    line7: TracedValue  # Net short-term gain/(loss)

    line8a: TracedValue  # Box D gain/loss
    line8b: TracedValue  # Box E gain/loss
    line13: TracedValue  # Capital gain distributions
    line14: TracedValue  # Long-term loss carryover (negative)
    line15: TracedValue  # Net long-term gain/(loss)

    line16: TracedValue  # Combined
    line21: TracedValue  # Loss-limited amount for Form 1040 Line 7

    capital_loss_carryforward: int

    @property
    def by_category(self) -> Dict[Form8949Category, Form8949CategoryTotals]:
        return {c.category: c for c in self.categories}


def needs_schedule_d(tax_return: TaxReturn) -> bool:
    return bool(
        tax_return.capital_transactions
        or any(f.box2a > 0 for f in tax_return.form1099_divs)
        or tax_return.prior_year.short_term_capital_loss
        or tax_return.prior_year.long_term_capital_loss
    )


def compute_schedule_d(tax_return: TaxReturn, config: TaxYearConfig) -> ScheduleDResult:
    categories = tuple(compute_form_8949_totals(tax_return, c) for c in Form8949Category)
    by_cat = {c.category: c for c in categories}

    def from_category(category: Form8949Category, node_id: str, citation: str) -> TracedValue:
        total = by_cat[category].total_gain_loss
        return traced_from_computation(
            total.amount, node_id, [f"form8949.{category.value}.gainLoss"], citation
        )

    # Part I - short-term
    line1a = from_category(Form8949Category.A, "scheduleD.line1a", "Schedule D, Line 1a")
    line1b = from_category(Form8949Category.B, "scheduleD.line1b", "Schedule D, Line 1b")
    line6 = traced_from_computation(
        -tax_return.prior_year.short_term_capital_loss, "scheduleD.line6", [], "Schedule D, Line 6"
    )
    line7 = traced_from_computation(
        line1a.amount + line1b.amount + line6.amount,
        "scheduleD.line7",
        ["scheduleD.line1a", "scheduleD.line1b", "scheduleD.line6"],
        "Schedule D, Line 7",
    )

    # Part II - long-term
    line8a = from_category(Form8949Category.D, "scheduleD.line8a", "Schedule D, Line 8a")
    line8b = from_category(Form8949Category.E, "scheduleD.line8b", "Schedule D, Line 8b")
    distributions = sum(f.box2a for f in tax_return.form1099_divs)
    if distributions > 0:
        line13 = traced_from_computation(
            distributions,
            "scheduleD.line13",
            [f"1099div:{f.id}:box2a" for f in tax_return.form1099_divs],
            "Schedule D, Line 13",
        )
    else:
        line13 = traced_zero("scheduleD.line13", "Schedule D, Line 13")
    line14 = traced_from_computation(
        -tax_return.prior_year.long_term_capital_loss, "scheduleD.line14", [], "Schedule D, Line 14"
    )
    line15 = traced_from_computation(
        line8a.amount + line8b.amount + line13.amount + line14.amount,
        "scheduleD.line15",
        ["scheduleD.line8a", "scheduleD.line8b", "scheduleD.line13", "scheduleD.line14"],
        "Schedule D, Line 15",
    )

    # Part III
    line16 = traced_from_computation(
        line7.amount + line15.amount,
        "scheduleD.line16",
        ["scheduleD.line7", "scheduleD.line15"],
        "Schedule D, Line 16",
    )

    loss_limit = config.capital_loss_limit[tax_return.filing_status.value]
    if line16.amount >= 0:
        line21_amount = line16.amount
        carryforward = 0
    else:
        line21_amount = max(line16.amount, -loss_limit)
        carryforward = line21_amount - line16.amount

    line21 = traced_from_computation(
        line21_amount, "scheduleD.line21", ["scheduleD.line16"], "Schedule D, Line 21"
    )

    return ScheduleDResult(
        categories=categories,
        line1a=line1a,
        line1b=line1b,
        line6=line6,
        line7=line7,
        line8a=line8a,
        line8b=line8b,
        line13=line13,
        line14=line14,
        line15=line15,
        line16=line16,
        line21=line21,
        capital_loss_carryforward=carryforward,
    )
