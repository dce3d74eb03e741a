"""
Form 1040 - the base (federal) computation module.

Runs the supporting schedules in dependency order and produces one
TracedValue per line, each naming the node ids it was derived from:

    income (1a-9) -> adjustments (10) -> AGI (11) -> deductions (12-14)
    -> taxable income (15) -> tax (16-18) -> credits (19-22)
    -> total tax (24) -> payments (25-33) -> refund / amount owed (34, 37)

Document-reported amounts are referenced by their leaf ids
(``w2:<id>:box1``, ``1099int:<id>:box1`` ...); the provenance collector
emits those leaves from the TaxReturn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from models.deductions import DeductionMethod
from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_computation, traced_zero
from calculator.tax_year_config import TaxYearConfig
from calculator.tax_computation import (
    compute_ordinary_tax,
    compute_qdcg_tax,
    net_capital_gain_for_qdcg,
)
from calculator.schedule_1 import Schedule1Result, compute_schedule_1, needs_schedule_1
from calculator.schedule_a import ScheduleAResult, compute_schedule_a
from calculator.schedule_b import ScheduleBResult, compute_schedule_b
from calculator.schedule_d import ScheduleDResult, compute_schedule_d, needs_schedule_d
from calculator.schedule_e import ScheduleEResult, compute_schedule_e
from calculator.child_tax_credit import ChildTaxCreditResult, compute_child_tax_credit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Form1040Result:
    """Form 1040 lines plus the schedules that fed them."""

    # Income
    line1a: TracedValue
    line1z: TracedValue
    line2a: TracedValue
    line2b: TracedValue
    line3a: TracedValue
    line3b: TracedValue
    line7: TracedValue
    line8: TracedValue
    line9: TracedValue

    # Adjusted gross income
    line10: TracedValue
    line11: TracedValue

    # Deductions and taxable income
    line12: TracedValue
    line13: TracedValue
    line14: TracedValue
    line15: TracedValue

    # Tax and credits
    line16: TracedValue
    line17: TracedValue
    line18: TracedValue
    line19: TracedValue
    line20: TracedValue
    line21: TracedValue
    line22: TracedValue
    line23: TracedValue
    line24: TracedValue

    # Payments
    line25: TracedValue
    line26: TracedValue
    line27: TracedValue
    line28: TracedValue
    line32: TracedValue
    line33: TracedValue

    # Refund or amount owed
    line34: TracedValue
    line37: TracedValue

    # Schedule 1 Part II adjustment components (nonzero only)
    adjustments: Tuple[TracedValue, ...]

    schedule_b: ScheduleBResult
    schedule_1: Optional[Schedule1Result] = None
    schedule_a: Optional[ScheduleAResult] = None
    schedule_d: Optional[ScheduleDResult] = None
    schedule_e: Optional[ScheduleEResult] = None
    child_tax_credit: Optional[ChildTaxCreditResult] = None

    standard_deduction: int = 0

    @property
    def agi(self) -> int:
        return self.line11.amount

    @property
    def taxable_income(self) -> int:
        return self.line15.amount

    @property
    def total_tax(self) -> int:
        return self.line24.amount


def _sum_line(node_id: str, parts: Tuple[TracedValue, ...], citation: str) -> TracedValue:
    return traced_from_computation(
        sum(p.amount for p in parts),
        node_id,
        [p.source.node_id for p in parts],
        citation,
    )


def _adjustments(tax_return: TaxReturn, config: TaxYearConfig) -> Tuple[TracedValue, ...]:
    adj = tax_return.adjustments
    components = (
        ("adjustments.ira", adj.ira_deduction, "Schedule 1, Line 20"),
        ("adjustments.studentLoan", min(adj.student_loan_interest, config.student_loan_interest_max),
         "Schedule 1, Line 21"),
        ("adjustments.hsa", adj.hsa_deduction, "Schedule 1, Line 13"),
    )
    return tuple(
        traced_from_computation(amount, node_id, [], citation)
        for node_id, amount, citation in components
        if amount > 0
    )


def _withholding_inputs(tax_return: TaxReturn) -> Tuple[Tuple[str, int], ...]:
    inputs = []
    for w2 in tax_return.w2s:
        inputs.append((f"w2:{w2.id}:box2", w2.box2))
    for f in tax_return.form1099_ints:
        inputs.append((f"1099int:{f.id}:box4", f.box4))
    for f in tax_return.form1099_divs:
        inputs.append((f"1099div:{f.id}:box4", f.box4))
    for f in tax_return.form1099_miscs:
        inputs.append((f"1099misc:{f.id}:box4", f.box4))
    for f in tax_return.form1099_gs:
        inputs.append((f"1099g:{f.id}:box4", f.box4))
    for f in tax_return.form1099_bs:
        inputs.append((f"1099b:{f.id}:federalTaxWithheld", f.federal_tax_withheld))
    return tuple(inputs)


def compute_form_1040(tax_return: TaxReturn, config: TaxYearConfig) -> Form1040Result:
    """
    Compute the federal return.

    Args:
        tax_return: Immutable input aggregate
        config: Federal constants for the tax year

    Returns:
        Form1040Result with every line traced
    """
    status = tax_return.filing_status.value

    # ---- Income ---------------------------------------------------------
    w2s = tax_return.w2s
    ints = tax_return.form1099_ints
    divs = tax_return.form1099_divs

    line1a = traced_from_computation(
        sum(w.box1 for w in w2s), "form1040.line1a", [f"w2:{w.id}:box1" for w in w2s], "Form 1040, Line 1a"
    )
    line1z = traced_from_computation(line1a.amount, "form1040.line1z", ["form1040.line1a"], "Form 1040, Line 1z")
    line2a = traced_from_computation(
        sum(f.box8 for f in ints), "form1040.line2a", [f"1099int:{f.id}:box8" for f in ints], "Form 1040, Line 2a"
    )
    line2b = traced_from_computation(
        sum(f.box1 for f in ints), "form1040.line2b", [f"1099int:{f.id}:box1" for f in ints], "Form 1040, Line 2b"
    )
    line3a = traced_from_computation(
        sum(f.box1b for f in divs), "form1040.line3a", [f"1099div:{f.id}:box1b" for f in divs],
        "Form 1040, Line 3a",
    )
    line3b = traced_from_computation(
        sum(f.box1a for f in divs), "form1040.line3b", [f"1099div:{f.id}:box1a" for f in divs],
        "Form 1040, Line 3b",
    )

    schedule_b = compute_schedule_b(tax_return, config)

    schedule_d = compute_schedule_d(tax_return, config) if needs_schedule_d(tax_return) else None
    if schedule_d is not None:
        line7 = traced_from_computation(
            schedule_d.line21.amount, "form1040.line7", ["scheduleD.line21"], "Form 1040, Line 7"
        )
    else:
        line7 = traced_zero("form1040.line7", "Form 1040, Line 7")

    schedule_e = None
    if tax_return.schedule_e_properties:
        # Passive loss allowance uses income before Schedule E
        modified_agi = line1z.amount + line2b.amount + line3b.amount + line7.amount
        schedule_e = compute_schedule_e(tax_return, modified_agi)

    schedule_1 = compute_schedule_1(tax_return, schedule_e) if needs_schedule_1(tax_return) else None
    if schedule_1 is not None and schedule_1.line10.amount != 0:
        line8 = traced_from_computation(
            schedule_1.line10.amount, "form1040.line8", ["schedule1.line10"], "Form 1040, Line 8"
        )
    else:
        line8 = traced_zero("form1040.line8", "Form 1040, Line 8")

    line9 = _sum_line("form1040.line9", (line1z, line2b, line3b, line7, line8), "Form 1040, Line 9")

    # ---- Adjusted gross income -----------------------------------------
    adjustments = _adjustments(tax_return, config)
    line10 = traced_from_computation(
        sum(a.amount for a in adjustments),
        "form1040.line10",
        [a.source.node_id for a in adjustments],
        "Form 1040, Line 10",
    )
    line11 = traced_from_computation(
        line9.amount - line10.amount, "form1040.line11", ["form1040.line9", "form1040.line10"], "Form 1040, Line 11"
    )

    # ---- Deductions -----------------------------------------------------
    standard = config.standard_deduction[status]
    schedule_a = None
    if tax_return.deductions.method == DeductionMethod.ITEMIZED:
        schedule_a = compute_schedule_a(tax_return, line11.amount, config)

    if schedule_a is not None and schedule_a.line17.amount > standard:
        line12 = traced_from_computation(
            schedule_a.line17.amount, "form1040.line12", ["scheduleA.line17"], "Form 1040, Line 12"
        )
    else:
        # Itemizing below the standard deduction still keeps Schedule A for display
        line12 = traced_from_computation(standard, "form1040.line12", ["standardDeduction"], "Form 1040, Line 12")

    line13 = traced_zero("form1040.line13", "Form 1040, Line 13")
    line14 = _sum_line("form1040.line14", (line12, line13), "Form 1040, Line 14")
    line15 = traced_from_computation(
        max(0, line11.amount - line14.amount),
        "form1040.line15",
        ["form1040.line11", "form1040.line14"],
        "Form 1040, Line 15",
    )

    # ---- Tax ------------------------------------------------------------
    net_cg = 0
    if schedule_d is not None:
        net_cg = net_capital_gain_for_qdcg(schedule_d.line15.amount, schedule_d.line16.amount)
    if line3a.amount > 0 or net_cg > 0:
        tax = compute_qdcg_tax(line15.amount, line3a.amount, net_cg, status, config)
    else:
        tax = compute_ordinary_tax(line15.amount, status, config)

    line16 = traced_from_computation(tax, "form1040.line16", ["form1040.line15"], "Form 1040, Line 16")
    line17 = traced_zero("form1040.line17", "Form 1040, Line 17")
    line18 = _sum_line("form1040.line18", (line16, line17), "Form 1040, Line 18")

    # ---- Credits --------------------------------------------------------
    child_tax_credit = None
    if tax_return.dependents:
        child_tax_credit = compute_child_tax_credit(
            tax_return.dependents, status, line11.amount, line18.amount, line1a.amount, config
        )

    if child_tax_credit is not None and child_tax_credit.nonrefundable_credit > 0:
        line19 = traced_from_computation(
            child_tax_credit.nonrefundable_credit,
            "form1040.line19",
            ["ctc.creditAfterPhaseOut", "form1040.line18"],
            "Form 1040, Line 19",
        )
    else:
        line19 = traced_zero("form1040.line19", "Form 1040, Line 19")

    line20 = traced_zero("form1040.line20", "Form 1040, Line 20")
    line21 = _sum_line("form1040.line21", (line19, line20), "Form 1040, Line 21")
    line22 = traced_from_computation(
        max(0, line18.amount - line21.amount),
        "form1040.line22",
        ["form1040.line18", "form1040.line21"],
        "Form 1040, Line 22",
    )
    line23 = traced_zero("form1040.line23", "Form 1040, Line 23")
    line24 = _sum_line("form1040.line24", (line22, line23), "Form 1040, Line 24")

    # ---- Payments -------------------------------------------------------
    withholding = _withholding_inputs(tax_return)
    line25 = traced_from_computation(
        sum(amount for _, amount in withholding),
        "form1040.line25",
        [node_id for node_id, _ in withholding],
        "Form 1040, Line 25",
    )

    estimated = tax_return.estimated_payments
    if estimated.total > 0:
        line26 = traced_from_computation(
            estimated.total,
            "form1040.line26",
            ["estimatedTax.q1", "estimatedTax.q2", "estimatedTax.q3", "estimatedTax.q4"],
            "Form 1040, Line 26",
        )
    else:
        line26 = traced_zero("form1040.line26", "Form 1040, Line 26")

    line27 = traced_zero("form1040.line27", "Form 1040, Line 27")
    if child_tax_credit is not None and child_tax_credit.additional_ctc > 0:
        line28 = traced_from_computation(
            child_tax_credit.additional_ctc,
            "form1040.line28",
            ["ctc.creditAfterPhaseOut", "form1040.line19"],
            "Form 1040, Line 28",
        )
    else:
        line28 = traced_zero("form1040.line28", "Form 1040, Line 28")

    line32 = _sum_line("form1040.line32", (line27, line28), "Form 1040, Line 32")
    line33 = _sum_line("form1040.line33", (line25, line26, line32), "Form 1040, Line 33")

    line34 = traced_from_computation(
        max(0, line33.amount - line24.amount),
        "form1040.line34",
        ["form1040.line33", "form1040.line24"],
        "Form 1040, Line 34",
    )
    line37 = traced_from_computation(
        max(0, line24.amount - line33.amount),
        "form1040.line37",
        ["form1040.line24", "form1040.line33"],
        "Form 1040, Line 37",
    )

    logger.debug(
        f"Form 1040 computed: AGI={line11.amount} taxable={line15.amount} "
        f"total_tax={line24.amount} payments={line33.amount}"
    )

    return Form1040Result(
        line1a=line1a,
        line1z=line1z,
        line2a=line2a,
        line2b=line2b,
        line3a=line3a,
        line3b=line3b,
        line7=line7,
        line8=line8,
        line9=line9,
        line10=line10,
        line11=line11,
        line12=line12,
        line13=line13,
        line14=line14,
        line15=line15,
        line16=line16,
        line17=line17,
        line18=line18,
        line19=line19,
        line20=line20,
        line21=line21,
        line22=line22,
        line23=line23,
        line24=line24,
        line25=line25,
        line26=line26,
        line27=line27,
        line28=line28,
        line32=line32,
        line33=line33,
        line34=line34,
        line37=line37,
        adjustments=adjustments,
        schedule_b=schedule_b,
        schedule_1=schedule_1,
        schedule_a=schedule_a,
        schedule_d=schedule_d,
        schedule_e=schedule_e,
        child_tax_credit=child_tax_credit,
        standard_deduction=standard,
    )
