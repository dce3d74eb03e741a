"""
Schedule 1 Part I - Additional Income.

  Line 1  = Taxable state/local refunds (1099-G Box 2, only if itemized last year)
  Line 5  = Rents and royalties (Schedule E Line 26, else 1099-MISC Boxes 1 and 2)
  Line 7  = Unemployment compensation (1099-G Box 1)
  Line 8z = Other income (1099-MISC Box 3)
  Line 10 = Total additional income
"""

from dataclasses import dataclass
from typing import Optional

from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_computation, traced_zero
from calculator.schedule_e import ScheduleEResult


@dataclass(frozen=True)
class Schedule1Result:
    line1: TracedValue
    line5: TracedValue
    line7: TracedValue
    line8z: TracedValue
    line10: TracedValue


def needs_schedule_1(tax_return: TaxReturn) -> bool:
    return bool(tax_return.form1099_miscs or tax_return.form1099_gs or tax_return.schedule_e_properties)


def _line(total: int, node_id: str, inputs, citation: str) -> TracedValue:
    if total == 0:
        return traced_zero(node_id, citation)
    return traced_from_computation(total, node_id, inputs, citation)


def compute_schedule_1(tax_return: TaxReturn, schedule_e: Optional[ScheduleEResult] = None) -> Schedule1Result:
    miscs = tax_return.form1099_miscs
    gs = tax_return.form1099_gs

    if tax_return.prior_year.itemized_last_year:
        line1 = _line(
            sum(g.box2 for g in gs),
            "schedule1.line1",
            [f"1099g:{g.id}:box2" for g in gs if g.box2 > 0],
            "Schedule 1, Line 1",
        )
    else:
        line1 = traced_zero("schedule1.line1", "Schedule 1, Line 1")

    # Schedule E supersedes the 1099-MISC proxy when properties are on file
    if schedule_e is not None:
        line5 = _line(schedule_e.line26.amount, "schedule1.line5", ["scheduleE.line26"], "Schedule 1, Line 5")
    else:
        inputs = []
        for f in miscs:
            if f.box1 > 0:
                inputs.append(f"1099misc:{f.id}:box1")
            if f.box2 > 0:
                inputs.append(f"1099misc:{f.id}:box2")
        line5 = _line(sum(f.box1 + f.box2 for f in miscs), "schedule1.line5", inputs, "Schedule 1, Line 5")

    line7 = _line(
        sum(g.box1 for g in gs),
        "schedule1.line7",
        [f"1099g:{g.id}:box1" for g in gs if g.box1 > 0],
        "Schedule 1, Line 7",
    )
    line8z = _line(
        sum(f.box3 for f in miscs),
        "schedule1.line8z",
        [f"1099misc:{f.id}:box3" for f in miscs if f.box3 > 0],
        "Schedule 1, Line 8z",
    )

    parts = (line1, line5, line7, line8z)
    line10 = _line(
        sum(p.amount for p in parts),
        "schedule1.line10",
        [p.source.node_id for p in parts if p.amount != 0],
        "Schedule 1, Line 10",
    )
    return Schedule1Result(line1=line1, line5=line5, line7=line7, line8z=line8z, line10=line10)
