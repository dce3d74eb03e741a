"""Schedule B - Interest and Ordinary Dividends."""

from dataclasses import dataclass

from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_computation
from calculator.tax_year_config import TaxYearConfig


@dataclass(frozen=True)
class ScheduleBResult:
    line4: TracedValue  # Total interest
    line6: TracedValue  # Total ordinary dividends
    required: bool  # Either total over the filing threshold


def compute_schedule_b(tax_return: TaxReturn, config: TaxYearConfig) -> ScheduleBResult:
    interest = tax_return.form1099_ints
    dividends = tax_return.form1099_divs

    line4 = traced_from_computation(
        sum(f.box1 for f in interest),
        "scheduleB.line4",
        [f"1099int:{f.id}:box1" for f in interest],
        "Schedule B, Line 4",
    )
    line6 = traced_from_computation(
        sum(f.box1a for f in dividends),
        "scheduleB.line6",
        [f"1099div:{f.id}:box1a" for f in dividends],
        "Schedule B, Line 6",
    )

    required = line4.amount > config.schedule_b_threshold or line6.amount > config.schedule_b_threshold
    return ScheduleBResult(line4=line4, line6=line6, required=required)
