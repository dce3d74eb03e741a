"""
Schedule E Part I - Supplemental Income and Loss (rental real estate, royalties).

Per property: net = rents + royalties - expenses.
Losses are limited by the passive activity loss special allowance
(IRC 469(i)): $25,000, phased out between $100,000 and $150,000 of modified
AGI. Married filing separately gets no allowance.
"""

from dataclasses import dataclass
from typing import Tuple

from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation

PAL_SPECIAL_ALLOWANCE = 2500000
PAL_PHASEOUT_START = 10000000
PAL_PHASEOUT_RANGE = 5000000


@dataclass(frozen=True)
class ScheduleEPropertyResult:
    property_id: str
    income: TracedValue
    expenses: TracedValue
    net_income: TracedValue


@dataclass(frozen=True)
class ScheduleEResult:
    properties: Tuple[ScheduleEPropertyResult, ...]
    line23a: TracedValue  # Total income or loss before the passive loss limit
    line25: TracedValue  # Losses allowed
    line26: TracedValue  # Total to Schedule 1 Line 5
    disallowed_loss: int  # Carried forward, informational


def passive_loss_allowance(total_loss: int, modified_agi: int, filing_status: FilingStatus) -> int:
    """Allowed portion (positive cents) of a net rental loss."""
    if filing_status == FilingStatus.MARRIED_SEPARATE:
        return 0
    excess = max(0, modified_agi - PAL_PHASEOUT_START)
    # reduction = allowance * excess / range, rounded half up
    reduction = (PAL_SPECIAL_ALLOWANCE * min(excess, PAL_PHASEOUT_RANGE) * 2 + PAL_PHASEOUT_RANGE) // (
        2 * PAL_PHASEOUT_RANGE
    )
    allowance = max(0, PAL_SPECIAL_ALLOWANCE - reduction)
    return min(abs(total_loss), allowance)


def compute_schedule_e(tax_return: TaxReturn, modified_agi: int) -> ScheduleEResult:
    results = []
    for p in tax_return.schedule_e_properties:
        name = p.address or "Property"
        income = traced_from_computation(
            p.rents_received + p.royalties_received,
            f"scheduleE.{p.id}.income",
            [f"scheduleE:{p.id}:rentsReceived", f"scheduleE:{p.id}:royaltiesReceived"],
            f"Schedule E, {name} income",
        )
        expenses = traced_from_computation(
            p.total_expenses,
            f"scheduleE.{p.id}.expenses",
            [f"scheduleE:{p.id}:expenses"],
            f"Schedule E, {name} expenses",
        )
        net = traced_from_computation(
            income.amount - expenses.amount,
            f"scheduleE.{p.id}.net",
            [f"scheduleE.{p.id}.income", f"scheduleE.{p.id}.expenses"],
            f"Schedule E, {name} net",
        )
        results.append(ScheduleEPropertyResult(p.id, income, expenses, net))

    line23a = traced_from_computation(
        sum(r.net_income.amount for r in results),
        "scheduleE.line23a",
        [f"scheduleE.{r.property_id}.net" for r in results],
        "Schedule E, Line 23a",
    )

    disallowed = 0
    if line23a.amount >= 0:
        line25_amount = 0
    else:
        allowed = passive_loss_allowance(line23a.amount, modified_agi, tax_return.filing_status)
        line25_amount = -allowed
        disallowed = line23a.amount - line25_amount

    line25 = traced_from_computation(
        line25_amount, "scheduleE.line25", ["scheduleE.line23a"], "Schedule E, Line 25"
    )
    if line23a.amount >= 0:
        line26 = traced_from_computation(
            line23a.amount, "scheduleE.line26", ["scheduleE.line23a"], "Schedule E, Line 26"
        )
    else:
        line26 = traced_from_computation(
            line25_amount, "scheduleE.line26", ["scheduleE.line25"], "Schedule E, Line 26"
        )

    return ScheduleEResult(
        properties=tuple(results),
        line23a=line23a,
        line25=line25,
        line26=line26,
        disallowed_loss=disallowed,
    )
