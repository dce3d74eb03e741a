"""
Child Tax Credit, Credit for Other Dependents, and Additional Child Tax Credit.

Qualifying child: under 17 at year end, a qualifying relationship, and lived
with the taxpayer more than half the year. Any other dependent earns the
$500 credit for other dependents.

Phase-out: $50 for each $1,000 (or fraction) of AGI over the threshold.
The nonrefundable part is capped at the tax on Line 18; the refundable part
(Form 8812, simplified) is 15% of earned income over $2,500, up to $1,700
per qualifying child.
"""

from dataclasses import dataclass
from typing import Sequence

from models.taxpayer import Dependent
from models.traced import TracedValue, traced_from_computation
from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig

QUALIFYING_CHILD_RELATIONSHIPS = frozenset({
    "son", "daughter", "stepchild", "foster child", "sibling", "grandchild",
})


def is_qualifying_child(dependent: Dependent, config: TaxYearConfig) -> bool:
    return (
        dependent.relationship.lower() in QUALIFYING_CHILD_RELATIONSHIPS
        and dependent.months_lived_with_taxpayer > 6
        and dependent.age <= config.child_tax_credit_max_age
    )


@dataclass(frozen=True)
class ChildTaxCreditResult:
    num_qualifying_children: int
    num_other_dependents: int
    initial_credit: TracedValue
    phase_out_reduction: TracedValue
    credit_after_phase_out: TracedValue
    nonrefundable_credit: int  # Form 1040 Line 19
    additional_ctc: int  # Form 1040 Line 28


def compute_child_tax_credit(
    dependents: Sequence[Dependent],
    filing_status: str,
    agi: int,
    tax_liability: int,
    earned_income: int,
    config: TaxYearConfig,
) -> ChildTaxCreditResult:
    num_qc = sum(1 for d in dependents if is_qualifying_child(d, config))
    num_od = len(dependents) - num_qc

    initial = num_qc * config.child_tax_credit_amount + num_od * config.other_dependent_credit_amount

    excess = max(0, agi - config.child_tax_credit_phaseout_start[filing_status])
    steps = -(-excess // config.child_tax_credit_phaseout_step)  # ceiling division
    reduction = min(steps * config.child_tax_credit_phaseout_per_step, initial)
    after_phase_out = max(0, initial - reduction)

    nonrefundable = min(after_phase_out, max(tax_liability, 0))

    additional = 0
    if num_qc > 0 and after_phase_out > nonrefundable:
        max_refundable = num_qc * config.additional_ctc_max_per_child
        earned_based = apply_rate(
            max(0, earned_income - config.additional_ctc_earned_income_floor), config.additional_ctc_rate
        )
        additional = min(max_refundable, earned_based, after_phase_out - nonrefundable)

    return ChildTaxCreditResult(
        num_qualifying_children=num_qc,
        num_other_dependents=num_od,
        initial_credit=traced_from_computation(
            initial, "ctc.initialCredit", [], "Schedule 8812, Line 8"
        ),
        phase_out_reduction=traced_from_computation(
            reduction, "ctc.phaseOutReduction", ["ctc.initialCredit", "form1040.line11"], "Schedule 8812, Line 11"
        ),
        credit_after_phase_out=traced_from_computation(
            after_phase_out,
            "ctc.creditAfterPhaseOut",
            ["ctc.initialCredit", "ctc.phaseOutReduction"],
            "Schedule 8812, Line 12",
        ),
        nonrefundable_credit=nonrefundable,
        additional_ctc=additional,
    )
