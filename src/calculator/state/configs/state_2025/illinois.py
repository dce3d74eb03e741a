"""
Illinois Form IL-1040, 2025.

IL starts from federal AGI, adds federally tax-exempt interest and
dividends, subtracts US government interest and (when the taxpayer
itemized last year) the IL refund included federally. There is no
standard deduction; each exemption is worth $2,850. Flat 4.95% rate.

Part-year residents and nonresidents apportion net income before the
rate is applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from calculator.decimal_math import non_negative
from calculator.state.base_state_calculator import BaseStateCalculator, StateResult
from calculator.state.state_registry import register_state
from calculator.state.state_tax_config import StateTaxConfig
from models.jurisdiction import JurisdictionConfig
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


IL_2025 = StateTaxConfig(
    state_code="IL",
    state_name="Illinois",
    form_label="IL-1040",
    tax_year=2025,
    is_flat_tax=True,
    flat_rate=0.0495,
    personal_exemption_amount=285000,
    dependent_exemption_amount=285000,
)

CITATION = "IL-1040"


@dataclass(frozen=True)
class IL1040Detail:
    federal_agi: TracedValue
    additions: TracedValue
    subtractions: TracedValue
    base_income: TracedValue
    exemption: TracedValue
    net_income: TracedValue
    taxable_income: TracedValue
    tax: TracedValue
    tax_after_credits: TracedValue
    state_withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue

    exemption_count: int = 1
    apportionment_ratio: Optional[Decimal] = None


@register_state("IL", 2025)
class IllinoisCalculator(BaseStateCalculator):
    """Illinois IL-1040, flat rate with per-person exemptions."""

    NODE_LABELS = {
        "il1040.federalAGI": "Federal AGI (IL-1040 Line 1)",
        "il1040.additions": "IL additions (Schedule M)",
        "il1040.subtractions": "IL subtractions (Schedule M)",
        "il1040.baseIncome": "Illinois base income",
        "il1040.exemption": "IL exemption allowance",
        "il1040.netIncome": "Illinois net income",
        "il1040.taxableIncome": "Illinois taxable income",
        "il1040.tax": "Illinois income tax (4.95%)",
        "il1040.taxAfterCredits": "IL tax after credits",
        "il1040.stateWithholding": "IL state income tax withheld",
        "il1040.overpaid": "IL overpaid (refund)",
        "il1040.amountOwed": "IL amount you owe",
    }

    def __init__(self):
        super().__init__(IL_2025)

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> StateResult:
        ratio = self.get_apportionment_ratio(tax_return, federal, jurisdiction)

        federal_agi = traced_from_computation(
            federal.agi, "il1040.federalAGI", ["form1040.line11"], f"{CITATION}, Line 1"
        )

        # Tax-exempt interest (1099-INT box 8) and exempt-interest dividends (1099-DIV box 11)
        addition_parts = [(f"1099int:{f.id}:box8", f.box8) for f in tax_return.form1099_ints]
        addition_parts += [(f"1099div:{f.id}:box11", f.box11) for f in tax_return.form1099_divs]
        additions = traced_from_computation(
            sum(amount for _, amount in addition_parts),
            "il1040.additions",
            [node_id for node_id, _ in addition_parts],
            f"{CITATION}, Line 3",
        )

        subtraction_parts = [(f"1099int:{f.id}:box3", f.box3) for f in tax_return.form1099_ints]
        if tax_return.prior_year.itemized_last_year:
            subtraction_parts += [(f"1099g:{g.id}:box2", g.box2) for g in tax_return.form1099_gs]
        subtractions = traced_from_computation(
            sum(amount for _, amount in subtraction_parts),
            "il1040.subtractions",
            [node_id for node_id, _ in subtraction_parts],
            f"{CITATION}, Line 7",
        )

        base_income = traced_from_computation(
            non_negative(federal_agi.amount + additions.amount - subtractions.amount),
            "il1040.baseIncome",
            ["il1040.federalAGI", "il1040.additions", "il1040.subtractions"],
            f"{CITATION}, Line 9",
        )

        exemption_count = tax_return.exemption_count
        exemption = traced_from_computation(
            exemption_count * self.config.personal_exemption_amount,
            "il1040.exemption",
            [],
            f"{CITATION}, Line 10",
            f"{exemption_count} x $2,850",
        )

        net_income = traced_from_computation(
            non_negative(base_income.amount - exemption.amount),
            "il1040.netIncome",
            ["il1040.baseIncome", "il1040.exemption"],
            f"{CITATION}, Line 11",
        )
        taxable_income = traced_from_computation(
            self.apportion(net_income.amount, ratio),
            "il1040.taxableIncome",
            ["il1040.netIncome"],
            f"{CITATION}, Line 11",
            f"apportioned at {ratio}" if ratio is not None else None,
        )

        tax = traced_from_computation(
            self.calculate_brackets(taxable_income.amount, tax_return.filing_status.value),
            "il1040.tax",
            ["il1040.taxableIncome"],
            f"{CITATION}, Line 12",
        )
        tax_after_credits = traced_from_computation(
            tax.amount, "il1040.taxAfterCredits", ["il1040.tax"], f"{CITATION}, Line 25"
        )

        withholding, overpaid, amount_owed = self.settle("il1040", tax_after_credits, tax_return)

        detail = IL1040Detail(
            federal_agi=federal_agi,
            additions=additions,
            subtractions=subtractions,
            base_income=base_income,
            exemption=exemption,
            net_income=net_income,
            taxable_income=taxable_income,
            tax=tax,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            overpaid=overpaid,
            amount_owed=amount_owed,
            exemption_count=exemption_count,
            apportionment_ratio=ratio,
        )

        return StateResult(
            state_code=self.code,
            form_label=self.form_label,
            residency_type=jurisdiction.residency_type,
            state_agi=base_income.amount,
            state_taxable_income=taxable_income.amount,
            state_tax=tax.amount,
            state_credits=0,
            tax_after_credits=tax_after_credits.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=amount_owed.amount,
            apportionment_ratio=ratio,
            detail=detail,
        )
