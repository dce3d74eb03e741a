"""
Pennsylvania PA-40, 2025.

PA does not start from federal AGI. Income is classified from the source
documents into classes, each floored at zero so a loss in one class never
offsets income in another, and the total is taxed at a flat 3.07%.

Nonresidents report PA-source compensation only (W-2 box 15 = PA);
interest, dividends and securities gains are intangible income and not
PA-source. Part-year residents apportion the tax by days resident.

Source: 2025 PA-40 Instructions, Lines 1a-12.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple, TYPE_CHECKING

from calculator.state.base_state_calculator import BaseStateCalculator, StateResult
from calculator.state.state_registry import register_state
from calculator.state.state_tax_config import StateTaxConfig
from models.jurisdiction import JurisdictionConfig, ResidencyType
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


PA_2025 = StateTaxConfig(
    state_code="PA",
    state_name="Pennsylvania",
    form_label="PA-40",
    tax_year=2025,
    is_flat_tax=True,
    flat_rate=0.0307,
)

CITATION = "PA-40"


@dataclass(frozen=True)
class PA40Detail:
    compensation: TracedValue
    interest: TracedValue
    dividends: TracedValue
    net_gains: TracedValue
    rents_royalties: TracedValue
    total_taxable_income: TracedValue
    tax: TracedValue
    tax_after_credits: TracedValue
    state_withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue

    apportionment_ratio: Optional[Decimal] = None


def _income_class(node_id: str, parts: List[Tuple[str, int]], citation: str) -> TracedValue:
    """Sum a PA income class, floored at zero."""
    total = sum(amount for _, amount in parts)
    return traced_from_computation(max(0, total), node_id, [ref for ref, _ in parts], citation)


@register_state("PA", 2025)
class PennsylvaniaCalculator(BaseStateCalculator):
    """Pennsylvania PA-40, flat rate over positive income classes."""

    NODE_LABELS = {
        "pa40.compensation": "PA compensation (Class 1)",
        "pa40.interest": "PA interest (Class 2)",
        "pa40.dividends": "PA dividends (Class 3)",
        "pa40.netGains": "PA net gains (Class 5)",
        "pa40.rentsRoyalties": "PA rents and royalties (Class 6)",
        "pa40.totalTaxableIncome": "Total PA taxable income",
        "pa40.tax": "PA income tax (3.07%)",
        "pa40.taxAfterCredits": "PA tax after credits",
        "pa40.stateWithholding": "PA state income tax withheld",
        "pa40.overpaid": "PA overpaid (refund)",
        "pa40.amountOwed": "PA amount you owe",
    }

    def __init__(self):
        super().__init__(PA_2025)

    def get_apportionment_ratio(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> Optional[Decimal]:
        # Nonresident income is already limited to PA-source classes
        if jurisdiction.residency_type == ResidencyType.NONRESIDENT:
            return Decimal("1")
        return super().get_apportionment_ratio(tax_return, federal, jurisdiction)

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> StateResult:
        nonresident = jurisdiction.residency_type == ResidencyType.NONRESIDENT
        ratio = self.get_apportionment_ratio(tax_return, federal, jurisdiction)

        # Class 1: PA W-2s report state wages in box 16; others use box 1
        wages = []
        for w2 in tax_return.w2s:
            if w2.box15_state == self.code and w2.box16_state_wages > 0:
                wages.append((f"w2:{w2.id}:box16", w2.box16_state_wages))
            elif not nonresident:
                wages.append((f"w2:{w2.id}:box1", w2.box1))
        compensation = _income_class("pa40.compensation", wages, f"{CITATION}, Line 1a")

        interest_parts, dividend_parts, gain_parts, rent_parts = [], [], [], []
        if not nonresident:
            # PA taxes federally tax-exempt interest too
            for f in tax_return.form1099_ints:
                interest_parts += [(f"1099int:{f.id}:box1", f.box1), (f"1099int:{f.id}:box8", f.box8)]
            for f in tax_return.form1099_divs:
                dividend_parts += [(f"1099div:{f.id}:box1a", f.box1a), (f"1099div:{f.id}:box2a", f.box2a)]

            # No capital loss deduction; categories net against each other only
            if federal.schedule_d is not None:
                for totals in federal.schedule_d.categories:
                    if totals.transaction_count:
                        gain_parts.append(
                            (totals.total_gain_loss.source.node_id, totals.total_gain_loss.amount)
                        )
            if federal.schedule_e is not None:
                for prop in federal.schedule_e.properties:
                    rent_parts.append((prop.net_income.source.node_id, prop.net_income.amount))

        interest = _income_class("pa40.interest", interest_parts, f"{CITATION}, Line 2")
        dividends = _income_class("pa40.dividends", dividend_parts, f"{CITATION}, Line 3")
        net_gains = _income_class("pa40.netGains", gain_parts, f"{CITATION}, Line 5")
        rents_royalties = _income_class("pa40.rentsRoyalties", rent_parts, f"{CITATION}, Line 6")

        classes = (compensation, interest, dividends, net_gains, rents_royalties)
        total_taxable_income = traced_from_computation(
            sum(c.amount for c in classes),
            "pa40.totalTaxableIncome",
            [c.source.node_id for c in classes],
            f"{CITATION}, Line 9",
        )

        full_year_tax = self.calculate_brackets(total_taxable_income.amount, tax_return.filing_status.value)
        part_year = jurisdiction.residency_type == ResidencyType.PART_YEAR
        tax = traced_from_computation(
            self.apportion(full_year_tax, ratio if part_year else None),
            "pa40.tax",
            ["pa40.totalTaxableIncome"],
            f"{CITATION}, Line 12",
            f"apportioned at {ratio}" if part_year else None,
        )
        tax_after_credits = traced_from_computation(
            tax.amount, "pa40.taxAfterCredits", ["pa40.tax"], f"{CITATION}, Line 18"
        )

        withholding, overpaid, amount_owed = self.settle("pa40", tax_after_credits, tax_return)

        detail = PA40Detail(
            compensation=compensation,
            interest=interest,
            dividends=dividends,
            net_gains=net_gains,
            rents_royalties=rents_royalties,
            total_taxable_income=total_taxable_income,
            tax=tax,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            overpaid=overpaid,
            amount_owed=amount_owed,
            apportionment_ratio=ratio,
        )

        return StateResult(
            state_code=self.code,
            form_label=self.form_label,
            residency_type=jurisdiction.residency_type,
            state_agi=total_taxable_income.amount,
            state_taxable_income=total_taxable_income.amount,
            state_tax=tax.amount,
            state_credits=0,
            tax_after_credits=tax_after_credits.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=amount_owed.amount,
            apportionment_ratio=ratio,
            detail=detail,
        )
