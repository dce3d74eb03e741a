"""
Schedule A - Itemized Deductions.

Medical (Lines 1-4):     expenses over 7.5% of AGI
Taxes (Lines 5a-7):      SALT, capped; the cap phases down with MAGI
Interest (Lines 8a-10):  home mortgage interest
Gifts (Lines 11-14):     cash limited to 60% of AGI, non-cash to 30%
Other (Line 16)
Total (Line 17)
"""

from dataclasses import dataclass

from models.deductions import ItemizedDeductions
from models.tax_return import TaxReturn
from models.traced import TracedValue, traced_from_computation
from calculator.decimal_math import apply_rate
from calculator.tax_year_config import TaxYearConfig

# Pseudo-node id -> ItemizedDeductions attribute
ITEMIZED_INPUT_FIELDS = {
    "itemized.medicalExpenses": "medical_expenses",
    "itemized.stateLocalIncomeTaxes": "state_local_income_tax",
    "itemized.realEstateTaxes": "real_estate_tax",
    "itemized.personalPropertyTaxes": "personal_property_tax",
    "itemized.mortgageInterest": "mortgage_interest",
    "itemized.charitableCash": "charitable_cash",
    "itemized.charitableNoncash": "charitable_non_cash",
    "itemized.otherDeductions": "other_itemized",
}


@dataclass(frozen=True)
class ScheduleAResult:
    line1: TracedValue
    line2: TracedValue
    line3: TracedValue
    line4: TracedValue
    line5a: TracedValue
    line5b: TracedValue
    line5c: TracedValue
    line5e: TracedValue
    line7: TracedValue
    line8a: TracedValue
    line10: TracedValue
    line11: TracedValue
    line12: TracedValue
    line14: TracedValue
    line16: TracedValue
    line17: TracedValue


def compute_salt_cap(filing_status: str, magi: int, config: TaxYearConfig) -> int:
    """effective cap = max(floor, cap - 30% of MAGI over the threshold)"""
    excess = max(0, magi - config.salt_phaseout_threshold[filing_status])
    reduction = apply_rate(excess, config.salt_phaseout_rate)
    return max(config.salt_floor[filing_status], config.salt_cap[filing_status] - reduction)


def compute_schedule_a(tax_return: TaxReturn, agi: int, config: TaxYearConfig) -> ScheduleAResult:
    d = tax_return.deductions.itemized or ItemizedDeductions()
    status = tax_return.filing_status.value

    def line(amount: int, name: str, inputs) -> TracedValue:
        return traced_from_computation(amount, f"scheduleA.{name}", inputs, f"Schedule A, Line {name[4:]}")

    # Medical
    line1 = line(d.medical_expenses, "line1", ["itemized.medicalExpenses"])
    line2 = line(agi, "line2", ["form1040.line11"])
    line3 = line(apply_rate(max(agi, 0), config.medical_expense_floor_pct), "line3", ["scheduleA.line2"])
    line4 = line(max(0, line1.amount - line3.amount), "line4", ["scheduleA.line1", "scheduleA.line3"])

    # Taxes
    line5a = line(d.state_local_income_tax, "line5a", ["itemized.stateLocalIncomeTaxes"])
    line5b = line(d.real_estate_tax, "line5b", ["itemized.realEstateTaxes"])
    line5c = line(d.personal_property_tax, "line5c", ["itemized.personalPropertyTaxes"])
    line5e = line(
        line5a.amount + line5b.amount + line5c.amount,
        "line5e",
        ["scheduleA.line5a", "scheduleA.line5b", "scheduleA.line5c"],
    )
    line7 = line(min(line5e.amount, compute_salt_cap(status, agi, config)), "line7", ["scheduleA.line5e"])

    # Interest
    line8a = line(d.mortgage_interest, "line8a", ["itemized.mortgageInterest"])
    line10 = line(line8a.amount, "line10", ["scheduleA.line8a"])

    # Gifts to charity
    cash_limit = apply_rate(max(agi, 0), config.charitable_cash_limit_pct)
    line11 = line(min(d.charitable_cash, cash_limit), "line11", ["itemized.charitableCash"])
    line12 = line(
        min(d.charitable_non_cash, apply_rate(max(agi, 0), config.charitable_non_cash_limit_pct)),
        "line12",
        ["itemized.charitableNoncash"],
    )
    line14 = line(
        min(line11.amount + line12.amount, cash_limit), "line14", ["scheduleA.line11", "scheduleA.line12"]
    )

    line16 = line(d.other_itemized, "line16", ["itemized.otherDeductions"])

    line17 = line(
        line4.amount + line7.amount + line10.amount + line14.amount + line16.amount,
        "line17",
        ["scheduleA.line4", "scheduleA.line7", "scheduleA.line10", "scheduleA.line14", "scheduleA.line16"],
    )

    return ScheduleAResult(
        line1=line1,
        line2=line2,
        line3=line3,
        line4=line4,
        line5a=line5a,
        line5b=line5b,
        line5c=line5c,
        line5e=line5e,
        line7=line7,
        line8a=line8a,
        line10=line10,
        line11=line11,
        line12=line12,
        line14=line14,
        line16=line16,
        line17=line17,
    )
