"""
California Form 540 - Resident Income Tax Return, 2025.

CA starts from federal AGI, adds back the HSA deduction (CA does not
conform to IRC 223), and applies its own standard or itemized deduction:

    caAGI -> caDeduction -> caTaxableIncome -> caTax (9 brackets)
    -> exemption credits / mental health tax / renter's credit
    -> taxAfterCredits -> withholding -> overpaid / amountOwed

Part-year residents and nonresidents compute the whole-year tax, then
apportion tax, mental health tax and exemption credits by the ratio.

Sources: FTB 2025 Tax Rate Schedules, 2025 Form 540 Instructions.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from calculator.decimal_math import apply_rate, non_negative
from calculator.state.base_state_calculator import BaseStateCalculator, StateResult
from calculator.state.state_registry import register_state
from calculator.state.state_tax_config import StateTaxConfig
from models.deductions import DeductionMethod
from models.jurisdiction import JurisdictionConfig, ResidencyType
from models.taxpayer import FilingStatus
from models.traced import TracedValue, traced_from_computation

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


_SINGLE = [
    (0, 0.01), (11079, 0.02), (26264, 0.04), (41452, 0.06), (57542, 0.08),
    (72724, 0.093), (371479, 0.103), (445771, 0.113), (742953, 0.123),
]
_JOINT = [
    (0, 0.01), (22158, 0.02), (52528, 0.04), (82904, 0.06), (115084, 0.08),
    (145448, 0.093), (742958, 0.103), (891542, 0.113), (1485906, 0.123),
]
_HOH = [
    (0, 0.01), (22173, 0.02), (52530, 0.04), (67716, 0.06), (83805, 0.08),
    (98990, 0.093), (505208, 0.103), (606251, 0.113), (1010417, 0.123),
]


def _in_cents(brackets):
    return [(floor * 100, rate) for floor, rate in brackets]


CA_2025 = StateTaxConfig(
    state_code="CA",
    state_name="California",
    form_label="CA Form 540",
    tax_year=2025,
    is_flat_tax=False,
    brackets={
        "single": _in_cents(_SINGLE),
        "married_separate": _in_cents(_SINGLE),
        "married_joint": _in_cents(_JOINT),
        "qualifying_widow": _in_cents(_JOINT),
        "head_of_household": _in_cents(_HOH),
    },
    standard_deduction={
        "single": 570600,
        "married_separate": 570600,
        "married_joint": 1141200,
        "qualifying_widow": 1141200,
        "head_of_household": 1141200,
    },
    # Exemption credits, not deductions
    personal_exemption_amount=15300,
    dependent_exemption_amount=47500,
    exemption_phaseout_start={
        "single": 25220300,
        "married_separate": 25220300,
        "married_joint": 50441100,
        "qualifying_widow": 50441100,
        "head_of_household": 37831000,
    },
    renter_credit_single=6000,
    renter_credit_joint=12000,
    renter_credit_income_limit_single=5399400,
    renter_credit_income_limit_joint=10798700,
)

# 1% on taxable income over $1M, not doubled for joint filers
MENTAL_HEALTH_THRESHOLD = 100000000
MENTAL_HEALTH_RATE = 0.01

# Credits drop 6% for each $2,500 (or fraction) of AGI over the threshold
EXEMPTION_PHASEOUT_STEP = 250000
EXEMPTION_PHASEOUT_RATE = Decimal("0.06")

MEDICAL_FLOOR_RATE = 0.075

CITATION = "CA Form 540"


@dataclass(frozen=True)
class Form540Detail:
    """Traced Form 540 lines."""

    ca_agi: TracedValue
    ca_deduction: TracedValue
    ca_taxable_income: TracedValue
    ca_tax: TracedValue
    mental_health_tax: TracedValue
    exemption_credits: TracedValue
    renters_credit: TracedValue
    tax_after_credits: TracedValue
    state_withholding: TracedValue
    overpaid: TracedValue
    amount_owed: TracedValue

    hsa_add_back: Optional[TracedValue] = None
    deduction_method: DeductionMethod = DeductionMethod.STANDARD
    apportionment_ratio: Optional[Decimal] = None


def compute_exemption_credits(filing_status: FilingStatus, num_dependents: int, ca_agi: int) -> int:
    """
    Personal ($153 each, two for married filers) plus dependent ($475 each)
    exemption credits after the high-income phase-out.
    """
    personal_count = 2 if filing_status in (FilingStatus.MARRIED_JOINT, FilingStatus.MARRIED_SEPARATE) else 1
    total = (
        personal_count * CA_2025.personal_exemption_amount
        + num_dependents * CA_2025.dependent_exemption_amount
    )

    threshold = CA_2025.exemption_phaseout_start[filing_status.value]
    if ca_agi <= threshold:
        return total
    increments = -(-(ca_agi - threshold) // EXEMPTION_PHASEOUT_STEP)  # ceiling division
    reduction = min(apply_rate(total, increments * EXEMPTION_PHASEOUT_RATE), total)
    return total - reduction


def compute_renters_credit(filing_status: FilingStatus, ca_agi: int, rent_paid: bool) -> int:
    if not rent_paid:
        return 0
    if filing_status in (FilingStatus.SINGLE, FilingStatus.MARRIED_SEPARATE):
        credit, limit = CA_2025.renter_credit_single, CA_2025.renter_credit_income_limit_single
    else:
        credit, limit = CA_2025.renter_credit_joint, CA_2025.renter_credit_income_limit_joint
    return credit if ca_agi <= limit else 0


@register_state("CA", 2025)
class CaliforniaCalculator(BaseStateCalculator):
    """California Form 540."""

    NODE_LABELS = {
        "scheduleCA.hsaAddBack": "HSA deduction add-back (CA)",
        "form540.caAGI": "California adjusted gross income",
        "form540.caDeduction": "California deduction",
        "form540.caTaxableIncome": "California taxable income",
        "form540.caTax": "California tax",
        "form540.mentalHealthTax": "Mental health services tax (1%)",
        "form540.exemptionCredits": "CA exemption credits",
        "form540.rentersCredit": "CA renter's credit",
        "form540.taxAfterCredits": "CA tax after credits",
        "form540.stateWithholding": "CA state income tax withheld",
        "form540.overpaid": "CA overpaid (refund)",
        "form540.amountOwed": "CA amount you owe",
    }

    def __init__(self):
        super().__init__(CA_2025)

    def _itemized(self, tax_return: "TaxReturn", federal: "Form1040Result", ca_agi: int):
        """
        CA itemized deductions: federal Schedule A without state income tax,
        without the SALT cap, with the medical floor on CA AGI.
        """
        d = tax_return.deductions.itemized
        schedule_a = federal.schedule_a
        if d is None or schedule_a is None:
            return 0, []

        medical = non_negative(d.medical_expenses - apply_rate(ca_agi, MEDICAL_FLOOR_RATE))
        taxes = d.real_estate_tax + d.personal_property_tax
        amount = (
            medical
            + taxes
            + d.mortgage_interest
            + schedule_a.line14.amount
            + schedule_a.line16.amount
        )
        inputs = [
            "itemized.medicalExpenses",
            "form540.caAGI",
            "itemized.realEstateTaxes",
            "itemized.personalPropertyTaxes",
            "itemized.mortgageInterest",
            "scheduleA.line14",
            "scheduleA.line16",
        ]
        return amount, inputs

    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> StateResult:
        status = tax_return.filing_status
        ratio = self.get_apportionment_ratio(tax_return, federal, jurisdiction)
        apportioned = f"apportioned at {ratio}" if ratio is not None else None

        # ---- Income (Schedule CA) ---------------------------------------
        hsa = tax_return.adjustments.hsa_deduction
        hsa_add_back = None
        agi_inputs = ["form1040.line11"]
        if hsa > 0:
            hsa_add_back = traced_from_computation(
                hsa, "scheduleCA.hsaAddBack", ["adjustments.hsa"], "Schedule CA, HSA add-back"
            )
            agi_inputs.append("scheduleCA.hsaAddBack")
        ca_agi = traced_from_computation(
            federal.agi + hsa, "form540.caAGI", agi_inputs, f"{CITATION}, Line 17"
        )

        # ---- Deduction ----------------------------------------------------
        standard = self.config.get_standard_deduction(status.value)
        itemized, itemized_inputs = 0, []
        if tax_return.deductions.method == DeductionMethod.ITEMIZED:
            itemized, itemized_inputs = self._itemized(tax_return, federal, ca_agi.amount)

        if itemized > standard:
            method = DeductionMethod.ITEMIZED
            ca_deduction = traced_from_computation(
                itemized, "form540.caDeduction", itemized_inputs, f"{CITATION}, Line 18",
                "CA itemized deduction",
            )
        else:
            method = DeductionMethod.STANDARD
            ca_deduction = traced_from_computation(
                standard, "form540.caDeduction", [], f"{CITATION}, Line 18", "CA standard deduction"
            )

        taxable = non_negative(ca_agi.amount - ca_deduction.amount)
        ca_taxable_income = traced_from_computation(
            taxable, "form540.caTaxableIncome", ["form540.caAGI", "form540.caDeduction"],
            f"{CITATION}, Line 19",
        )

        # ---- Tax and credits ----------------------------------------------
        full_year_tax = self.calculate_brackets(taxable, status.value)
        ca_tax = traced_from_computation(
            self.apportion(full_year_tax, ratio), "form540.caTax", ["form540.caTaxableIncome"],
            f"{CITATION}, Line 31", apportioned,
        )

        mental_health = 0
        if taxable > MENTAL_HEALTH_THRESHOLD:
            mental_health = apply_rate(taxable - MENTAL_HEALTH_THRESHOLD, MENTAL_HEALTH_RATE)
        mental_health_tax = traced_from_computation(
            self.apportion(mental_health, ratio), "form540.mentalHealthTax", ["form540.caTaxableIncome"],
            f"{CITATION}, Line 62", apportioned,
        )

        exemptions = compute_exemption_credits(status, len(tax_return.dependents), ca_agi.amount)
        exemption_credits = traced_from_computation(
            self.apportion(exemptions, ratio), "form540.exemptionCredits", ["form540.caAGI"],
            f"{CITATION}, Line 32", apportioned,
        )

        # Nonresidents cannot claim the renter's credit
        rent_paid = jurisdiction.rent_paid and jurisdiction.residency_type != ResidencyType.NONRESIDENT
        renters_credit = traced_from_computation(
            compute_renters_credit(status, ca_agi.amount, rent_paid), "form540.rentersCredit",
            ["form540.caAGI"], f"{CITATION}, Line 46",
        )

        net_tax = non_negative(ca_tax.amount - exemption_credits.amount) + mental_health_tax.amount
        tax_after_credits = traced_from_computation(
            non_negative(net_tax - renters_credit.amount),
            "form540.taxAfterCredits",
            ["form540.caTax", "form540.exemptionCredits", "form540.mentalHealthTax", "form540.rentersCredit"],
            f"{CITATION}, Line 48",
        )

        withholding, overpaid, amount_owed = self.settle("form540", tax_after_credits, tax_return)

        detail = Form540Detail(
            hsa_add_back=hsa_add_back,
            ca_agi=ca_agi,
            ca_deduction=ca_deduction,
            ca_taxable_income=ca_taxable_income,
            ca_tax=ca_tax,
            mental_health_tax=mental_health_tax,
            exemption_credits=exemption_credits,
            renters_credit=renters_credit,
            tax_after_credits=tax_after_credits,
            state_withholding=withholding,
            overpaid=overpaid,
            amount_owed=amount_owed,
            deduction_method=method,
            apportionment_ratio=ratio,
        )

        return StateResult(
            state_code=self.code,
            form_label=self.form_label,
            residency_type=jurisdiction.residency_type,
            state_agi=ca_agi.amount,
            state_taxable_income=ca_taxable_income.amount,
            state_tax=ca_tax.amount + mental_health_tax.amount,
            state_credits=exemption_credits.amount + renters_credit.amount,
            tax_after_credits=tax_after_credits.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=amount_owed.amount,
            apportionment_ratio=ratio,
            detail=detail,
        )
