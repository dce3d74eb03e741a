from enum import Enum
from typing import Optional

from pydantic import Field

from models.taxpayer import FrozenModel


class DeductionMethod(str, Enum):
    STANDARD = "standard"
    ITEMIZED = "itemized"


class ItemizedDeductions(FrozenModel):
    """Itemized deduction details (Schedule A). Amounts in cents."""
    medical_expenses: int = Field(default=0, ge=0)
    state_local_income_tax: int = Field(default=0, ge=0)
    real_estate_tax: int = Field(default=0, ge=0)
    personal_property_tax: int = Field(default=0, ge=0)
    mortgage_interest: int = Field(default=0, ge=0)
    charitable_cash: int = Field(default=0, ge=0)
    charitable_non_cash: int = Field(default=0, ge=0)
    other_itemized: int = Field(default=0, ge=0)


class Deductions(FrozenModel):
    """
    Deduction election.

    ``method=itemized`` with no ``itemized`` block itemizes zero; the engine
    does not second-guess the election.
    """
    method: DeductionMethod = DeductionMethod.STANDARD
    itemized: Optional[ItemizedDeductions] = None


class Adjustments(FrozenModel):
    """Schedule 1 Part II adjustments to income."""
    ira_deduction: int = Field(default=0, ge=0)
    student_loan_interest: int = Field(default=0, ge=0, description="Capped at $2,500")
    hsa_deduction: int = Field(default=0, ge=0)


class EstimatedPayments(FrozenModel):
    """Quarterly estimated tax payments (Form 1040-ES)."""
    q1: int = Field(default=0, ge=0)
    q2: int = Field(default=0, ge=0)
    q3: int = Field(default=0, ge=0)
    q4: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.q1 + self.q2 + self.q3 + self.q4


class PriorYearCarryovers(FrozenModel):
    """Prior-year facts that carry into this return (capital loss carryovers, itemizing)."""
    short_term_capital_loss: int = Field(default=0, ge=0)
    long_term_capital_loss: int = Field(default=0, ge=0)
    itemized_last_year: bool = Field(default=False, description="State refunds are taxable only if the taxpayer itemized last year")
