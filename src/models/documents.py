"""
Source documents reported to the taxpayer.

Each document carries a caller-assigned ``id`` unique within its document
type. All money fields are integer cents.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from models.taxpayer import FrozenModel


class W2(FrozenModel):
    """Form W-2 wage statement."""
    id: str
    employer_name: str
    employer_ein: Optional[str] = None
    box1: int = Field(default=0, ge=0, description="Box 1: Wages, tips, other compensation")
    box2: int = Field(default=0, ge=0, description="Box 2: Federal income tax withheld")
    box15_state: Optional[str] = Field(None, description="Box 15: State")
    box16_state_wages: int = Field(default=0, ge=0, description="Box 16: State wages")
    box17_state_income_tax: int = Field(default=0, ge=0, description="Box 17: State income tax")

    @field_validator("box15_state")
    @classmethod
    def normalize_state(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else None


class Form1099INT(FrozenModel):
    """Interest income."""
    id: str
    payer_name: str
    box1: int = Field(default=0, ge=0, description="Box 1: Interest income")
    box3: int = Field(default=0, ge=0, description="Box 3: U.S. savings bonds and Treasury interest")
    box4: int = Field(default=0, ge=0, description="Box 4: Federal income tax withheld")
    box8: int = Field(default=0, ge=0, description="Box 8: Tax-exempt interest")


class Form1099DIV(FrozenModel):
    """Dividends and distributions."""
    id: str
    payer_name: str
    box1a: int = Field(default=0, ge=0, description="Box 1a: Total ordinary dividends")
    box1b: int = Field(default=0, ge=0, description="Box 1b: Qualified dividends")
    box2a: int = Field(default=0, ge=0, description="Box 2a: Total capital gain distributions")
    box4: int = Field(default=0, ge=0, description="Box 4: Federal income tax withheld")
    box11: int = Field(default=0, ge=0, description="Box 11: Exempt-interest dividends")


class Form1099MISC(FrozenModel):
    """Miscellaneous information return."""
    id: str
    payer_name: str
    box1: int = Field(default=0, ge=0, description="Box 1: Rents")
    box2: int = Field(default=0, ge=0, description="Box 2: Royalties")
    box3: int = Field(default=0, ge=0, description="Box 3: Other income")
    box4: int = Field(default=0, ge=0, description="Box 4: Federal income tax withheld")


class Form1099G(FrozenModel):
    """Certain government payments."""
    id: str
    payer_name: str
    box1: int = Field(default=0, ge=0, description="Box 1: Unemployment compensation")
    box2: int = Field(default=0, ge=0, description="Box 2: State or local income tax refund")
    box4: int = Field(default=0, ge=0, description="Box 4: Federal income tax withheld")


class Form1099B(FrozenModel):
    """Broker statement header; individual sales live in CapitalTransaction."""
    id: str
    broker_name: str
    federal_tax_withheld: int = Field(default=0, ge=0)


class Form8949Category(str, Enum):
    """Form 8949 reporting boxes."""
    A = "A"  # short-term, basis reported
    B = "B"  # short-term, basis not reported
    D = "D"  # long-term, basis reported
    E = "E"  # long-term, basis not reported

    @property
    def is_long_term(self) -> bool:
        return self in (Form8949Category.D, Form8949Category.E)


class CapitalTransaction(FrozenModel):
    """One sale of a capital asset."""
    id: str
    description: str = ""
    date_sold: Optional[str] = None
    proceeds: int = Field(default=0, ge=0)
    adjusted_basis: int = Field(default=0, ge=0)
    adjustment_amount: int = Field(default=0, description="Wash sale and other basis adjustments")
    category: Form8949Category
    source_1099b_id: Optional[str] = Field(None, description="1099-B this sale was reported on")

    @property
    def gain_loss(self) -> int:
        return self.proceeds - self.adjusted_basis + self.adjustment_amount


class ScheduleEProperty(FrozenModel):
    """Rental or royalty property reported on Schedule E."""
    id: str
    address: str = ""
    rents_received: int = Field(default=0, ge=0)
    royalties_received: int = Field(default=0, ge=0)
    mortgage_interest: int = Field(default=0, ge=0)
    taxes: int = Field(default=0, ge=0)
    insurance: int = Field(default=0, ge=0)
    repairs: int = Field(default=0, ge=0)
    depreciation: int = Field(default=0, ge=0)
    other_expenses: int = Field(default=0, ge=0)

    @property
    def total_expenses(self) -> int:
        return (
            self.mortgage_interest + self.taxes + self.insurance
            + self.repairs + self.depreciation + self.other_expenses
        )
