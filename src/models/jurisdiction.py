from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator, model_validator

from models.taxpayer import FrozenModel


class ResidencyType(str, Enum):
    FULL_YEAR = "full_year"
    PART_YEAR = "part_year"
    NONRESIDENT = "nonresident"


class JurisdictionConfig(FrozenModel):
    """
    A state selected for computation, with its residency parameters.

    Part-year residents give a move-in and/or move-out date; the days
    between them determine the apportionment ratio.
    """
    state_code: str = Field(min_length=1, description="Jurisdiction code, e.g. CA")
    residency_type: ResidencyType = ResidencyType.FULL_YEAR
    move_in_date: Optional[date] = None
    move_out_date: Optional[date] = None
    rent_paid: bool = Field(default=False, description="Paid rent on a principal residence")

    @field_validator("state_code")
    @classmethod
    def normalize_state_code(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_dates(self):
        if self.move_in_date and self.move_out_date and self.move_out_date < self.move_in_date:
            raise ValueError("move_out_date must not precede move_in_date")
        return self
