from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    """Base for input-aggregate models: immutable once constructed."""
    model_config = ConfigDict(frozen=True, extra="forbid")


class FilingStatus(str, Enum):
    """IRS filing status options"""
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOW = "qualifying_widow"


class Person(FrozenModel):
    """Primary taxpayer or spouse."""
    first_name: str = ""
    last_name: str = ""
    ssn: Optional[str] = Field(None, description="Social Security Number, 9 digits")
    date_of_birth: Optional[str] = Field(None, description="YYYY-MM-DD")
    state: Optional[str] = Field(None, description="Two-letter state of residence")


class Dependent(FrozenModel):
    """
    Dependent claimed on the return.

    Only the fields the child tax credit reads are modeled: age at year end,
    relationship and months lived with the taxpayer.
    """
    first_name: str = ""
    last_name: str = ""
    relationship: str = Field(description="e.g. son, daughter, parent")
    age: int = Field(ge=0, description="Age at the end of the tax year")
    months_lived_with_taxpayer: int = Field(default=12, ge=0, le=12)
