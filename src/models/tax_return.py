from typing import Optional, Tuple

from pydantic import Field, model_validator

from models.taxpayer import FrozenModel, FilingStatus, Person, Dependent
from models.documents import (
    W2,
    Form1099INT,
    Form1099DIV,
    Form1099MISC,
    Form1099G,
    Form1099B,
    CapitalTransaction,
    ScheduleEProperty,
)
from models.deductions import Deductions, Adjustments, EstimatedPayments, PriorYearCarryovers
from models.jurisdiction import JurisdictionConfig


# Collections whose ``id`` must be unique within the return.
_DOCUMENT_COLLECTIONS = (
    "w2s",
    "form1099_ints",
    "form1099_divs",
    "form1099_miscs",
    "form1099_gs",
    "form1099_bs",
    "capital_transactions",
    "schedule_e_properties",
)


class TaxReturn(FrozenModel):
    """
    Complete, immutable description of a taxpayer's situation for one run.

    The engine never mutates a TaxReturn; to reflect a change, build a new
    one (``model_copy(update=...)``) and compute again.
    """
    tax_year: int = 2025
    filing_status: FilingStatus = FilingStatus.SINGLE
    taxpayer: Person = Field(default_factory=Person)
    spouse: Optional[Person] = None
    dependents: Tuple[Dependent, ...] = ()

    # Source documents
    w2s: Tuple[W2, ...] = ()
    form1099_ints: Tuple[Form1099INT, ...] = ()
    form1099_divs: Tuple[Form1099DIV, ...] = ()
    form1099_miscs: Tuple[Form1099MISC, ...] = ()
    form1099_gs: Tuple[Form1099G, ...] = ()
    form1099_bs: Tuple[Form1099B, ...] = ()
    capital_transactions: Tuple[CapitalTransaction, ...] = ()
    schedule_e_properties: Tuple[ScheduleEProperty, ...] = ()

    # Elections and other taxpayer-entered inputs
    deductions: Deductions = Field(default_factory=Deductions)
    adjustments: Adjustments = Field(default_factory=Adjustments)
    estimated_payments: EstimatedPayments = Field(default_factory=EstimatedPayments)
    prior_year: PriorYearCarryovers = Field(default_factory=PriorYearCarryovers)

    jurisdictions: Tuple[JurisdictionConfig, ...] = ()

    @model_validator(mode="after")
    def validate_unique_document_ids(self):
        for name in _DOCUMENT_COLLECTIONS:
            seen = set()
            for doc in getattr(self, name):
                if doc.id in seen:
                    raise ValueError(f"Duplicate document id '{doc.id}' in {name}")
                seen.add(doc.id)
        return self

    @property
    def is_joint(self) -> bool:
        return self.filing_status in (FilingStatus.MARRIED_JOINT, FilingStatus.QUALIFYING_WIDOW)

    @property
    def exemption_count(self) -> int:
        """Taxpayer, spouse on a joint return, and each dependent."""
        count = 1 + len(self.dependents)
        if self.filing_status == FilingStatus.MARRIED_JOINT:
            count += 1
        return count
