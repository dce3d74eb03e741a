"""State tax configuration dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional


# Type alias for bracket tables: filing_status -> [(floor in cents, rate), ...]
StateBracketTable = Dict[str, List[Tuple[int, float]]]


@dataclass(frozen=True)
class StateTaxConfig:
    """
    Configuration for a specific state and tax year.

    Holds the static data a state module needs: identification, brackets
    or flat rate, deductions and exemptions. All amounts are in cents.
    """

    # Basic identification
    state_code: str
    state_name: str
    form_label: str
    tax_year: int

    # Tax structure
    is_flat_tax: bool
    flat_rate: Optional[float] = None  # If is_flat_tax is True
    brackets: Optional[StateBracketTable] = None  # If progressive

    # Standard deduction amounts by filing status
    standard_deduction: Dict[str, int] = field(default_factory=dict)

    # Exemptions: deducted from income (IL) or credited against tax (CA)
    personal_exemption_amount: int = 0
    dependent_exemption_amount: int = 0
    exemption_phaseout_start: Dict[str, int] = field(default_factory=dict)

    # Renter's credit
    renter_credit_single: int = 0
    renter_credit_joint: int = 0
    renter_credit_income_limit_single: Optional[int] = None
    renter_credit_income_limit_joint: Optional[int] = None

    def get_standard_deduction(self, filing_status: str) -> int:
        """Get standard deduction for a filing status."""
        return self.standard_deduction.get(filing_status, 0)

    def get_brackets(self, filing_status: str) -> List[Tuple[int, float]]:
        """Get tax brackets for a filing status."""
        if self.is_flat_tax:
            return [(0, self.flat_rate or 0.0)]
        if self.brackets:
            return self.brackets.get(filing_status, self.brackets.get("single", []))
        return []
