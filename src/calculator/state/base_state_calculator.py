"""Base class for state tax modules and the standardized result envelope."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

from calculator.decimal_math import apply_rate, non_negative
from calculator.state.apportionment import apportionment_ratio, income_ratio
from calculator.state.state_tax_config import StateTaxConfig
from calculator.tax_computation import compute_bracket_tax
from models.jurisdiction import JurisdictionConfig, ResidencyType
from models.traced import TracedValue, iter_traced_values, traced_from_computation

if TYPE_CHECKING:
    from calculator.form_1040 import Form1040Result
    from models.tax_return import TaxReturn


@dataclass(frozen=True)
class StateResult:
    """
    Standardized envelope every state module returns.

    The envelope is what quality gates and cross-state comparisons read;
    ``detail`` is the module's own record of traced lines, opaque to the
    engine.
    """

    state_code: str
    form_label: str
    residency_type: ResidencyType

    state_agi: int
    state_taxable_income: int
    state_tax: int
    state_credits: int
    tax_after_credits: int
    state_withholding: int
    overpaid: int
    amount_owed: int

    # Share of the year (or of income) taxed by the state; None for full-year
    apportionment_ratio: Optional[Decimal] = None
    detail: Any = None


class BaseStateCalculator(ABC):
    """
    Abstract base class for state tax modules.

    Each state implements ``compute`` with state-specific logic for:
    - The state's starting income and its additions/subtractions
    - Deductions and exemptions
    - Tax, credits and withholding
    - Part-year / nonresident apportionment

    and declares display labels for every node id it contributes.
    """

    # node id -> display label; every node a module emits should appear here
    NODE_LABELS: Dict[str, str] = {}

    def __init__(self, config: StateTaxConfig):
        self.config = config

    @property
    def code(self) -> str:
        return self.config.state_code

    @property
    def name(self) -> str:
        return self.config.state_name

    @property
    def form_label(self) -> str:
        return self.config.form_label

    @property
    def node_labels(self) -> Dict[str, str]:
        return dict(self.NODE_LABELS)

    @abstractmethod
    def compute(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> StateResult:
        """
        Compute the state return.

        Args:
            tax_return: The immutable input aggregate
            federal: The finished federal result (read-only)
            jurisdiction: Residency parameters for this state

        Returns:
            StateResult envelope with the module's detail attached
        """

    def collect_traced_values(self, result: StateResult) -> Iterator[Tuple[str, TracedValue]]:
        """
        Yield (node_id, value) for every traced line in the module's detail.

        Override when a module needs to emit nodes that are not on its
        detail record.
        """
        for value in iter_traced_values(result.detail):
            yield value.source.node_id, value

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def calculate_brackets(self, taxable_income: int, filing_status: str) -> int:
        """
        Calculate tax using progressive brackets or flat rate.

        Args:
            taxable_income: State taxable income after deductions, in cents
            filing_status: Filing status for bracket lookup

        Returns:
            Tax amount before credits, in cents
        """
        if taxable_income <= 0:
            return 0
        if self.config.is_flat_tax:
            return apply_rate(taxable_income, self.config.flat_rate or 0.0)
        brackets = self.config.get_brackets(self._get_filing_status_key(filing_status))
        if not brackets:
            return 0
        return compute_bracket_tax(taxable_income, brackets)

    def get_state_wages(self, tax_return: "TaxReturn") -> int:
        """W-2 Box 16 wages reported for this state."""
        return sum(w2.box16_state_wages for w2 in tax_return.w2s if w2.box15_state == self.code)

    def get_state_withholding(self, tax_return: "TaxReturn") -> Tuple[int, List[str]]:
        """W-2 Box 17 withholding for this state, with the leaf ids it came from."""
        matching = [w2 for w2 in tax_return.w2s if w2.box15_state == self.code]
        return (
            sum(w2.box17_state_income_tax for w2 in matching),
            [f"w2:{w2.id}:box17" for w2 in matching],
        )

    def get_apportionment_ratio(
        self,
        tax_return: "TaxReturn",
        federal: "Form1040Result",
        jurisdiction: JurisdictionConfig,
    ) -> Optional[Decimal]:
        """
        Ratio applied to whole-year tax.

        Full-year residents: None (no apportionment).
        Part-year residents: days resident / days in year.
        Nonresidents: state-source wages / federal AGI.
        """
        if jurisdiction.residency_type == ResidencyType.FULL_YEAR:
            return None
        if jurisdiction.residency_type == ResidencyType.PART_YEAR:
            return apportionment_ratio(jurisdiction, tax_return.tax_year)
        return income_ratio(self.get_state_wages(tax_return), federal.agi)

    def apportion(self, amount: int, ratio: Optional[Decimal]) -> int:
        if ratio is None:
            return amount
        return apply_rate(amount, ratio)

    def settle(
        self,
        prefix: str,
        tax_after_credits: TracedValue,
        tax_return: "TaxReturn",
    ) -> Tuple[TracedValue, TracedValue, TracedValue]:
        """
        Withholding, overpayment and balance due lines shared by every module.

        Returns:
            (withholding, overpaid, amount_owed) traced under ``prefix``
        """
        withheld, leaf_ids = self.get_state_withholding(tax_return)
        withholding = traced_from_computation(
            withheld, f"{prefix}.stateWithholding", leaf_ids, f"{self.form_label}, state tax withheld"
        )
        balance_inputs = [f"{prefix}.stateWithholding", tax_after_credits.source.node_id]
        overpaid = traced_from_computation(
            non_negative(withheld - tax_after_credits.amount),
            f"{prefix}.overpaid",
            balance_inputs,
            f"{self.form_label}, overpaid",
        )
        owed = traced_from_computation(
            non_negative(tax_after_credits.amount - withheld),
            f"{prefix}.amountOwed",
            balance_inputs,
            f"{self.form_label}, amount you owe",
        )
        return withholding, overpaid, owed

    def _get_filing_status_key(self, filing_status: str) -> str:
        """
        Normalize filing status to match bracket keys.

        Some state configs may use different key formats.
        """
        status_map = {
            "single": "single",
            "married_joint": "married_joint",
            "married_filing_jointly": "married_joint",
            "married_separate": "married_separate",
            "married_filing_separately": "married_separate",
            "head_of_household": "head_of_household",
            "qualifying_widow": "qualifying_widow",
            "qualifying_surviving_spouse": "qualifying_widow",
        }
        return status_map.get(filing_status.lower(), "single")
