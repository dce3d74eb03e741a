from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


# filing status -> [(bracket floor in cents, marginal rate), ...] ascending
BracketTable = Dict[str, List[Tuple[int, float]]]


def _cents_table(table: Dict[str, List[Tuple[int, float]]]) -> BracketTable:
    return {
        status: [(floor * 100, rate) for floor, rate in brackets]
        for status, brackets in table.items()
    }


def _cents_map(values: Dict[str, int]) -> Dict[str, int]:
    return {status: amount * 100 for status, amount in values.items()}


@dataclass(frozen=True)
class TaxYearConfig:
    """
    Centralized federal constants for a given tax year, in cents.

    NOTE: Values here should be reviewed annually against IRS published figures.
    The structure is designed to make updates localized and testable.
    """

    tax_year: int
    ordinary_income_brackets: BracketTable
    standard_deduction: Dict[str, int]

    # Qualified Dividends and Capital Gain Tax Worksheet thresholds
    qd_ltcg_0_rate_threshold: Dict[str, int]
    qd_ltcg_15_rate_threshold: Dict[str, int]

    # Schedule D line 21 capital loss limitation
    capital_loss_limit: Dict[str, int]

    # Schedule B is required above this interest or dividend total
    schedule_b_threshold: int = 150000

    # Schedule A
    salt_cap: Optional[Dict[str, int]] = None
    salt_phaseout_threshold: Optional[Dict[str, int]] = None
    salt_phaseout_rate: float = 0.30
    salt_floor: Optional[Dict[str, int]] = None
    medical_expense_floor_pct: float = 0.075  # 7.5% of AGI
    charitable_cash_limit_pct: float = 0.60
    charitable_non_cash_limit_pct: float = 0.30

    # Schedule 1 adjustments
    student_loan_interest_max: int = 250000

    # Child Tax Credit / Credit for Other Dependents
    child_tax_credit_amount: int = 220000
    other_dependent_credit_amount: int = 50000
    child_tax_credit_phaseout_start: Optional[Dict[str, int]] = None
    child_tax_credit_phaseout_step: int = 100000  # each $1,000 (or part) over threshold
    child_tax_credit_phaseout_per_step: int = 5000  # reduces the credit by $50
    child_tax_credit_max_age: int = 16
    additional_ctc_max_per_child: int = 170000
    additional_ctc_earned_income_floor: int = 250000
    additional_ctc_rate: float = 0.15

    def brackets_for(self, filing_status: str) -> List[Tuple[int, float]]:
        return self.ordinary_income_brackets[filing_status]

    @staticmethod
    def for_2025() -> "TaxYearConfig":
        # Ordinary income brackets (marginal rates) for tax year 2025 (filing in 2026).
        brackets = _cents_table({
            "single": [
                (0, 0.10),
                (11925, 0.12),
                (48475, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250525, 0.35),
                (626350, 0.37),
            ],
            "married_joint": [
                (0, 0.10),
                (23850, 0.12),
                (96950, 0.22),
                (206700, 0.24),
                (394600, 0.32),
                (501050, 0.35),
                (751600, 0.37),
            ],
            "married_separate": [
                (0, 0.10),
                (11925, 0.12),
                (48475, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250525, 0.35),
                (375800, 0.37),
            ],
            "head_of_household": [
                (0, 0.10),
                (17000, 0.12),
                (64850, 0.22),
                (103350, 0.24),
                (197300, 0.32),
                (250500, 0.35),
                (626350, 0.37),
            ],
            "qualifying_widow": [
                (0, 0.10),
                (23850, 0.12),
                (96950, 0.22),
                (206700, 0.24),
                (394600, 0.32),
                (501050, 0.35),
                (751600, 0.37),
            ],
        })

        std = _cents_map({
            "single": 15000,
            "married_joint": 30000,
            "married_separate": 15000,
            "head_of_household": 22500,
            "qualifying_widow": 30000,
        })

        # 0% rate applies up to the first threshold, 15% up to the second, 20% above.
        qd_0 = _cents_map({
            "single": 48350,
            "married_joint": 96700,
            "married_separate": 48350,
            "head_of_household": 64750,
            "qualifying_widow": 96700,
        })
        qd_15 = _cents_map({
            "single": 533400,
            "married_joint": 600050,
            "married_separate": 300025,
            "head_of_household": 566700,
            "qualifying_widow": 600050,
        })

        loss_limit = _cents_map({
            "single": 3000,
            "married_joint": 3000,
            "married_separate": 1500,
            "head_of_household": 3000,
            "qualifying_widow": 3000,
        })

        # SALT cap raised to $40,000 for 2025, phased down to a $10,000 floor
        # at 30% of MAGI over $500,000. Halved for married filing separately.
        salt_cap = _cents_map({
            "single": 40000,
            "married_joint": 40000,
            "married_separate": 20000,
            "head_of_household": 40000,
            "qualifying_widow": 40000,
        })
        salt_threshold = _cents_map({
            "single": 500000,
            "married_joint": 500000,
            "married_separate": 250000,
            "head_of_household": 500000,
            "qualifying_widow": 500000,
        })
        salt_floor = _cents_map({
            "single": 10000,
            "married_joint": 10000,
            "married_separate": 5000,
            "head_of_household": 10000,
            "qualifying_widow": 10000,
        })

        ctc_phaseout = _cents_map({
            "single": 200000,
            "married_joint": 400000,
            "married_separate": 200000,
            "head_of_household": 200000,
            "qualifying_widow": 200000,
        })

        return TaxYearConfig(
            tax_year=2025,
            ordinary_income_brackets=brackets,
            standard_deduction=std,
            qd_ltcg_0_rate_threshold=qd_0,
            qd_ltcg_15_rate_threshold=qd_15,
            capital_loss_limit=loss_limit,
            salt_cap=salt_cap,
            salt_phaseout_threshold=salt_threshold,
            salt_floor=salt_floor,
            child_tax_credit_phaseout_start=ctc_phaseout,
        )

    @staticmethod
    def for_year(tax_year: int) -> "TaxYearConfig":
        """
        Tax configuration for a supported year.

        Raises:
            ValueError: If the tax year is not supported
        """
        if tax_year == 2025:
            return TaxYearConfig.for_2025()
        raise ValueError(f"Tax year {tax_year} is not supported. Supported years: 2025")
