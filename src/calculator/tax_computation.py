"""
Bracket math and the Qualified Dividends and Capital Gain Tax Worksheet.

Reference: 2025 Form 1040 instructions, "Qualified Dividends and Capital
Gain Tax Worksheet - Line 16".

All amounts are integer cents.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from calculator.decimal_math import to_cents, to_decimal
from calculator.tax_year_config import TaxYearConfig

Brackets = List[Tuple[int, float]]


def compute_bracket_tax(taxable_income: int, brackets: Brackets) -> int:
    """
    Compute tax on income using progressive brackets.

    Args:
        taxable_income: Amount in cents
        brackets: [(floor, rate), ...] ascending by floor

    Returns:
        Tax in cents, rounded half up once at the end
    """
    if taxable_income <= 0:
        return 0

    tax = Decimal("0")
    for i, (floor, bracket_rate) in enumerate(brackets):
        ceiling: Optional[int] = brackets[i + 1][0] if i + 1 < len(brackets) else None
        if taxable_income <= floor:
            break
        top = taxable_income if ceiling is None else min(taxable_income, ceiling)
        tax += Decimal(top - floor) * to_decimal(bracket_rate)

    return to_cents(tax)


def compute_ordinary_tax(taxable_income: int, filing_status: str, config: TaxYearConfig) -> int:
    return compute_bracket_tax(taxable_income, config.brackets_for(filing_status))


def net_capital_gain_for_qdcg(schedule_d_line15: int, schedule_d_line16: int) -> int:
    """Smaller of Schedule D lines 15 and 16; zero if either is zero or a loss."""
    if schedule_d_line15 <= 0 or schedule_d_line16 <= 0:
        return 0
    return min(schedule_d_line15, schedule_d_line16)


def _preferential_brackets(filing_status: str, config: TaxYearConfig) -> Brackets:
    return [
        (0, 0.0),
        (config.qd_ltcg_0_rate_threshold[filing_status], 0.15),
        (config.qd_ltcg_15_rate_threshold[filing_status], 0.20),
    ]


def compute_qdcg_tax(
    taxable_income: int,
    qualified_dividends: int,
    net_capital_gain: int,
    filing_status: str,
    config: TaxYearConfig,
) -> int:
    """
    Tax with preferential 0/15/20% rates on qualified dividends and net capital gain.

    Preferential income stacks on top of ordinary income. The result is never
    more than the all-ordinary tax.
    """
    if taxable_income <= 0:
        return 0

    preferential = min(qualified_dividends + net_capital_gain, taxable_income)
    all_ordinary = compute_ordinary_tax(taxable_income, filing_status, config)
    if preferential <= 0:
        return all_ordinary

    ordinary_income = taxable_income - preferential
    ordinary_tax = compute_ordinary_tax(ordinary_income, filing_status, config)

    # Intersect each preferential bracket with [ordinary_income, taxable_income]
    brackets = _preferential_brackets(filing_status, config)
    pref_tax = Decimal("0")
    for i, (floor, bracket_rate) in enumerate(brackets):
        ceiling = brackets[i + 1][0] if i + 1 < len(brackets) else None
        bottom = max(floor, ordinary_income)
        top = taxable_income if ceiling is None else min(ceiling, taxable_income)
        if top > bottom:
            pref_tax += Decimal(top - bottom) * to_decimal(bracket_rate)

    return min(ordinary_tax + to_cents(pref_tax), all_ordinary)
