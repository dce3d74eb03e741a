"""Part-year and nonresident apportionment ratios."""

import calendar
from datetime import date
from decimal import Decimal

from calculator.decimal_math import clamp_ratio, ratio
from models.jurisdiction import JurisdictionConfig, ResidencyType


def days_in_year(tax_year: int) -> int:
    return 366 if calendar.isleap(tax_year) else 365


def apportionment_ratio(jurisdiction: JurisdictionConfig, tax_year: int) -> Decimal:
    """
    Days resident in the state divided by days in the year, clamped to 0..1.

    Returns 1 for full-year residents and 0 for nonresidents. A part-year
    resident with no dates is treated as resident all year.

    >>> from models.jurisdiction import JurisdictionConfig
    >>> apportionment_ratio(JurisdictionConfig(state_code="PA", residency_type="part_year",
    ...     move_in_date=date(2025, 7, 1)), 2025)
    Decimal('0.5041')
    """
    if jurisdiction.residency_type == ResidencyType.FULL_YEAR:
        return Decimal("1")
    if jurisdiction.residency_type == ResidencyType.NONRESIDENT:
        return Decimal("0")

    year_start = date(tax_year, 1, 1)
    year_end = date(tax_year, 12, 31)
    start = max(jurisdiction.move_in_date or year_start, year_start)
    end = min(jurisdiction.move_out_date or year_end, year_end)
    if end < start:
        return Decimal("0")

    days = (end - start).days + 1
    return clamp_ratio(ratio(days, days_in_year(tax_year)))


def income_ratio(state_source_income: int, total_income: int) -> Decimal:
    """State-source share of total income, clamped to 0..1 (0 when total <= 0)."""
    if total_income <= 0:
        return Decimal("0")
    return clamp_ratio(ratio(state_source_income, total_income))
