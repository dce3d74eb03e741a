from .taxpayer import FilingStatus, Person, Dependent
from .documents import (
    W2,
    Form1099INT,
    Form1099DIV,
    Form1099MISC,
    Form1099G,
    Form1099B,
    Form8949Category,
    CapitalTransaction,
    ScheduleEProperty,
)
from .deductions import (
    DeductionMethod,
    Deductions,
    ItemizedDeductions,
    Adjustments,
    EstimatedPayments,
    PriorYearCarryovers,
)
from .jurisdiction import ResidencyType, JurisdictionConfig
from .traced import (
    TracedValue,
    DocumentSource,
    ComputedSource,
    UserEntrySource,
    ValueSource,
    cents,
    dollars,
    traced_from_document,
    traced_from_computation,
    traced_from_user_entry,
    traced_zero,
    iter_traced_values,
)
from .tax_return import TaxReturn

__all__ = [
    'FilingStatus',
    'Person',
    'Dependent',
    'W2',
    'Form1099INT',
    'Form1099DIV',
    'Form1099MISC',
    'Form1099G',
    'Form1099B',
    'Form8949Category',
    'CapitalTransaction',
    'ScheduleEProperty',
    'DeductionMethod',
    'Deductions',
    'ItemizedDeductions',
    'Adjustments',
    'EstimatedPayments',
    'PriorYearCarryovers',
    'ResidencyType',
    'JurisdictionConfig',
    'TracedValue',
    'DocumentSource',
    'ComputedSource',
    'UserEntrySource',
    'ValueSource',
    'cents',
    'dollars',
    'traced_from_document',
    'traced_from_computation',
    'traced_from_user_entry',
    'traced_zero',
    'iter_traced_values',
    'TaxReturn',
]
