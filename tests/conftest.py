"""Pytest configuration and fixtures for test suite."""

import sys
import time
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from calculator.state.base_state_calculator import BaseStateCalculator, StateResult
from calculator.state.state_registry import StateCalculatorRegistry
from calculator.state.state_tax_config import StateTaxConfig
from config.settings import EngineSettings
from models import (
    CapitalTransaction,
    Dependent,
    FilingStatus,
    Form1099B,
    Form1099DIV,
    Form1099INT,
    Form8949Category,
    JurisdictionConfig,
    ResidencyType,
    ScheduleEProperty,
    TaxReturn,
    W2,
    traced_from_computation,
)


# =============================================================================
# STUB STATE MODULES
# =============================================================================

class StubStateCalculator(BaseStateCalculator):
    """
    Minimal jurisdiction module for orchestration tests.

    Taxes federal AGI at 1% under ``stub<CODE>.*`` node ids; ``delay``
    makes it finish late when modules run on a thread pool.
    """

    def __init__(self, code: str, delay: float = 0.0, labels=None):
        super().__init__(StateTaxConfig(
            state_code=code,
            state_name=f"State {code}",
            form_label=f"Form {code}",
            tax_year=2025,
            is_flat_tax=True,
            flat_rate=0.01,
        ))
        self.delay = delay
        self._labels = labels if labels is not None else {
            f"stub{code}.tax": f"{code} tax",
            f"stub{code}.stateWithholding": f"{code} withholding",
            f"stub{code}.overpaid": f"{code} overpaid",
            f"stub{code}.amountOwed": f"{code} amount owed",
        }

    @property
    def node_labels(self):
        return dict(self._labels)

    def compute(self, tax_return, federal, jurisdiction):
        if self.delay:
            time.sleep(self.delay)
        prefix = f"stub{self.code}"
        tax = traced_from_computation(
            self.calculate_brackets(federal.agi, tax_return.filing_status.value),
            f"{prefix}.tax",
            ["form1040.line11"],
            f"{self.form_label}, Line 1",
        )
        withholding, overpaid, owed = self.settle(prefix, tax, tax_return)
        return StateResult(
            state_code=self.code,
            form_label=self.form_label,
            residency_type=jurisdiction.residency_type,
            state_agi=federal.agi,
            state_taxable_income=federal.agi,
            state_tax=tax.amount,
            state_credits=0,
            tax_after_credits=tax.amount,
            state_withholding=withholding.amount,
            overpaid=overpaid.amount,
            amount_owed=owed.amount,
            detail=(tax, withholding, overpaid, owed),
        )


@pytest.fixture
def stub_registry():
    """Isolated registry holding stub modules for codes A and B."""
    registry = StateCalculatorRegistry()
    registry.register("A", 2025, StubStateCalculator("A"))
    # B finishes last when run in parallel
    registry.register("B", 2025, StubStateCalculator("B", delay=0.05))
    return registry


# =============================================================================
# SETTINGS
# =============================================================================

@pytest.fixture
def settings():
    """Engine settings isolated from the environment and any .env file."""
    return EngineSettings(_env_file=None)


# =============================================================================
# TAX RETURNS
# =============================================================================

def _make_w2(
    id: str = "w2-1",
    wages: int = 6000000,
    withheld: int = 900000,
    state: str = None,
    state_wages: int = 0,
    state_withheld: int = 0,
) -> W2:
    return W2(
        id=id,
        employer_name="Acme Corp",
        box1=wages,
        box2=withheld,
        box15_state=state,
        box16_state_wages=state_wages,
        box17_state_income_tax=state_withheld,
    )


@pytest.fixture
def single_wage_return():
    """One W-2: $60,000 wages, $9,000 withheld, standard deduction."""
    return TaxReturn(filing_status=FilingStatus.SINGLE, w2s=(_make_w2(),))


@pytest.fixture
def state_wage_return():
    """$60,000 of wages reported to one state, with state withholding."""
    def build(code: str, state_withheld: int = 250000, **kwargs) -> TaxReturn:
        return TaxReturn(
            filing_status=kwargs.pop("filing_status", FilingStatus.SINGLE),
            w2s=(_make_w2(state=code, state_wages=6000000, state_withheld=state_withheld),),
            jurisdictions=kwargs.pop("jurisdictions", (JurisdictionConfig(state_code=code),)),
            **kwargs,
        )
    return build


@pytest.fixture
def busy_return(make_w2):
    """Joint return with three states, both wage states, investments and a rental."""
    return TaxReturn(
        filing_status=FilingStatus.MARRIED_JOINT,
        dependents=(Dependent(relationship="son", age=7),),
        w2s=(
            make_w2(id="w-ca", wages=9000000, withheld=1100000, state="CA",
                    state_wages=9000000, state_withheld=400000),
            make_w2(id="w-pa", wages=3000000, withheld=300000, state="PA",
                    state_wages=3000000, state_withheld=92100),
        ),
        form1099_ints=(Form1099INT(id="i1", payer_name="Ally", box1=120000, box3=20000, box8=5000),),
        form1099_divs=(Form1099DIV(id="d1", payer_name="Vanguard", box1a=300000, box1b=250000, box2a=40000),),
        form1099_bs=(Form1099B(id="b1", broker_name="Schwab"),),
        capital_transactions=(
            CapitalTransaction(id="t1", proceeds=900000, adjusted_basis=400000,
                               category=Form8949Category.D, source_1099b_id="b1"),
            CapitalTransaction(id="t2", proceeds=100000, adjusted_basis=250000,
                               category=Form8949Category.A, source_1099b_id="b1"),
        ),
        schedule_e_properties=(ScheduleEProperty(id="p1", rents_received=2400000, depreciation=900000),),
        jurisdictions=(
            JurisdictionConfig(state_code="PA", residency_type=ResidencyType.PART_YEAR,
                               move_out_date=date(2025, 4, 30)),
            JurisdictionConfig(state_code="CA", residency_type=ResidencyType.PART_YEAR,
                               move_in_date=date(2025, 5, 1), rent_paid=True),
            JurisdictionConfig(state_code="IL", residency_type=ResidencyType.NONRESIDENT),
        ),
    )


@pytest.fixture
def make_w2():
    """Factory for W-2s; defaults to $60,000 wages and $9,000 withheld."""
    return _make_w2


@pytest.fixture
def stub_calculator():
    """The StubStateCalculator class, for tests that build their own registry."""
    return StubStateCalculator


@pytest.fixture
def run_state():
    """Compute federal, then one state module, for a return."""
    from calculator import TaxYearConfig, compute_form_1040

    def run(calculator, tax_return, jurisdiction=None):
        federal = compute_form_1040(tax_return, TaxYearConfig.for_2025())
        if jurisdiction is None:
            jurisdiction = tax_return.jurisdictions[0]
        return calculator.compute(tax_return, federal, jurisdiction)
    return run
