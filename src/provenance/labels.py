"""Display labels for the federal node ids."""

from types import MappingProxyType
from typing import Dict

from models.documents import Form8949Category

_LABELS: Dict[str, str] = {
    # Form 1040
    "form1040.line1a": "Wages, salaries, tips",
    "form1040.line1z": "Add lines 1a through 1i",
    "form1040.line2a": "Tax-exempt interest",
    "form1040.line2b": "Taxable interest",
    "form1040.line3a": "Qualified dividends",
    "form1040.line3b": "Ordinary dividends",
    "form1040.line7": "Capital gain or (loss)",
    "form1040.line8": "Other income",
    "form1040.line9": "Total income",
    "form1040.line10": "Adjustments to income",
    "form1040.line11": "Adjusted gross income",
    "form1040.line12": "Deductions",
    "form1040.line13": "Qualified business income deduction",
    "form1040.line14": "Total deductions",
    "form1040.line15": "Taxable income",
    "form1040.line16": "Tax",
    "form1040.line17": "Amount from Schedule 2, Part I",
    "form1040.line18": "Tax + Schedule 2",
    "form1040.line19": "Child tax credit / credit for other dependents",
    "form1040.line20": "Other nonrefundable credits",
    "form1040.line21": "Total credits",
    "form1040.line22": "Tax after credits",
    "form1040.line23": "Other taxes",
    "form1040.line24": "Total tax",
    "form1040.line25": "Federal income tax withheld",
    "form1040.line26": "Estimated tax payments",
    "form1040.line27": "Earned income credit",
    "form1040.line28": "Additional child tax credit",
    "form1040.line32": "Total other payments and refundable credits",
    "form1040.line33": "Total payments",
    "form1040.line34": "Overpaid",
    "form1040.line37": "Amount you owe",

    # Schedule A
    "scheduleA.line1": "Medical and dental expenses",
    "scheduleA.line2": "AGI (from Form 1040)",
    "scheduleA.line3": "AGI x 7.5%",
    "scheduleA.line4": "Medical deduction (excess over floor)",
    "scheduleA.line5a": "State/local income taxes",
    "scheduleA.line5b": "Real estate taxes",
    "scheduleA.line5c": "Personal property taxes",
    "scheduleA.line5e": "State and local taxes (before cap)",
    "scheduleA.line7": "State and local taxes (after cap)",
    "scheduleA.line8a": "Home mortgage interest",
    "scheduleA.line10": "Total interest you paid",
    "scheduleA.line11": "Cash charitable contributions",
    "scheduleA.line12": "Non-cash charitable contributions",
    "scheduleA.line14": "Charitable contributions",
    "scheduleA.line16": "Other itemized deductions",
    "scheduleA.line17": "Total itemized deductions",

    # Schedule 1
    "schedule1.line1": "Taxable refunds of state/local taxes",
    "schedule1.line5": "Rents and royalties",
    "schedule1.line7": "Unemployment compensation",
    "schedule1.line8z": "Other income",
    "schedule1.line10": "Total additional income",

    # Schedule E
    "scheduleE.line23a": "Total rental/royalty income or loss",
    "scheduleE.line25": "Total rental/royalty losses allowed",
    "scheduleE.line26": "Total Schedule E income",

    # Schedule B
    "scheduleB.line4": "Total interest",
    "scheduleB.line6": "Total ordinary dividends",

    # Schedule D
    "scheduleD.line1a": "Short-term gain/loss (Box A)",
    "scheduleD.line1b": "Short-term gain/loss (Box B)",
    "scheduleD.line6": "Short-term capital loss carryover from prior year",
    "scheduleD.line7": "Net short-term capital gain or (loss)",
    "scheduleD.line8a": "Long-term gain/loss (Box D)",
    "scheduleD.line8b": "Long-term gain/loss (Box E)",
    "scheduleD.line13": "Capital gain distributions",
    "scheduleD.line14": "Long-term capital loss carryover from prior year",
    "scheduleD.line15": "Net long-term capital gain or (loss)",
    "scheduleD.line16": "Combined net gain or (loss)",
    "scheduleD.line21": "Capital gain/loss for Form 1040",

    # Child tax credit
    "ctc.initialCredit": "Initial child tax credit",
    "ctc.phaseOutReduction": "CTC phase-out reduction",
    "ctc.creditAfterPhaseOut": "CTC after phase-out",

    # Line 10 components
    "adjustments.ira": "IRA deduction (Schedule 1, Line 20)",
    "adjustments.studentLoan": "Student loan interest deduction (Schedule 1, Line 21)",
    "adjustments.hsa": "HSA deduction (Form 8889)",

    # Pseudo-nodes
    "standardDeduction": "Standard deduction",
    "itemized.medicalExpenses": "Medical expenses",
    "itemized.stateLocalIncomeTaxes": "State/local income taxes",
    "itemized.realEstateTaxes": "Real estate taxes",
    "itemized.personalPropertyTaxes": "Personal property taxes",
    "itemized.mortgageInterest": "Mortgage interest",
    "itemized.charitableCash": "Charitable contributions (cash)",
    "itemized.charitableNoncash": "Charitable contributions (non-cash)",
    "itemized.otherDeductions": "Other itemized deductions",

    # Taxpayer-entered payments
    "estimatedTax.q1": "Q1 estimated payment (Apr 15)",
    "estimatedTax.q2": "Q2 estimated payment (Jun 15)",
    "estimatedTax.q3": "Q3 estimated payment (Sep 15)",
    "estimatedTax.q4": "Q4 estimated payment (Jan 15)",
}

for _category in Form8949Category:
    for _field, _text in (
        ("proceeds", "Total proceeds"),
        ("basis", "Total basis"),
        ("adjustments", "Total adjustments"),
        ("gainLoss", "Total gain/loss"),
    ):
        _LABELS[f"form8949.{_category.value}.{_field}"] = f"Form 8949 Box {_category.value} - {_text}"

FEDERAL_NODE_LABELS = MappingProxyType(_LABELS)
