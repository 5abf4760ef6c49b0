from .charts import ChartService
from .dividend import DividendCalculator, DividendReport, MemberPayout
from .export import ExportFormat, ExportService, ReportPeriod, ReportType
from .loan_repayment import (
    RepaymentSplit,
    monthly_interest,
    split_for_loan,
    split_repayment,
)
from .reconciliation import (
    CashBoxTally,
    CashCount,
    ReconciliationResult,
    daily_cash_box,
    reconcile,
)
from .statements import (
    BalanceSheet,
    ClosingException,
    ClosingSummary,
    IncomeStatement,
    JournalSummary,
    StatementService,
)

__all__ = [
    "BalanceSheet",
    "CashBoxTally",
    "CashCount",
    "ChartService",
    "ClosingException",
    "ClosingSummary",
    "DividendCalculator",
    "DividendReport",
    "ExportFormat",
    "ExportService",
    "IncomeStatement",
    "JournalSummary",
    "MemberPayout",
    "ReconciliationResult",
    "RepaymentSplit",
    "ReportPeriod",
    "ReportType",
    "StatementService",
    "daily_cash_box",
    "monthly_interest",
    "reconcile",
    "split_for_loan",
    "split_repayment",
]
