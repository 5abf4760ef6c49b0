"""
Export service for cooperative reports.

Serialises computed statements into XLSX and CSV workbooks. Every report
starts with the same header block (organisation, report title, period).
"""

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional, cast

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from coopledger.config import ORGANIZATION_NAME
from coopledger.exceptions import ExportError

from .dividend import DividendReport
from .statements import BalanceSheet, JournalSummary

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"


class ReportType(str, Enum):
    """Reports that can be exported."""

    BALANCE_SHEET = "balance-sheet"
    INCOME_EXPENSE = "income-expense"
    DIVIDEND = "dividend"


_FILENAME_STEMS = {
    ReportType.BALANCE_SHEET: "BalanceSheet",
    ReportType.INCOME_EXPENSE: "IncomeExpense_Report",
    ReportType.DIVIDEND: "Dividend_Distribution",
}

_TITLES = {
    ReportType.BALANCE_SHEET: "Statement of Financial Position",
    ReportType.INCOME_EXPENSE: "Statement of Income & Expenses",
    ReportType.DIVIDEND: "Dividend & Average Return Distribution",
}


@dataclass(frozen=True)
class ReportPeriod:
    start: date
    end: date

    def label(self) -> str:
        return f"Period: {self.start.isoformat()} to {self.end.isoformat()}"


Row = list[Any]


class ExportService:
    """Service for exporting reports to various formats."""

    def __init__(self, organization_name: str = ORGANIZATION_NAME):
        """
        Initialize the export service.

        Args:
            organization_name: Name printed on the first row of every report
        """
        self.organization_name = organization_name

    # =========================================================================
    # Row builders
    # =========================================================================

    def _header_rows(self, report_type: ReportType, period: ReportPeriod) -> list[Row]:
        return [
            [self.organization_name],
            [_TITLES[report_type]],
            [period.label()],
            [],
        ]

    def balance_sheet_rows(
        self, sheet: BalanceSheet, period: ReportPeriod
    ) -> list[Row]:
        """Rows of the statement of financial position."""
        rows = self._header_rows(ReportType.BALANCE_SHEET, period)

        sections = [
            ("ASSETS", sheet.asset_accounts, "TOTAL ASSETS", sheet.total_assets),
            (
                "LIABILITIES",
                sheet.liability_accounts,
                "TOTAL LIABILITIES",
                sheet.total_liabilities,
            ),
            ("EQUITY", sheet.equity_accounts, "TOTAL EQUITY", sheet.total_equity),
        ]
        for title, accounts, total_label, total in sections:
            rows.append([title])
            rows.append(["Account Code", "Account Name", "Balance"])
            rows.extend([a.code, a.name, a.balance] for a in accounts)
            rows.append([total_label, "", total])
            rows.append([])

        rows.append(["CHECK BALANCE (A - L - E)", "", sheet.variance])
        return rows

    def income_expense_rows(
        self, summary: JournalSummary, period: ReportPeriod
    ) -> list[Row]:
        """Rows of the income & expense statement."""
        rows = self._header_rows(ReportType.INCOME_EXPENSE, period)
        rows.append(["Date", "Txn ID", "Type", "Category", "Description", "Amount"])
        for t in summary.transactions:
            rows.append(
                [
                    t.date.isoformat(),
                    t.id,
                    t.type.value,
                    t.category or "-",
                    t.description,
                    t.amount,
                ]
            )
        rows.append([])
        rows.append(["", "", "", "", "Total Income", summary.total_income])
        rows.append(["", "", "", "", "Total Expense", summary.total_expense])
        rows.append(["", "", "", "", "NET PROFIT/LOSS", summary.net])
        return rows

    def dividend_rows(self, report: DividendReport, period: ReportPeriod) -> list[Row]:
        """Rows of the dividend distribution sheet, with a signature column."""
        rows = self._header_rows(ReportType.DIVIDEND, period)
        rows.append(
            [
                "Member ID",
                "Name",
                "Total Shares",
                f"Dividend ({report.dividend_rate:g}%)",
                "Interest Paid",
                f"Return ({report.avg_return_rate:g}%)",
                "Total Payout",
                "Signature",
            ]
        )
        for p in report.payouts:
            rows.append(
                [
                    p.member_id,
                    p.full_name,
                    p.share_balance,
                    p.dividend_amount,
                    p.interest_paid,
                    p.refund_amount,
                    p.total_payout,
                    "",
                ]
            )
        rows.append([])
        rows.append(["", "", "", "", "", "GRAND TOTAL", report.total_distribution])
        return rows

    def build_rows(
        self, report_type: ReportType, data: Any, period: ReportPeriod
    ) -> list[Row]:
        """Dispatch to the row builder for ``report_type``."""
        builders = {
            ReportType.BALANCE_SHEET: (BalanceSheet, self.balance_sheet_rows),
            ReportType.INCOME_EXPENSE: (JournalSummary, self.income_expense_rows),
            ReportType.DIVIDEND: (DividendReport, self.dividend_rows),
        }
        try:
            expected, builder = builders[ReportType(report_type)]
        except (KeyError, ValueError):
            raise ExportError(f"Unsupported report type: {report_type}") from None

        if not isinstance(data, expected):
            raise ExportError(
                f"{ReportType(report_type).value} export expects "
                f"{expected.__name__}, got {type(data).__name__}"
            )
        return builder(data, period)

    # =========================================================================
    # Writers
    # =========================================================================

    def export_to_csv(
        self, report_type: ReportType, data: Any, period: ReportPeriod
    ) -> io.BytesIO:
        """
        Export a report to CSV format.

        Returns:
            BytesIO buffer containing the CSV data
        """
        rows = self.build_rows(report_type, data, period)

        text_buffer = io.StringIO()
        writer = csv.writer(text_buffer)
        writer.writerows(rows)

        buffer = io.BytesIO()
        buffer.write(text_buffer.getvalue().encode("utf-8-sig"))  # BOM for Excel
        buffer.seek(0)

        logger.debug(f"Exported {report_type} to CSV ({len(rows)} rows)")
        return buffer

    def export_to_xlsx(
        self, report_type: ReportType, data: Any, period: ReportPeriod
    ) -> io.BytesIO:
        """
        Export a report to XLSX format with formatting.

        Returns:
            BytesIO buffer containing the XLSX data
        """
        rows = self.build_rows(report_type, data, period)

        wb = Workbook()
        ws = cast(Worksheet, wb.active)
        ws.title = "Report"

        title_font = Font(bold=True, size=14)
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        total_font = Font(bold=True)

        for row_idx, row in enumerate(rows, 1):
            for col_idx, value in enumerate(row, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if isinstance(value, float):
                    cell.number_format = "#,##0.00"

        ws.cell(row=1, column=1).font = title_font
        ws.cell(row=2, column=1).font = Font(bold=True)

        # Style table headings and totals
        for row_idx, row in enumerate(rows, 1):
            if not row:
                continue
            first = str(row[0])
            is_heading = first in ("Account Code", "Date", "Member ID")
            is_total = first.startswith(("TOTAL", "CHECK")) or any(
                str(v).startswith(("Total", "NET", "GRAND")) for v in row
            )
            if is_heading:
                for col_idx in range(1, len(row) + 1):
                    cell = ws.cell(row=row_idx, column=col_idx)
                    cell.font = header_font
                    cell.fill = header_fill
                    cell.alignment = Alignment(horizontal="center")
            elif is_total or first in ("ASSETS", "LIABILITIES", "EQUITY"):
                for col_idx in range(1, len(row) + 1):
                    ws.cell(row=row_idx, column=col_idx).font = total_font

        # Auto-adjust column widths
        widest = max((len(r) for r in rows), default=0)
        for col in range(1, widest + 1):
            width = max(
                (len(str(r[col - 1])) for r in rows[4:] if len(r) >= col), default=8
            )
            ws.column_dimensions[get_column_letter(col)].width = min(
                max(width + 2, 10), 40
            )

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        logger.debug(f"Exported {report_type} to XLSX ({len(rows)} rows)")
        return buffer

    def export(
        self,
        report_type: ReportType,
        format: ExportFormat,
        data: Any,
        period: ReportPeriod,
    ) -> io.BytesIO:
        """Export ``data`` as ``report_type`` in the requested format."""
        try:
            export_format = ExportFormat(format)
        except ValueError:
            raise ExportError(f"Unsupported export format: {format}") from None

        try:
            if export_format == ExportFormat.XLSX:
                return self.export_to_xlsx(report_type, data, period)
            return self.export_to_csv(report_type, data, period)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Error exporting {report_type}: {e}", exc_info=True)
            raise

    def get_filename(
        self,
        report_type: ReportType,
        format: ExportFormat,
        period_end: Optional[date] = None,
    ) -> str:
        """
        Generate a filename for the export.

        Args:
            report_type: Report being exported
            format: Export format
            period_end: Last day of the reporting period (defaults to today)

        Returns:
            Suggested filename, e.g. ``BalanceSheet_2023-10-31.xlsx``
        """
        try:
            stem = _FILENAME_STEMS[ReportType(report_type)]
        except (KeyError, ValueError):
            raise ExportError(f"Unsupported report type: {report_type}") from None
        end = (period_end or date.today()).isoformat()
        return f"{stem}_{end}.{ExportFormat(format).value}"
