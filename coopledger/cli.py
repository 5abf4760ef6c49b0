"""
Command-line runner for coopledger.

Loads a ledger snapshot and prints or exports the cooperative's reports.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from coopledger.config import (
    CHART_FORMAT,
    CURRENCY_SYMBOL,
    DEFAULT_AVG_RETURN_RATE,
    DEFAULT_DIVIDEND_RATE,
    EXPORT_DIR,
    EXPORT_FORMATS,
    LOG_DIR,
    LOG_FILE,
    LOG_FORMAT,
    REPORT_TYPES,
    ensure_directories,
    get_log_level,
)
from coopledger.data import LedgerSnapshot, load_snapshot
from coopledger.exceptions import CoopLedgerError, ValidationError
from coopledger.models import Transaction
from coopledger.services import (
    BalanceSheet,
    CashBoxTally,
    CashCount,
    ChartService,
    ClosingSummary,
    DividendCalculator,
    DividendReport,
    ExportService,
    IncomeStatement,
    ReconciliationResult,
    RepaymentSplit,
    ReportPeriod,
    ReportType,
    StatementService,
    daily_cash_box,
    reconcile,
    split_for_loan,
)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    """Log to the log directory and stdout."""
    ensure_directories()
    logging.basicConfig(
        level=logging.DEBUG if verbose else get_log_level(),
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(LOG_DIR / LOG_FILE),
            logging.StreamHandler(sys.stdout),
        ],
    )


def _money(amount: float) -> str:
    return f"{CURRENCY_SYMBOL}{amount:>15,.2f}"


# =============================================================================
# Formatters
# =============================================================================


def format_balance_sheet(sheet: BalanceSheet) -> str:
    lines = [
        "Statement of Financial Position",
        "",
        f"Cash & Bank:          {_money(sheet.cash_assets)}",
        f"Loans Receivable:     {_money(sheet.loans_receivable)}",
        f"TOTAL ASSETS:         {_money(sheet.total_assets)}",
        "",
        f"Other Liabilities:    {_money(sheet.other_liabilities)}",
        f"Member Savings:       {_money(sheet.member_savings)}",
        f"TOTAL LIABILITIES:    {_money(sheet.total_liabilities)}",
        "",
        f"Other Equity:         {_money(sheet.other_equity)}",
        f"Member Shares:        {_money(sheet.member_shares)}",
        f"Net Profit:           {_money(sheet.net_profit)}",
        f"TOTAL EQUITY:         {_money(sheet.total_equity)}",
        "",
    ]
    if sheet.is_balanced:
        lines.append("Balanced")
    else:
        lines.append(f"WARNING: out of balance by {sheet.variance:,.2f}")
    return "\n".join(lines)


def _account_line(account) -> str:
    return f"  {account.code:<8} {account.name:<28} {_money(account.balance)}"


def format_income_statement(income: IncomeStatement) -> str:
    lines = ["Income Statement", ""]
    for account in income.revenue_accounts:
        lines.append(_account_line(account))
    lines.append(f"Total Revenue:        {_money(income.revenue)}")
    for account in income.expense_accounts:
        lines.append(_account_line(account))
    lines.append(f"Total Expenses:       {_money(income.expenses)}")
    lines.append(f"Net Profit:           {_money(income.net_profit)}")
    return "\n".join(lines)


def format_dividend_report(report: DividendReport) -> str:
    lines = [
        f"Dividend {report.dividend_rate:g}% / "
        f"Patronage refund {report.avg_return_rate:g}%",
        "",
        f"{'Member':<10} {'Name':<24} {'Dividend':>14} {'Refund':>14} {'Total':>14}",
    ]
    for p in report.payouts:
        lines.append(
            f"{p.member_id:<10} {p.full_name[:24]:<24} {p.dividend_amount:>14,.2f} "
            f"{p.refund_amount:>14,.2f} {p.total_payout:>14,.2f}"
        )
    lines.append("")
    lines.append(f"Total distribution:   {_money(report.total_distribution)}")
    lines.append(f"Payout ratio:         {report.payout_ratio:>16.1f}%")
    if report.exceeds_net_profit:
        lines.append("WARNING: distribution exceeds net profit")
    return "\n".join(lines)


def format_repayment(split: RepaymentSplit) -> str:
    lines = [
        f"Monthly interest:     {_money(split.monthly_interest)}",
        f"Interest portion:     {_money(split.interest_portion)}",
        f"Principal portion:    {_money(split.principal_portion)}",
        f"Balance after:        {_money(split.balance_after)}",
    ]
    if split.overpayment > 0:
        lines.append(f"Overpayment (credit): {_money(split.overpayment)}")
    return "\n".join(lines)


def format_reconciliation(result: ReconciliationResult) -> str:
    return "\n".join(
        [
            f"Physical count:       {_money(result.physical_total)}",
            f"System net cash:      {_money(result.system_net_cash)}",
            f"Variance:             {_money(result.variance)}",
            f"Status:               {result.direction}",
        ]
    )


def format_cash_box(tally: CashBoxTally) -> str:
    return "\n".join(
        [
            f"Cash box for {tally.date.isoformat()} "
            f"({tally.transaction_count} transactions)",
            f"Cash in:              {_money(tally.total_in)}",
            f"Cash out:             {_money(tally.total_out)}",
        ]
    )


def format_closing_summary(summary: ClosingSummary) -> str:
    lines = [
        f"Active loans:         {summary.active_loans:>16}",
        f"Total income:         {_money(summary.total_income)}",
        f"Total expenses:       {_money(summary.total_expense)}",
        f"Net balance:          {_money(summary.net_balance)}",
        f"Brought forward:      {_money(summary.brought_forward)}",
        f"Carried forward:      {_money(summary.carried_forward)}",
    ]
    if summary.exceptions:
        lines.append("")
        lines.append("Exceptions:")
        for exc in summary.exceptions:
            lines.append(f"  {exc.loan_id}: {exc.issue} ({exc.amount:,.2f})")
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================


def _parse_counts(pairs: Sequence[str]) -> CashCount:
    counts: dict[float, int] = {}
    for pair in pairs:
        denomination, sep, count = pair.partition("=")
        if not sep:
            raise ValidationError(f"Expected DENOMINATION=COUNT, got {pair!r}")
        try:
            counts[float(denomination)] = int(count)
        except ValueError:
            raise ValidationError(f"Invalid cash count {pair!r}") from None
    return CashCount.from_mapping(counts)


def _dividend_report(
    snapshot: LedgerSnapshot,
    args,
    transactions: Optional[Sequence[Transaction]] = None,
) -> DividendReport:
    income = StatementService().build_income_statement(snapshot.accounts)
    calculator = DividendCalculator(args.dividend_rate, args.return_rate)
    if transactions is None:
        transactions = snapshot.transactions
    return calculator.calculate(snapshot.members, transactions, income.net_profit)


def run_command(args: argparse.Namespace) -> str:
    """Execute a parsed command and return the text to print."""
    snapshot = load_snapshot(args.snapshot)
    statements = StatementService()

    if args.command == "balance-sheet":
        sheet = statements.build_balance_sheet(
            snapshot.accounts, snapshot.members, snapshot.loans
        )
        return format_balance_sheet(sheet)

    if args.command == "income-statement":
        return format_income_statement(
            statements.build_income_statement(snapshot.accounts)
        )

    if args.command == "dividends":
        return format_dividend_report(_dividend_report(snapshot, args))

    if args.command == "repayment":
        loan = snapshot.get_loan(args.loan)
        if loan is None:
            raise ValidationError(f"Loan not found: {args.loan}")
        return format_repayment(split_for_loan(loan, args.amount))

    if args.command == "reconcile":
        count = _parse_counts(args.count)
        if args.system_cash is not None:
            return format_reconciliation(reconcile(count, args.system_cash))
        tally = daily_cash_box(snapshot.transactions, args.date)
        result = reconcile(count, tally.net_cash)
        return format_cash_box(tally) + "\n" + format_reconciliation(result)

    if args.command == "export":
        report_type = ReportType(args.report)
        period = ReportPeriod(start=args.start, end=args.end)
        if report_type == ReportType.BALANCE_SHEET:
            data = statements.build_balance_sheet(
                snapshot.accounts, snapshot.members, snapshot.loans
            )
        elif report_type == ReportType.INCOME_EXPENSE:
            data = statements.summarize_journal(
                snapshot.transactions, args.start, args.end
            )
        else:
            # Only repayments inside the period count towards interest paid
            in_period = statements.summarize_journal(
                snapshot.transactions, args.start, args.end
            ).transactions
            data = _dividend_report(snapshot, args, in_period)

        service = ExportService()
        buffer = service.export(report_type, args.format, data, period)
        output_dir = Path(args.output)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / service.get_filename(report_type, args.format, args.end)
        target.write_bytes(buffer.getvalue())
        logger.info(f"Wrote {target}")
        return f"Exported {report_type.value} to {target}"

    if args.command == "closing":
        summary = statements.build_closing_summary(
            snapshot.accounts, snapshot.loans, args.brought_forward
        )
        return format_closing_summary(summary)

    if args.command == "chart":
        charts = ChartService()
        if args.kind == "assets":
            buffer = charts.asset_composition_chart(
                statements.build_balance_sheet(
                    snapshot.accounts, snapshot.members, snapshot.loans
                )
            )
        else:
            buffer = charts.performance_chart(
                statements.build_income_statement(snapshot.accounts)
            )
        output_dir = Path(args.output)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / f"{args.kind}_chart.{CHART_FORMAT}"
        target.write_bytes(buffer.getvalue())
        logger.info(f"Wrote {target}")
        return f"Saved {args.kind} chart to {target}"

    raise ValidationError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coopledger", description="Savings cooperative ledger reports"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--snapshot",
        required=True,
        help="JSON file with accounts, members, loans, transactions",
    )

    rates = argparse.ArgumentParser(add_help=False)
    rates.add_argument("--dividend-rate", type=float, default=DEFAULT_DIVIDEND_RATE)
    rates.add_argument("--return-rate", type=float, default=DEFAULT_AVG_RETURN_RATE)

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser(
        "balance-sheet", parents=[common], help="statement of financial position"
    )
    sub.add_parser(
        "income-statement", parents=[common], help="revenue, expenses, net profit"
    )
    sub.add_parser(
        "dividends", parents=[common, rates], help="profit distribution table"
    )

    repayment = sub.add_parser(
        "repayment", parents=[common], help="split a loan repayment"
    )
    repayment.add_argument("--loan", required=True)
    repayment.add_argument("--amount", type=float, required=True)

    rec = sub.add_parser("reconcile", parents=[common], help="cash box reconciliation")
    rec.add_argument(
        "--system-cash",
        type=float,
        default=None,
        help="expected net cash; defaults to the day's cash in minus cash out",
    )
    rec.add_argument(
        "--date",
        type=date.fromisoformat,
        default=date.today(),
        help="day to tally when --system-cash is not given",
    )
    rec.add_argument(
        "--count",
        nargs="*",
        default=[],
        metavar="DENOM=N",
        help="pieces per denomination",
    )

    export = sub.add_parser("export", parents=[common, rates], help="export a report")
    export.add_argument("report", choices=REPORT_TYPES)
    export.add_argument("--format", choices=EXPORT_FORMATS, default="xlsx")
    export.add_argument("--output", default=str(EXPORT_DIR))
    today = date.today()
    export.add_argument(
        "--start", type=date.fromisoformat, default=today.replace(month=1, day=1)
    )
    export.add_argument("--end", type=date.fromisoformat, default=today)

    closing = sub.add_parser("closing", parents=[common], help="period closing summary")
    closing.add_argument("--brought-forward", type=float, default=0.0)

    chart = sub.add_parser("chart", parents=[common], help="render a dashboard chart")
    chart.add_argument("kind", choices=["assets", "performance"])
    chart.add_argument("--output", default=str(EXPORT_DIR))

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``coopledger`` command."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        print(run_command(args))
        return 0
    except CoopLedgerError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.critical(f"Unexpected error in {args.command}: {e}", exc_info=True)
        print(f"\nUnexpected error: {e}", file=sys.stderr)
        print(f"Check {LOG_FILE} for more details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
