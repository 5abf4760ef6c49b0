import csv
import io

import pytest

from coopledger import cli


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda verbose=False: None)


def run(capsys, *argv):
    code = cli.main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def test_balance_sheet(capsys, snapshot_file):
    code, out, _ = run(capsys, "balance-sheet", "--snapshot", str(snapshot_file))
    assert code == 0
    assert "130,000.00" in out
    assert "Balanced" in out


def test_income_statement(capsys, snapshot_file):
    code, out, _ = run(capsys, "income-statement", "--snapshot", str(snapshot_file))
    assert code == 0
    assert "Interest Income" in out
    assert "10,000.00" in out


def test_dividends(capsys, snapshot_file):
    code, out, _ = run(capsys, "dividends", "--snapshot", str(snapshot_file))
    assert code == 0
    assert "M001" in out
    assert "1,404.00" in out
    assert "WARNING" not in out


def test_dividends_custom_rate(capsys, snapshot_file):
    code, out, _ = run(
        capsys, "dividends", "--snapshot", str(snapshot_file), "--dividend-rate", "50"
    )
    assert code == 0
    assert "exceeds net profit" in out


def test_repayment(capsys, snapshot_file):
    code, out, _ = run(
        capsys, "repayment", "--snapshot", str(snapshot_file), "--loan", "L001", "--amount", "1000"
    )
    assert code == 0
    assert "300.00" in out
    assert "29,300.00" in out


def test_repayment_unknown_loan(capsys, snapshot_file):
    code, _, err = run(
        capsys, "repayment", "--snapshot", str(snapshot_file), "--loan", "L404", "--amount", "10"
    )
    assert code == 1
    assert "Loan not found" in err


def test_reconcile(capsys, snapshot_file):
    code, out, _ = run(
        capsys,
        "reconcile",
        "--snapshot",
        str(snapshot_file),
        "--system-cash",
        "2500",
        "--count",
        "1000=2",
        "500=1",
    )
    assert code == 0
    assert "balanced" in out


def test_reconcile_bad_count(capsys, snapshot_file):
    code, _, err = run(
        capsys, "reconcile", "--snapshot", str(snapshot_file), "--system-cash", "0", "--count", "1000"
    )
    assert code == 1
    assert "DENOMINATION=COUNT" in err


def test_reconcile_against_day_tally(capsys, snapshot_file):
    code, out, _ = run(
        capsys,
        "reconcile",
        "--snapshot",
        str(snapshot_file),
        "--date",
        "2023-10-01",
        "--count",
        "1000=5",
    )
    assert code == 0
    assert "Cash in:" in out
    assert "5,000.00" in out
    assert "balanced" in out


def test_reconcile_day_tally_short(capsys, snapshot_file):
    code, out, _ = run(
        capsys,
        "reconcile",
        "--snapshot",
        str(snapshot_file),
        "--date",
        "2023-10-01",
        "--count",
        "1000=4",
    )
    assert code == 0
    assert "short" in out


def test_closing(capsys, snapshot_file):
    code, out, _ = run(
        capsys, "closing", "--snapshot", str(snapshot_file), "--brought-forward", "500"
    )
    assert code == 0
    assert "10,500.00" in out
    assert "Exceptions" not in out


@pytest.mark.parametrize(
    "report, filename",
    [
        ("balance-sheet", "BalanceSheet_2023-10-31.csv"),
        ("income-expense", "IncomeExpense_Report_2023-10-31.csv"),
        ("dividend", "Dividend_Distribution_2023-10-31.csv"),
    ],
)
def test_export(capsys, snapshot_file, tmp_path, report, filename):
    out_dir = tmp_path / "out"
    code, out, _ = run(
        capsys,
        "export",
        report,
        "--snapshot",
        str(snapshot_file),
        "--format",
        "csv",
        "--output",
        str(out_dir),
        "--start",
        "2023-10-01",
        "--end",
        "2023-10-31",
    )
    assert code == 0
    target = out_dir / filename
    assert target.exists()
    assert target.read_bytes().startswith(b"\xef\xbb\xbf")
    assert str(target) in out


def test_chart(capsys, snapshot_file, tmp_path):
    code, _, _ = run(
        capsys, "chart", "performance", "--snapshot", str(snapshot_file), "--output", str(tmp_path)
    )
    assert code == 0
    assert (tmp_path / "performance_chart.png").read_bytes().startswith(b"\x89PNG")


def test_missing_snapshot(capsys, tmp_path):
    code, _, err = run(capsys, "balance-sheet", "--snapshot", str(tmp_path / "missing.json"))
    assert code == 1
    assert "not found" in err


@pytest.mark.parametrize(
    "start, end, grand_total",
    [
        ("2023-10-01", "2023-10-31", 1404.0),
        # no loan repayments in November, so no refund
        ("2023-11-01", "2023-11-30", 1350.0),
    ],
)
def test_dividend_export_counts_repayments_in_period(
    capsys, snapshot_file, tmp_path, start, end, grand_total
):
    code, _, _ = run(
        capsys,
        "export",
        "dividend",
        "--snapshot",
        str(snapshot_file),
        "--format",
        "csv",
        "--output",
        str(tmp_path),
        "--start",
        start,
        "--end",
        end,
    )
    assert code == 0
    target = tmp_path / f"Dividend_Distribution_{end}.csv"
    rows = list(csv.reader(io.StringIO(target.read_bytes().decode("utf-8-sig"))))
    assert rows[-1][-2] == "GRAND TOTAL"
    assert float(rows[-1][-1]) == pytest.approx(grand_total)
