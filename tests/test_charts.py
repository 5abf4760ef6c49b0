import matplotlib.pyplot as plt
import pytest

from coopledger.services import ChartService, StatementService
from coopledger.services.statements import BalanceSheet

PNG_SIGNATURE = b"\x89PNG"


@pytest.fixture
def charts():
    return ChartService()


def test_asset_composition(charts, accounts, members, loans):
    sheet = StatementService().build_balance_sheet(accounts, members, loans)
    buffer = charts.asset_composition_chart(sheet)
    assert buffer.getvalue().startswith(PNG_SIGNATURE)
    assert plt.get_fignums() == []


def test_asset_composition_without_assets(charts):
    sheet = StatementService().build_balance_sheet([])
    assert isinstance(sheet, BalanceSheet)
    buffer = charts.asset_composition_chart(sheet)
    assert buffer.getvalue().startswith(PNG_SIGNATURE)


def test_performance(charts, accounts):
    income = StatementService().build_income_statement(accounts)
    buffer = charts.performance_chart(income)
    assert buffer.getvalue().startswith(PNG_SIGNATURE)
    assert plt.get_fignums() == []


@pytest.mark.parametrize("method", ["asset_composition_chart", "performance_chart"])
def test_none_rejected(charts, method):
    with pytest.raises(ValueError):
        getattr(charts, method)(None)
