"""Unit tests for period report assembly"""

import pytest
from datetime import date
from decimal import Decimal
from valuation_gateway.domain.exceptions import InvalidDateRangeError
from valuation_gateway.domain.reports import (
    CASH_FLOW_ACTIVITIES,
    EXPENSE_CATEGORIES,
    PeriodReportAssembler,
    bucket_totals,
)
from conftest import FakeLedger

START = date(2024, 1, 1)
END = date(2024, 3, 31)


@pytest.mark.parametrize("start,end", [(END, START), (None, END), (START, None), (None, None)])
async def test_cash_flow_rejects_bad_range(start, end):
    with pytest.raises(InvalidDateRangeError):
        await PeriodReportAssembler(FakeLedger()).cash_flow("biz-1", start, end)


@pytest.mark.parametrize("start,end", [(END, START), (None, END), (START, None)])
async def test_profit_and_loss_rejects_bad_range(start, end):
    ledger = FakeLedger()
    with pytest.raises(InvalidDateRangeError):
        await PeriodReportAssembler(ledger).profit_and_loss("biz-1", start, end)
    assert ledger.calls == []


async def test_cash_flow_totals_and_reconciliation():
    ledger = FakeLedger(
        inflows={"operating": Decimal("5000"), "financing": Decimal("1000")},
        outflows={"operating": Decimal("3500"), "investing": Decimal("2000")},
        balances={date(2023, 12, 31): Decimal("10000"), END: Decimal("10500")},
    )

    report = await PeriodReportAssembler(ledger).cash_flow("biz-1", START, END)

    assert report.inflows == {
        "operating": Decimal("5000.00"),
        "investing": Decimal("0.00"),
        "financing": Decimal("1000.00"),
    }
    assert report.net_by_activity["investing"] == Decimal("-2000.00")
    assert report.total_inflows == Decimal("6000.00")
    assert report.total_outflows == Decimal("5500.00")
    assert report.net_cash_flow == Decimal("500.00")
    assert report.opening_balance == Decimal("10000.00")
    assert report.closing_balance == Decimal("10500.00")
    assert report.reconciled is True


async def test_cash_flow_empty_ledger_reports_zeroes():
    report = await PeriodReportAssembler(FakeLedger()).cash_flow("biz-1", START, END)

    assert list(report.inflows) == list(CASH_FLOW_ACTIVITIES)
    assert all(amount == 0 for amount in report.outflows.values())
    assert report.net_cash_flow == Decimal("0")


async def test_profit_and_loss_fixed_shape_and_margins():
    ledger = FakeLedger(
        revenue={"sales": Decimal("8000"), "consulting": Decimal("2000")},
        expenses={"cost_of_goods_sold": Decimal("4000"), "rent": Decimal("1000"), "marketing": Decimal("500")},
    )

    report = await PeriodReportAssembler(ledger).profit_and_loss("biz-1", START, END)

    assert report.revenue == {
        "sales": Decimal("8000.00"),
        "services": Decimal("0.00"),
        "other": Decimal("2000.00"),
    }
    assert list(report.expenses) == list(EXPENSE_CATEGORIES)
    assert report.expenses["payroll"] == Decimal("0")
    assert report.expenses["other"] == Decimal("500.00")
    assert report.total_revenue == Decimal("10000.00")
    assert report.gross_profit == Decimal("6000.00")
    assert report.net_profit == Decimal("4500.00")
    assert report.gross_margin == Decimal("60.00")
    assert report.net_margin == Decimal("45.00")


async def test_profit_and_loss_zero_revenue_margins():
    ledger = FakeLedger(expenses={"rent": Decimal("100")})

    report = await PeriodReportAssembler(ledger).profit_and_loss("biz-1", START, START)

    assert report.net_profit == Decimal("-100.00")
    assert report.gross_margin == Decimal("0")
    assert report.net_margin == Decimal("0")


def test_bucket_totals_handles_missing_input():
    assert bucket_totals(None, ("a", "other")) == {"a": Decimal("0"), "other": Decimal("0")}
