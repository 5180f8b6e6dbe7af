"""Period reports (cash flow, profit & loss) assembled from ledger aggregates"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Mapping, Optional, Sequence

from valuation_gateway.domain.models import CashFlowReport, ProfitAndLossReport
from valuation_gateway.domain.ports import LedgerReader
from valuation_gateway.utils.date_utils import require_date_range
from valuation_gateway.utils.money import CENT, ZERO, sum_money, to_money

OTHER = "other"

CASH_FLOW_ACTIVITIES = ("operating", "investing", "financing")
REVENUE_CATEGORIES = ("sales", "services", OTHER)
EXPENSE_CATEGORIES = ("cost_of_goods_sold", "payroll", "rent", "utilities", "depreciation", OTHER)
COST_OF_GOODS_SOLD = "cost_of_goods_sold"
UNCLASSIFIED_CASH_ACTIVITY = "operating"


def bucket_totals(
    totals: Optional[Mapping[str, Decimal]],
    categories: Sequence[str],
    fallback: str = OTHER,
) -> Dict[str, Decimal]:
    """
    Map ledger totals onto a fixed set of categories.

    Every canonical category is present (0.00 when the ledger has nothing for
    it); categories outside the set are folded into the fallback bucket.
    """
    buckets = {category: ZERO for category in categories}
    for category, amount in (totals or {}).items():
        key = category if category in buckets else fallback
        buckets[key] += to_money(amount)
    return buckets


def _margin(amount: Decimal, revenue: Decimal) -> Decimal:
    if revenue == 0:
        return ZERO
    return to_money(amount / revenue * 100)


class PeriodReportAssembler:
    """Builds fixed-shape period reports from ledger reads"""

    def __init__(self, ledger: LedgerReader):
        self.ledger = ledger

    async def cash_flow(self, business_id: str, start: Optional[date], end: Optional[date]) -> CashFlowReport:
        """
        Cash inflows and outflows per activity, with opening/closing balances.

        Raises:
            InvalidDateRangeError: start or end missing, or start > end
        """
        require_date_range(start, end)

        raw_inflows, raw_outflows, opening, closing = await asyncio.gather(
            self.ledger.get_cash_inflows(business_id, start, end),
            self.ledger.get_cash_outflows(business_id, start, end),
            self.ledger.get_cash_balance(business_id, start - timedelta(days=1)),
            self.ledger.get_cash_balance(business_id, end),
        )

        inflows = bucket_totals(raw_inflows, CASH_FLOW_ACTIVITIES, fallback=UNCLASSIFIED_CASH_ACTIVITY)
        outflows = bucket_totals(raw_outflows, CASH_FLOW_ACTIVITIES, fallback=UNCLASSIFIED_CASH_ACTIVITY)
        net_by_activity = {activity: inflows[activity] - outflows[activity] for activity in CASH_FLOW_ACTIVITIES}
        total_inflows = sum_money(inflows.values())
        total_outflows = sum_money(outflows.values())
        net_cash_flow = total_inflows - total_outflows
        opening = to_money(opening)
        closing = to_money(closing)

        return CashFlowReport(
            business_id=business_id,
            start_date=start,
            end_date=end,
            inflows=inflows,
            outflows=outflows,
            net_by_activity=net_by_activity,
            total_inflows=total_inflows,
            total_outflows=total_outflows,
            net_cash_flow=net_cash_flow,
            opening_balance=opening,
            closing_balance=closing,
            reconciled=abs(net_cash_flow - (closing - opening)) < CENT,
        )

    async def profit_and_loss(self, business_id: str, start: Optional[date], end: Optional[date]) -> ProfitAndLossReport:
        """
        Revenue and expenses by category with gross and net profit.

        Raises:
            InvalidDateRangeError: start or end missing, or start > end
        """
        require_date_range(start, end)

        raw_revenue, raw_expenses = await asyncio.gather(
            self.ledger.get_revenue_totals(business_id, start, end),
            self.ledger.get_expense_totals(business_id, start, end),
        )

        revenue = bucket_totals(raw_revenue, REVENUE_CATEGORIES)
        expenses = bucket_totals(raw_expenses, EXPENSE_CATEGORIES)
        total_revenue = sum_money(revenue.values())
        total_expenses = sum_money(expenses.values())
        cogs = expenses[COST_OF_GOODS_SOLD]
        gross_profit = total_revenue - cogs
        net_profit = total_revenue - total_expenses

        return ProfitAndLossReport(
            business_id=business_id,
            start_date=start,
            end_date=end,
            revenue=revenue,
            expenses=expenses,
            total_revenue=total_revenue,
            cost_of_goods_sold=cogs,
            gross_profit=gross_profit,
            total_expenses=total_expenses,
            net_profit=net_profit,
            gross_margin=_margin(gross_profit, total_revenue),
            net_margin=_margin(net_profit, total_revenue),
        )
