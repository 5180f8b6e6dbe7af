"""Asset register summaries built on top of the depreciation engine"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from valuation_gateway.domain.depreciation import book_value_as_of, current_asset_values
from valuation_gateway.domain.exceptions import InvalidParameterError
from valuation_gateway.domain.models import (
    Asset,
    AssetStatistics,
    CategorySummary,
    DepreciationSchedule,
    DisposalResult,
)
from valuation_gateway.utils.money import ZERO, sum_money, to_money


def summarize_assets(assets: Sequence[Asset], as_of: date) -> AssetStatistics:
    """
    Counts, cost and current value across an asset register.

    Current value covers active assets only; inactive ones still count
    towards totals and categories.
    """
    active = [a for a in assets if a.is_active]
    valued = current_asset_values(active, as_of)

    by_category: Dict[str, CategorySummary] = {}
    for asset in assets:
        summary = by_category.setdefault(asset.category, CategorySummary(asset.category, 0, ZERO))
        summary.count += 1
        summary.total_cost += to_money(asset.acquisition_cost)

    active_cost = sum_money(to_money(a.acquisition_cost) for a in active)
    total_current_value = to_money(valued.total)

    return AssetStatistics(
        as_of=as_of,
        total_assets=len(assets),
        active_assets=len(active),
        inactive_assets=len(assets) - len(active),
        total_purchase_value=sum_money(to_money(a.acquisition_cost) for a in assets),
        total_current_value=total_current_value,
        accumulated_depreciation=active_cost - total_current_value,
        categories=sorted(by_category.values(), key=lambda c: c.total_cost, reverse=True),
        flagged=valued.flagged,
    )


def depreciation_by_year(schedules: Iterable[DepreciationSchedule]) -> Dict[int, Decimal]:
    """Total depreciation per calendar year, keyed by the year each period ends in"""
    totals: Dict[int, Decimal] = {}
    for schedule in schedules:
        for period in schedule.periods:
            year = period.end_date.year
            totals[year] = totals.get(year, ZERO) + period.depreciation
    return dict(sorted(totals.items()))


def disposal_gain_loss(
    asset: Asset,
    disposal_date: date,
    proceeds: Decimal,
    units_per_period: Optional[List[Decimal]] = None,
) -> DisposalResult:
    """Gain (positive) or loss (negative) from disposing an asset at the given proceeds"""
    proceeds = to_money(proceeds)
    if proceeds < 0:
        raise InvalidParameterError("Disposal proceeds must not be negative")
    book_value = book_value_as_of(asset, disposal_date, units_per_period)
    return DisposalResult(
        asset_id=asset.asset_id,
        disposal_date=disposal_date,
        book_value=book_value,
        proceeds=proceeds,
        gain_loss=proceeds - book_value,
    )
