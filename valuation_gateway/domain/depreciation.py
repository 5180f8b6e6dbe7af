"""Depreciation engine - schedules and point-in-time book values for fixed assets"""

from datetime import date
from decimal import Decimal, ROUND_DOWN
from typing import Dict, List, Optional, Sequence

from valuation_gateway.domain.exceptions import InvalidAssetError
from valuation_gateway.domain.models import (
    Asset,
    AssetValues,
    DepreciationMethod,
    DepreciationPeriod,
    DepreciationSchedule,
)
from valuation_gateway.utils.date_utils import add_months, days_between
from valuation_gateway.utils.money import CENT, ZERO, to_money

# Multiple of the straight-line rate used by declining balance (2.0 = double-declining)
DECLINING_BALANCE_FACTOR = Decimal("2")


def final_period_end(asset: Asset) -> date:
    """Exclusive end of the last period; depends only on acquisition date and period layout"""
    return add_months(asset.acquisition_date, asset.useful_life * asset.period_months)


def validate_asset(asset: Asset, as_of: Optional[date] = None) -> None:
    """
    Reject asset facts that cannot produce a schedule.

    Raises:
        InvalidAssetError: unsupported method, negative cost/salvage,
            salvage above cost, non-positive useful life or period length,
            a schedule running past the last representable date, or an
            acquisition date after as_of
    """
    if not isinstance(asset.method, DepreciationMethod):
        raise InvalidAssetError(f"Asset {asset.asset_id}: unsupported depreciation method {asset.method!r}")
    if asset.acquisition_cost < 0:
        raise InvalidAssetError(f"Asset {asset.asset_id}: acquisition cost must not be negative")
    if asset.salvage_value < 0:
        raise InvalidAssetError(f"Asset {asset.asset_id}: salvage value must not be negative")
    if asset.salvage_value > asset.acquisition_cost:
        raise InvalidAssetError(
            f"Asset {asset.asset_id}: salvage value {asset.salvage_value} exceeds cost {asset.acquisition_cost}"
        )
    if asset.useful_life <= 0:
        raise InvalidAssetError(f"Asset {asset.asset_id}: useful life must be positive")
    if asset.period_months <= 0:
        raise InvalidAssetError(f"Asset {asset.asset_id}: period length must be positive")
    try:
        final_period_end(asset)
    except (ValueError, OverflowError) as e:
        raise InvalidAssetError(f"Asset {asset.asset_id}: schedule runs past the last representable date") from e
    if as_of is not None and asset.acquisition_date > as_of:
        raise InvalidAssetError(
            f"Asset {asset.asset_id}: acquisition date {asset.acquisition_date} is after {as_of}"
        )


def _straight_line_amounts(depreciable: Decimal, life: int) -> List[Decimal]:
    # Rounded down so only the final period carries the remainder
    per_period = (depreciable / life).quantize(CENT, rounding=ROUND_DOWN)
    amounts = [per_period] * (life - 1)

    # Final period absorbs rounding so the total lands exactly on salvage
    amounts.append(depreciable - per_period * (life - 1))
    return amounts


def _declining_rate(asset: Asset) -> Decimal:
    if asset.declining_rate is None:
        return DECLINING_BALANCE_FACTOR / asset.useful_life
    rate = Decimal(str(asset.declining_rate))
    if rate <= 0 or rate > 100:
        raise InvalidAssetError(f"Asset {asset.asset_id}: declining rate must be in (0, 100]")
    return rate / 100


def _declining_balance_amounts(cost: Decimal, salvage: Decimal, life: int, rate: Decimal) -> List[Decimal]:
    amounts = []
    book_value = cost
    for index in range(1, life + 1):
        if index == life:
            amount = book_value - salvage
        else:
            amount = to_money(book_value * rate)
            # Clamp at salvage; every later period then depreciates nothing
            if book_value - amount < salvage:
                amount = book_value - salvage
        amounts.append(amount)
        book_value -= amount
    return amounts


def _units_of_production_amounts(
    asset: Asset,
    depreciable: Decimal,
    units_per_period: Optional[Sequence[Decimal]],
) -> List[Decimal]:
    total_units = asset.total_expected_units
    if total_units is None or total_units <= 0:
        raise InvalidAssetError(
            f"Asset {asset.asset_id}: units of production requires a positive total_expected_units"
        )
    if units_per_period is None:
        raise InvalidAssetError(f"Asset {asset.asset_id}: units of production requires per-period units")
    if len(units_per_period) > asset.useful_life:
        raise InvalidAssetError(
            f"Asset {asset.asset_id}: {len(units_per_period)} production periods exceed useful life {asset.useful_life}"
        )
    if any(units < 0 for units in units_per_period):
        raise InvalidAssetError(f"Asset {asset.asset_id}: production units must not be negative")

    total_units = Decimal(str(total_units))
    amounts = []
    remaining = depreciable
    for index in range(asset.useful_life):
        if index == asset.useful_life - 1:
            amount = remaining
        else:
            units = Decimal(str(units_per_period[index])) if index < len(units_per_period) else ZERO
            amount = min(to_money(depreciable * units / total_units), remaining)
        amounts.append(amount)
        remaining -= amount
    return amounts


def compute_schedule(
    asset: Asset,
    as_of: Optional[date] = None,
    units_per_period: Optional[Sequence[Decimal]] = None,
) -> DepreciationSchedule:
    """
    Generate the full depreciation schedule for an asset.

    Requirements:
    - One period per unit of useful life, each period_months long
    - Closing book value never drops below salvage
    - Sum of period depreciation equals cost - salvage exactly; the final
      period absorbs any rounding remainder

    Args:
        asset: Asset facts (never mutated)
        as_of: Reference date; acquisition after this date is rejected
        units_per_period: Production per period, units-of-production only

    Raises:
        InvalidAssetError: Asset facts are inconsistent

    Example:
        cost 1000.00, salvage 0, life 3, straight-line
        → [333.33, 333.33, 333.34]
    """
    validate_asset(asset, as_of)

    cost = to_money(asset.acquisition_cost)
    salvage = to_money(asset.salvage_value)
    depreciable = cost - salvage
    life = asset.useful_life

    if asset.method == DepreciationMethod.STRAIGHT_LINE:
        amounts = _straight_line_amounts(depreciable, life)
    elif asset.method == DepreciationMethod.DECLINING_BALANCE:
        amounts = _declining_balance_amounts(cost, salvage, life, _declining_rate(asset))
    else:
        amounts = _units_of_production_amounts(asset, depreciable, units_per_period)

    periods = []
    accumulated = ZERO
    book_value = cost
    for index, amount in enumerate(amounts, start=1):
        accumulated += amount
        closing = cost - accumulated
        units = None
        if asset.method == DepreciationMethod.UNITS_OF_PRODUCTION:
            units = Decimal(str(units_per_period[index - 1])) if index <= len(units_per_period) else ZERO
        periods.append(
            DepreciationPeriod(
                index=index,
                start_date=add_months(asset.acquisition_date, (index - 1) * asset.period_months),
                end_date=add_months(asset.acquisition_date, index * asset.period_months),
                opening_book_value=book_value,
                depreciation=amount,
                accumulated_depreciation=accumulated,
                closing_book_value=closing,
                units=units,
            )
        )
        book_value = closing

    return DepreciationSchedule(
        asset_id=asset.asset_id,
        method=asset.method,
        as_of=as_of,
        acquisition_cost=cost,
        salvage_value=salvage,
        periods=tuple(periods),
    )


def book_value_as_of(
    asset: Asset,
    on: date,
    units_per_period: Optional[Sequence[Decimal]] = None,
) -> Decimal:
    """
    Book value of an asset on a given date.

    - Before acquisition: acquisition cost
    - At/after the end of the final period: salvage value
    - Otherwise: closing value of the last completed period less the
      day-prorated share of the period in progress
    """
    validate_asset(asset)
    cost = to_money(asset.acquisition_cost)
    if on < asset.acquisition_date:
        return cost
    if on >= final_period_end(asset):
        return to_money(asset.salvage_value)

    schedule = compute_schedule(asset, as_of=on, units_per_period=units_per_period)

    for period in schedule.periods:
        if period.start_date <= on < period.end_date:
            elapsed = days_between(period.start_date, on)
            length = days_between(period.start_date, period.end_date)
            return period.opening_book_value - to_money(period.depreciation * elapsed / length)

    # Unreachable: periods are contiguous from acquisition to the final period end
    return schedule.salvage_value


def current_asset_values(
    assets: Sequence[Asset],
    as_of: date,
    units_by_asset: Optional[Dict[str, Sequence[Decimal]]] = None,
) -> AssetValues:
    """
    Book value of every asset as of a date.

    Never fails for an individual asset: invalid facts fall back to the
    asset's last stored book value (or cost if none) and the asset is
    flagged with the reason instead of being dropped.
    """
    units_by_asset = units_by_asset or {}
    values: Dict[str, Decimal] = {}
    flagged: Dict[str, str] = {}

    for asset in assets:
        try:
            values[asset.asset_id] = book_value_as_of(asset, as_of, units_by_asset.get(asset.asset_id))
        except InvalidAssetError as e:
            fallback = asset.current_book_value if asset.current_book_value is not None else asset.acquisition_cost
            values[asset.asset_id] = to_money(fallback)
            flagged[asset.asset_id] = str(e)

    return AssetValues(as_of=as_of, values=values, flagged=flagged)
