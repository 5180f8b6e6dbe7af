"""Data access layer for fixed assets and their depreciation schedules"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from valuation_gateway.infrastructure.database.models import FixedAsset, DepreciationScheduleEntry
from valuation_gateway.domain.models import Asset, DepreciationMethod, DepreciationPeriod, DepreciationSchedule
from valuation_gateway.domain.ports import AssetFilters

logger = logging.getLogger(__name__)


def _to_domain(row: FixedAsset) -> Asset:
    """
    Map an ORM row onto the immutable domain Asset.

    An unrecognised depreciation method is kept as the raw string so the
    engine rejects that one asset instead of the whole read failing.
    """
    try:
        method = DepreciationMethod(row.depreciation_method)
    except ValueError:
        logger.warning(
            "Unknown depreciation method",
            extra={"asset_id": row.id, "depreciation_method": row.depreciation_method},
        )
        method = row.depreciation_method

    return Asset(
        asset_id=row.id,
        business_id=row.business_id,
        name=row.name,
        category=row.category,
        acquisition_date=row.acquisition_date,
        acquisition_cost=Decimal(row.acquisition_cost),
        salvage_value=Decimal(row.salvage_value or 0),
        useful_life=row.useful_life,
        period_months=row.period_months,
        method=method,
        total_expected_units=Decimal(row.total_expected_units) if row.total_expected_units is not None else None,
        declining_rate=Decimal(row.declining_rate) if row.declining_rate is not None else None,
        current_book_value=Decimal(row.current_book_value) if row.current_book_value is not None else None,
        is_active=row.is_active,
    )


class AssetRepository:
    """Repository for fixed assets and stored schedules"""

    def __init__(self, db: Session):
        self.db = db

    def get_assets(self, business_id: str, filters: AssetFilters) -> List[Asset]:
        """Fetch a business's assets, oldest acquisition first"""
        query = self.db.query(FixedAsset).filter(FixedAsset.business_id == business_id)
        if filters.active_only:
            query = query.filter(FixedAsset.is_active.is_(True))
        if filters.category is not None:
            query = query.filter(FixedAsset.category == filters.category)
        if filters.method is not None:
            query = query.filter(FixedAsset.depreciation_method == filters.method.value)

        return [_to_domain(row) for row in query.order_by(FixedAsset.acquisition_date, FixedAsset.id).all()]

    def get_asset(self, business_id: str, asset_id: str) -> Optional[Asset]:
        """Fetch one asset scoped to its business"""
        row = (
            self.db.query(FixedAsset)
            .filter(FixedAsset.id == asset_id, FixedAsset.business_id == business_id)
            .first()
        )
        return _to_domain(row) if row else None

    def create_asset(self, asset: Asset) -> FixedAsset:
        """Persist a new asset record"""
        row = FixedAsset(
            id=asset.asset_id,
            business_id=asset.business_id,
            name=asset.name,
            category=asset.category,
            acquisition_date=asset.acquisition_date,
            acquisition_cost=asset.acquisition_cost,
            salvage_value=asset.salvage_value,
            useful_life=asset.useful_life,
            period_months=asset.period_months,
            depreciation_method=asset.method.value,
            total_expected_units=asset.total_expected_units,
            declining_rate=asset.declining_rate,
            current_book_value=asset.current_book_value,
            is_active=asset.is_active,
        )
        self.db.add(row)
        self.db.flush()
        return row

    def save_schedule(self, business_id: str, schedule: DepreciationSchedule) -> bool:
        """
        Store a generated schedule.

        A schedule already stored for the same (asset, method, as_of) is left
        untouched; returns False in that case, True when rows were written.
        """
        existing = (
            self.db.query(DepreciationScheduleEntry.id)
            .filter(
                DepreciationScheduleEntry.asset_id == schedule.asset_id,
                DepreciationScheduleEntry.method == schedule.method.value,
                DepreciationScheduleEntry.as_of == schedule.as_of,
            )
            .first()
        )
        if existing:
            return False

        for period in schedule.periods:
            self.db.add(
                DepreciationScheduleEntry(
                    asset_id=schedule.asset_id,
                    business_id=business_id,
                    method=schedule.method.value,
                    as_of=schedule.as_of,
                    period_index=period.index,
                    start_date=period.start_date,
                    end_date=period.end_date,
                    opening_book_value=period.opening_book_value,
                    depreciation_amount=period.depreciation,
                    accumulated_depreciation=period.accumulated_depreciation,
                    closing_book_value=period.closing_book_value,
                    units=period.units,
                )
            )
        self.db.flush()
        return True

    def get_schedule(
        self,
        asset_id: str,
        method: DepreciationMethod,
        as_of: Optional[date],
    ) -> Optional[DepreciationSchedule]:
        """Load a stored schedule, or None if it was never saved"""
        rows = (
            self.db.query(DepreciationScheduleEntry)
            .filter(
                DepreciationScheduleEntry.asset_id == asset_id,
                DepreciationScheduleEntry.method == method.value,
                DepreciationScheduleEntry.as_of == as_of,
            )
            .order_by(DepreciationScheduleEntry.period_index)
            .all()
        )
        if not rows:
            return None

        first = rows[0]
        return DepreciationSchedule(
            asset_id=asset_id,
            method=method,
            as_of=as_of,
            acquisition_cost=Decimal(first.opening_book_value),
            salvage_value=Decimal(rows[-1].closing_book_value),
            periods=tuple(
                DepreciationPeriod(
                    index=row.period_index,
                    start_date=row.start_date,
                    end_date=row.end_date,
                    opening_book_value=Decimal(row.opening_book_value),
                    depreciation=Decimal(row.depreciation_amount),
                    accumulated_depreciation=Decimal(row.accumulated_depreciation),
                    closing_book_value=Decimal(row.closing_book_value),
                    units=Decimal(row.units) if row.units is not None else None,
                )
                for row in rows
            ),
        )
