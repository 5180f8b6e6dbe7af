"""Asset depreciation endpoints: schedules, book values and register summaries"""

import logging
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from valuation_gateway.api.dependencies import get_asset_repository, get_request_id
from valuation_gateway.api.v1.schemas import (
    AssetStatisticsResponse,
    AssetValuesResponse,
    BookValueResponse,
    DepreciationPeriodSchema,
    DisposalRequest,
    DisposalResponse,
    ScheduleResponse,
)
from valuation_gateway.domain.assets import depreciation_by_year, disposal_gain_loss, summarize_assets
from valuation_gateway.domain.depreciation import book_value_as_of, compute_schedule, current_asset_values
from valuation_gateway.domain.exceptions import AssetNotFoundError, InvalidAssetError, InvalidParameterError
from valuation_gateway.domain.models import Asset
from valuation_gateway.domain.ports import AssetFilters
from valuation_gateway.infrastructure.database.repositories import AssetRepository
from valuation_gateway.infrastructure.observability.logging import log_schedule
from valuation_gateway.infrastructure.observability.metrics import invalid_asset_counter, schedule_counter

router = APIRouter()


def _load_asset(repo: AssetRepository, business_id: str, asset_id: str) -> Asset:
    asset = repo.get_asset(business_id, asset_id)
    if asset is None:
        raise AssetNotFoundError(f"Asset {asset_id} not found")
    return asset


def _filters(category: Optional[str], method: Optional[str], include_inactive: bool) -> AssetFilters:
    try:
        return AssetFilters.from_params(active_only=not include_inactive, category=category, method=method)
    except InvalidParameterError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/assets/values", response_model=AssetValuesResponse)
def get_current_asset_values(
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    as_of: Optional[date] = Query(None, description="Valuation date (default: today)"),
    category: Optional[str] = Query(None),
    method: Optional[str] = Query(None),
    repo: AssetRepository = Depends(get_asset_repository),
):
    """
    Book value of every active asset.

    Assets with invalid facts are reported at their stored value and listed
    under flagged rather than failing the request.
    """
    as_of = as_of or date.today()
    assets = repo.get_assets(business_id, _filters(category, method, include_inactive=False))
    values = current_asset_values(assets, as_of)
    if values.flagged:
        invalid_asset_counter.inc(len(values.flagged))

    return AssetValuesResponse(
        business_id=business_id,
        as_of=as_of,
        values=values.values,
        total=values.total,
        flagged=values.flagged,
    )


@router.get("/assets/statistics", response_model=AssetStatisticsResponse)
def get_asset_statistics(
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    as_of: Optional[date] = Query(None, description="Reference date (default: today)"),
    repo: AssetRepository = Depends(get_asset_repository),
):
    """Register-wide counts, cost, current value and depreciation booked per year"""
    as_of = as_of or date.today()
    assets = repo.get_assets(business_id, AssetFilters(active_only=False))
    stats = summarize_assets(assets, as_of)

    schedules = []
    for asset in assets:
        if not asset.is_active or asset.asset_id in stats.flagged:
            continue
        try:
            schedules.append(compute_schedule(asset))
        except InvalidAssetError:
            # Units-of-production assets need production figures the register does not hold
            continue

    return AssetStatisticsResponse(
        business_id=business_id,
        **asdict(stats),
        depreciation_by_year=depreciation_by_year(schedules),
    )


@router.get("/assets/{asset_id}/schedule", response_model=ScheduleResponse)
def get_depreciation_schedule(
    asset_id: str,
    request: Request,
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    as_of: Optional[date] = Query(None, description="Reference date (default: today)"),
    units: Optional[List[Decimal]] = Query(None, description="Units produced per period"),
    persist: bool = Query(False, description="Store the generated schedule"),
    repo: AssetRepository = Depends(get_asset_repository),
):
    """
    Generate the full depreciation schedule for an asset.

    Returns:
        One entry per period with opening/closing book value and
        accumulated depreciation
    """
    request_id = get_request_id(request)
    as_of = as_of or date.today()

    try:
        asset = _load_asset(repo, business_id, asset_id)
        schedule = compute_schedule(asset, as_of=as_of, units_per_period=units)
    except AssetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidAssetError as e:
        invalid_asset_counter.inc()
        logging.warning(f"Invalid asset: {e}", extra={"request_id": request_id, "asset_id": asset_id})
        raise HTTPException(status_code=422, detail=str(e))

    stored = False
    if persist:
        stored = repo.save_schedule(business_id, schedule)
        repo.db.commit()

    schedule_counter.labels(method=schedule.method.value).inc()
    log_schedule(request_id, asset_id, schedule.method.value, len(schedule.periods))

    return ScheduleResponse(
        asset_id=schedule.asset_id,
        method=schedule.method.value,
        as_of=as_of,
        acquisition_cost=schedule.acquisition_cost,
        salvage_value=schedule.salvage_value,
        total_depreciation=schedule.total_depreciation,
        periods=[DepreciationPeriodSchema(**asdict(period)) for period in schedule.periods],
        stored=stored,
    )


@router.get("/assets/{asset_id}/book-value", response_model=BookValueResponse)
def get_book_value(
    asset_id: str,
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    on: Optional[date] = Query(None, description="Valuation date (default: today)"),
    units: Optional[List[Decimal]] = Query(None, description="Units produced per period"),
    repo: AssetRepository = Depends(get_asset_repository),
):
    """Book value of one asset on a date"""
    on = on or date.today()
    try:
        asset = _load_asset(repo, business_id, asset_id)
        value = book_value_as_of(asset, on, units_per_period=units)
    except AssetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidAssetError as e:
        invalid_asset_counter.inc()
        raise HTTPException(status_code=422, detail=str(e))

    return BookValueResponse(asset_id=asset_id, on=on, book_value=value)


@router.post("/assets/{asset_id}/disposal-preview", response_model=DisposalResponse)
def preview_disposal(
    asset_id: str,
    body: DisposalRequest,
    repo: AssetRepository = Depends(get_asset_repository),
):
    """Gain or loss if the asset were disposed of for the given proceeds"""
    try:
        asset = _load_asset(repo, body.business_id, asset_id)
        result = disposal_gain_loss(asset, body.disposal_date, body.proceeds)
    except AssetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidParameterError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidAssetError as e:
        invalid_asset_counter.inc()
        raise HTTPException(status_code=422, detail=str(e))

    return DisposalResponse(**asdict(result))
