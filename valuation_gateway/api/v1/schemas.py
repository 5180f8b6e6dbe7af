"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from valuation_gateway.config import settings


class DepreciationPeriodSchema(BaseModel):
    """Single period in a depreciation schedule"""

    index: int
    start_date: date
    end_date: date
    opening_book_value: Decimal
    depreciation: Decimal
    accumulated_depreciation: Decimal
    closing_book_value: Decimal
    units: Optional[Decimal] = None


class ScheduleResponse(BaseModel):
    """Response for GET /v1/assets/{asset_id}/schedule"""

    asset_id: str
    method: str
    as_of: date
    acquisition_cost: Decimal
    salvage_value: Decimal
    total_depreciation: Decimal
    periods: List[DepreciationPeriodSchema]
    stored: bool = False


class BookValueResponse(BaseModel):
    """Response for GET /v1/assets/{asset_id}/book-value"""

    asset_id: str
    on: date
    book_value: Decimal


class AssetValuesResponse(BaseModel):
    """Response for GET /v1/assets/values"""

    business_id: str
    as_of: date
    values: Dict[str, Decimal]
    total: Decimal
    flagged: Dict[str, str]


class CategorySummarySchema(BaseModel):
    category: str
    count: int
    total_cost: Decimal


class AssetStatisticsResponse(BaseModel):
    """Response for GET /v1/assets/statistics"""

    business_id: str
    as_of: date
    total_assets: int
    active_assets: int
    inactive_assets: int
    total_purchase_value: Decimal
    total_current_value: Decimal
    accumulated_depreciation: Decimal
    categories: List[CategorySummarySchema]
    depreciation_by_year: Dict[int, Decimal]
    flagged: Dict[str, str]


class DisposalRequest(BaseModel):
    """Request body for POST /v1/assets/{asset_id}/disposal-preview"""

    business_id: str = Field(..., min_length=1)
    disposal_date: date
    proceeds: Decimal = Field(..., ge=0)


class DisposalResponse(BaseModel):
    asset_id: str
    disposal_date: date
    book_value: Decimal
    proceeds: Decimal
    gain_loss: Decimal


class ValuationComponentSchema(BaseModel):
    name: str
    value: Optional[Decimal] = None
    failure_reason: Optional[str] = None


class ValuationResponse(BaseModel):
    """Response for GET /v1/valuation"""

    business_id: str
    as_of: date
    status: str  # complete | partial
    components: Dict[str, Decimal]
    total: Decimal
    warnings: List[str]
    details: List[ValuationComponentSchema]


class TitheRequest(BaseModel):
    """Request body for POST /v1/tithe"""

    business_id: str = Field(..., min_length=1, description="Business identifier")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    percentage: float = Field(default=settings.default_tithe_percentage, description="Percent of net income")
    enabled: bool = True


class TitheResponse(BaseModel):
    """Response for POST /v1/tithe"""

    enabled: bool
    calculation_basis: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    percentage: Decimal
    net_income: Optional[Decimal] = None
    amount: Decimal


class CashFlowResponse(BaseModel):
    """Response for GET /v1/reports/cash-flow"""

    business_id: str
    start_date: date
    end_date: date
    inflows: Dict[str, Decimal]
    outflows: Dict[str, Decimal]
    net_by_activity: Dict[str, Decimal]
    total_inflows: Decimal
    total_outflows: Decimal
    net_cash_flow: Decimal
    opening_balance: Decimal
    closing_balance: Decimal
    reconciled: bool


class ProfitAndLossResponse(BaseModel):
    """Response for GET /v1/reports/profit-and-loss"""

    business_id: str
    start_date: date
    end_date: date
    revenue: Dict[str, Decimal]
    expenses: Dict[str, Decimal]
    total_revenue: Decimal
    cost_of_goods_sold: Decimal
    gross_profit: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    gross_margin: Decimal
    net_margin: Decimal
