"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple

from valuation_gateway.utils.money import ZERO


class DepreciationMethod(str, Enum):
    """Supported depreciation methods"""

    STRAIGHT_LINE = "straight_line"
    DECLINING_BALANCE = "declining_balance"
    UNITS_OF_PRODUCTION = "units_of_production"


@dataclass(frozen=True)
class Asset:
    """Fixed asset record supplied by the asset store"""

    asset_id: str
    business_id: str
    name: str
    acquisition_date: date
    acquisition_cost: Decimal
    salvage_value: Decimal
    useful_life: int  # number of periods
    method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE  # raw str when the stored method is unknown
    category: str = "equipment"
    period_months: int = 12
    total_expected_units: Optional[Decimal] = None
    declining_rate: Optional[Decimal] = None  # percent per period, overrides the factor/life rate
    current_book_value: Optional[Decimal] = None  # last stored value
    is_active: bool = True


@dataclass(frozen=True)
class DepreciationPeriod:
    """One period of a depreciation schedule"""

    index: int
    start_date: date
    end_date: date  # exclusive
    opening_book_value: Decimal
    depreciation: Decimal
    accumulated_depreciation: Decimal
    closing_book_value: Decimal
    units: Optional[Decimal] = None


@dataclass(frozen=True)
class DepreciationSchedule:
    """Ordered depreciation periods for one asset"""

    asset_id: str
    method: DepreciationMethod
    as_of: Optional[date]
    acquisition_cost: Decimal
    salvage_value: Decimal
    periods: Tuple[DepreciationPeriod, ...]

    @property
    def total_depreciation(self) -> Decimal:
        return sum((p.depreciation for p in self.periods), ZERO)

    @property
    def final_period_end(self) -> date:
        return self.periods[-1].end_date


@dataclass
class AssetValues:
    """Book values for a set of assets at one point in time"""

    as_of: date
    values: Dict[str, Decimal]
    flagged: Dict[str, str] = field(default_factory=dict)  # asset_id -> reason

    @property
    def total(self) -> Decimal:
        return sum(self.values.values(), ZERO)


@dataclass
class CategorySummary:
    """Asset count and cost for one category"""

    category: str
    count: int
    total_cost: Decimal


@dataclass
class AssetStatistics:
    """Fleet-wide asset statistics"""

    as_of: date
    total_assets: int
    active_assets: int
    inactive_assets: int
    total_purchase_value: Decimal
    total_current_value: Decimal
    accumulated_depreciation: Decimal
    categories: List[CategorySummary]
    flagged: Dict[str, str]


@dataclass
class DisposalResult:
    """Outcome of disposing an asset at a given price"""

    asset_id: str
    disposal_date: date
    book_value: Decimal
    proceeds: Decimal
    gain_loss: Decimal  # positive = gain


@dataclass
class ValuationComponent:
    """One independently-sourced slice of a business valuation"""

    name: str
    value: Optional[Decimal]
    failure_reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.failure_reason is not None


@dataclass
class BusinessValuation:
    """Aggregated valuation, possibly built from partial data"""

    business_id: str
    as_of: date
    components: Dict[str, Decimal]
    total: Decimal
    warnings: List[str]
    details: List[ValuationComponent]

    @property
    def is_partial(self) -> bool:
        return bool(self.warnings)


@dataclass
class TitheOptions:
    """Caller-supplied tithe parameters"""

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    percentage: float = 10.0
    enabled: bool = True


@dataclass
class TitheResult:
    """Percentage-of-net-income figure for a period"""

    start_date: Optional[date]
    end_date: Optional[date]
    percentage: Decimal
    enabled: bool
    net_income: Optional[Decimal]
    amount: Decimal
    calculation_basis: str = "net_profit"


@dataclass
class CashFlowReport:
    """Cash movements per activity over a period"""

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


@dataclass
class ProfitAndLossReport:
    """Revenue and expense totals over a period"""

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
    gross_margin: Decimal  # percent
    net_margin: Decimal  # percent
