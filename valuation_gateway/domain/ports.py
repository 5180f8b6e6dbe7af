"""Read capabilities the domain layer depends on"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Protocol

from valuation_gateway.domain.exceptions import InvalidParameterError
from valuation_gateway.domain.models import Asset, DepreciationMethod


@dataclass(frozen=True)
class AssetFilters:
    """Filters accepted by AssetReader.get_assets"""

    active_only: bool = True
    category: Optional[str] = None
    method: Optional[DepreciationMethod] = None

    @classmethod
    def from_params(
        cls,
        active_only: bool = True,
        category: Optional[str] = None,
        method: Optional[str] = None,
    ) -> "AssetFilters":
        """Build filters from loose query parameters, rejecting unknown methods"""
        parsed_method = None
        if method is not None:
            try:
                parsed_method = DepreciationMethod(method)
            except ValueError as e:
                raise InvalidParameterError(f"Unknown depreciation method filter: {method!r}") from e
        if category is not None and not category.strip():
            raise InvalidParameterError("Category filter must not be blank")
        return cls(active_only=active_only, category=category, method=parsed_method)


class AssetReader(Protocol):
    def get_assets(self, business_id: str, filters: AssetFilters) -> List[Asset]: ...

    def get_asset(self, business_id: str, asset_id: str) -> Optional[Asset]: ...


class BalanceReader(Protocol):
    """Liquid funds, receivables and equipment all expose a point-in-time balance"""

    async def get_balance(self, business_id: str, as_of: date) -> Decimal: ...


class LedgerReader(Protocol):
    async def get_net_income(self, business_id: str, start: Optional[date], end: Optional[date]) -> Decimal: ...

    async def get_cash_inflows(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]: ...

    async def get_cash_outflows(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]: ...

    async def get_revenue_totals(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]: ...

    async def get_expense_totals(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]: ...

    async def get_cash_balance(self, business_id: str, as_of: date) -> Decimal: ...
