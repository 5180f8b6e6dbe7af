"""Business valuation aggregator - combines independently-failing value sources"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Awaitable, Callable, Dict, List, Optional

from valuation_gateway.domain.depreciation import current_asset_values
from valuation_gateway.domain.exceptions import ComponentFetchError, InvalidParameterError
from valuation_gateway.domain.models import BusinessValuation, ValuationComponent
from valuation_gateway.domain.ports import AssetFilters, AssetReader, BalanceReader
from valuation_gateway.utils.money import ZERO, sum_money, to_money
from valuation_gateway.config import settings

logger = logging.getLogger(__name__)

LIQUID_ASSETS = "liquid_assets"
FIXED_ASSETS = "fixed_assets"
EQUIPMENT_ASSETS = "equipment_assets"
ACCOUNTS_RECEIVABLE = "accounts_receivable"

# Output order of components, independent of fetch completion order
CANONICAL_COMPONENTS = (LIQUID_ASSETS, FIXED_ASSETS, EQUIPMENT_ASSETS, ACCOUNTS_RECEIVABLE)


@dataclass(frozen=True)
class ComponentResult:
    """Outcome of one component fetch: either a value or the error that replaced it"""

    name: str
    value: Optional[Decimal] = None
    error: Optional[ComponentFetchError] = None

    @classmethod
    def ok(cls, name: str, value: Decimal) -> "ComponentResult":
        return cls(name=name, value=value)

    @classmethod
    def failed(cls, name: str, reason: str) -> "ComponentResult":
        return cls(name=name, error=ComponentFetchError(name, reason))


def reduce_components(business_id: str, as_of: date, results: List[ComponentResult]) -> BusinessValuation:
    """
    Fold component results into a valuation.

    Failed components contribute 0 to the total and one warning each, so the
    total always equals the sum of the reported component amounts.
    """
    by_name = {result.name: result for result in results}
    components: Dict[str, Decimal] = {}
    warnings: List[str] = []
    details: List[ValuationComponent] = []

    for name in CANONICAL_COMPONENTS:
        result = by_name.get(name) or ComponentResult.failed(name, "not requested")
        if result.error is None:
            components[name] = result.value
            details.append(ValuationComponent(name=name, value=result.value))
        else:
            components[name] = ZERO
            warnings.append(name)
            details.append(ValuationComponent(name=name, value=None, failure_reason=result.error.reason))

    return BusinessValuation(
        business_id=business_id,
        as_of=as_of,
        components=components,
        total=sum_money(components.values()),
        warnings=warnings,
        details=details,
    )


class ValuationAggregator:
    """Fan out to every value source concurrently, then reduce in canonical order"""

    def __init__(
        self,
        liquid_funds: BalanceReader,
        asset_reader: AssetReader,
        equipment: BalanceReader,
        receivables: BalanceReader,
        timeout: float | None = None,
    ):
        self.liquid_funds = liquid_funds
        self.asset_reader = asset_reader
        self.equipment = equipment
        self.receivables = receivables
        self.timeout = timeout if timeout is not None else settings.component_timeout_seconds

    async def get_business_valuation(self, business_id: str, as_of: date) -> BusinessValuation:
        """
        Valuation of a business as of a date.

        Never raises for missing or failing data: each failed component is
        valued at 0 and named in warnings. If every component fails the
        result is still well-formed with total 0.

        Raises:
            InvalidParameterError: business_id or as_of is malformed
        """
        as_of = self._validate(business_id, as_of)

        fetchers: Dict[str, Callable[[], Awaitable[Decimal]]] = {
            LIQUID_ASSETS: lambda: self.liquid_funds.get_balance(business_id, as_of),
            FIXED_ASSETS: lambda: self._fixed_assets_value(business_id, as_of),
            EQUIPMENT_ASSETS: lambda: self.equipment.get_balance(business_id, as_of),
            ACCOUNTS_RECEIVABLE: lambda: self.receivables.get_balance(business_id, as_of),
        }
        results = await asyncio.gather(*(self._fetch(name, fetchers[name]) for name in CANONICAL_COMPONENTS))
        return reduce_components(business_id, as_of, list(results))

    async def _fetch(self, name: str, fetch: Callable[[], Awaitable[Decimal]]) -> ComponentResult:
        try:
            value = await asyncio.wait_for(fetch(), timeout=self.timeout)
            return ComponentResult.ok(name, to_money(value))
        except asyncio.TimeoutError:
            logger.warning("Valuation component timed out", extra={"component": name, "timeout_s": self.timeout})
            return ComponentResult.failed(name, f"timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(
                "Valuation component failed",
                extra={"component": name, "error": str(e), "error_type": type(e).__name__},
            )
            return ComponentResult.failed(name, str(e) or type(e).__name__)

    async def _fixed_assets_value(self, business_id: str, as_of: date) -> Decimal:
        # Asset store is synchronous (SQLAlchemy session); keep it off the event loop
        assets = await asyncio.to_thread(self.asset_reader.get_assets, business_id, AssetFilters(active_only=True))
        values = current_asset_values(assets, as_of)
        if values.flagged:
            logger.warning(
                "Assets valued at stored book value",
                extra={"business_id": business_id, "flagged_assets": sorted(values.flagged)},
            )
        return values.total

    @staticmethod
    def _validate(business_id: str, as_of: date) -> date:
        if not isinstance(business_id, str) or not business_id.strip():
            raise InvalidParameterError("business_id must be a non-empty string")
        if isinstance(as_of, datetime):
            return as_of.date()
        if not isinstance(as_of, date):
            raise InvalidParameterError(f"as_of must be a date, got {type(as_of).__name__}")
        return as_of
