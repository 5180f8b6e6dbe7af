"""Ledger read client: net income, category totals and cash balances"""

import httpx
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from valuation_gateway.config import settings
from valuation_gateway.domain.exceptions import DataSourceError
from valuation_gateway.infrastructure.observability.metrics import source_failure_counter, source_latency_histogram


def _period_params(business_id: str, start: Optional[date], end: Optional[date]) -> Dict[str, str]:
    params = {"business_id": business_id}
    if start is not None:
        params["start_date"] = start.isoformat()
    if end is not None:
        params["end_date"] = end.isoformat()
    return params


class LedgerClient:
    """Client for the ledger service's aggregate read endpoints"""

    source = "ledger"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.transport = transport

    async def _get(self, path: str, params: Dict[str, str]) -> Dict[str, Any]:
        """
        GET a ledger endpoint and return its JSON body.

        Raises:
            DataSourceError: On timeout, HTTP errors, or a non-object body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with source_latency_histogram.labels(source=self.source).time():
                    response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise TypeError(f"expected JSON object, got {type(data).__name__}")
                return data

            except httpx.TimeoutException as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"Ledger API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"Ledger API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"Ledger API unreachable: {e}") from e
            except (ValueError, TypeError) as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"Invalid ledger response: {e}") from e

    async def _amount(self, path: str, params: Dict[str, str], key: str) -> Decimal:
        data = await self._get(path, params)
        try:
            return Decimal(str(data[key]))
        except (KeyError, InvalidOperation) as e:
            raise DataSourceError(f"Invalid ledger {key}: {e!r}") from e

    async def _categories(self, path: str, params: Dict[str, str]) -> Dict[str, Decimal]:
        data = await self._get(path, params)
        try:
            return {name: Decimal(str(amount)) for name, amount in (data.get("categories") or {}).items()}
        except (AttributeError, InvalidOperation) as e:
            raise DataSourceError(f"Invalid ledger categories: {e!r}") from e

    async def get_net_income(self, business_id: str, start: Optional[date], end: Optional[date]) -> Decimal:
        return await self._amount("/ledger/net-income", _period_params(business_id, start, end), "net_income")

    async def get_cash_inflows(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]:
        return await self._categories("/ledger/cash-flow/inflows", _period_params(business_id, start, end))

    async def get_cash_outflows(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]:
        return await self._categories("/ledger/cash-flow/outflows", _period_params(business_id, start, end))

    async def get_revenue_totals(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]:
        return await self._categories("/ledger/revenue", _period_params(business_id, start, end))

    async def get_expense_totals(self, business_id: str, start: date, end: date) -> Dict[str, Decimal]:
        return await self._categories("/ledger/expenses", _period_params(business_id, start, end))

    async def get_cash_balance(self, business_id: str, as_of: date) -> Decimal:
        return await self._amount(
            "/ledger/cash-balance",
            {"business_id": business_id, "as_of": as_of.isoformat()},
            "balance",
        )
