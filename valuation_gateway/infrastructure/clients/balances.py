"""HTTP clients for point-in-time balances: liquid funds, receivables, equipment"""

import httpx
from datetime import date
from decimal import Decimal, InvalidOperation

from valuation_gateway.config import settings
from valuation_gateway.domain.exceptions import DataSourceError
from valuation_gateway.infrastructure.observability.metrics import source_failure_counter, source_latency_histogram


class BalanceClient:
    """Client for an external service exposing GET /balances?business_id&as_of"""

    source = "balance"

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.transport = transport

    async def get_balance(self, business_id: str, as_of: date) -> Decimal:
        """
        Fetch the balance held by a business on a date.

        Raises:
            DataSourceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with source_latency_histogram.labels(source=self.source).time():
                    response = await client.get(
                        f"{self.base_url}/balances",
                        params={"business_id": business_id, "as_of": as_of.isoformat()},
                    )
                response.raise_for_status()
                data = response.json()
                return Decimal(str(data["amount"]))

            except httpx.TimeoutException as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"{self.source} API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"{self.source} API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"{self.source} API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, InvalidOperation) as e:
                source_failure_counter.labels(source=self.source).inc()
                raise DataSourceError(f"Invalid balance data from {self.source}: {e}") from e


class LiquidFundsClient(BalanceClient):
    """Cash and bank balances"""

    source = "liquid_funds"

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(base_url or settings.liquid_funds_api_base, **kwargs)


class ReceivablesClient(BalanceClient):
    """Outstanding customer invoices"""

    source = "receivables"

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(base_url or settings.receivables_api_base, **kwargs)


class EquipmentClient(BalanceClient):
    """Book value of hired-out and leased equipment"""

    source = "equipment"

    def __init__(self, base_url: str | None = None, **kwargs):
        super().__init__(base_url or settings.equipment_api_base, **kwargs)
