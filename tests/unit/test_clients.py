"""Unit tests for the HTTP value-source clients"""

import httpx
import pytest
from datetime import date
from decimal import Decimal
from valuation_gateway.config import settings
from valuation_gateway.domain.exceptions import DataSourceError
from valuation_gateway.infrastructure.clients.balances import LiquidFundsClient, ReceivablesClient
from valuation_gateway.infrastructure.clients.ledger import LedgerClient

AS_OF = date(2024, 6, 30)


def transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


async def test_balance_client_parses_amount():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        return httpx.Response(200, json={"amount": "1520.75"})

    client = LiquidFundsClient(base_url="http://funds", transport=transport(handler))

    assert await client.get_balance("biz-1", AS_OF) == Decimal("1520.75")
    assert seen["url"].path == "/balances"
    assert seen["url"].params["business_id"] == "biz-1"
    assert seen["url"].params["as_of"] == "2024-06-30"


async def test_balance_client_http_error():
    client = ReceivablesClient(
        base_url="http://receivables",
        transport=transport(lambda request: httpx.Response(503)),
    )

    with pytest.raises(DataSourceError, match="503"):
        await client.get_balance("biz-1", AS_OF)


async def test_balance_client_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    client = LiquidFundsClient(base_url="http://funds", timeout=0.5, transport=transport(handler))

    with pytest.raises(DataSourceError, match="timeout"):
        await client.get_balance("biz-1", AS_OF)


@pytest.mark.parametrize("payload", [{}, {"amount": None}, {"amount": "abc"}])
async def test_balance_client_malformed_payload(payload):
    client = LiquidFundsClient(
        base_url="http://funds",
        transport=transport(lambda request: httpx.Response(200, json=payload)),
    )

    with pytest.raises(DataSourceError):
        await client.get_balance("biz-1", AS_OF)


async def test_ledger_net_income_passes_open_period():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"net_income": "1000.00"})

    client = LedgerClient(base_url="http://ledger", transport=transport(handler))

    assert await client.get_net_income("biz-1", date(2024, 1, 1), None) == Decimal("1000.00")
    assert seen["params"] == {"business_id": "biz-1", "start_date": "2024-01-01"}


async def test_ledger_categories():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/ledger/expenses"
        return httpx.Response(200, json={"categories": {"rent": "1200.00", "payroll": 5000}})

    client = LedgerClient(base_url="http://ledger", transport=transport(handler))

    totals = await client.get_expense_totals("biz-1", date(2024, 1, 1), date(2024, 1, 31))

    assert totals == {"rent": Decimal("1200.00"), "payroll": Decimal("5000")}


async def test_ledger_missing_categories_is_empty():
    client = LedgerClient(base_url="http://ledger", transport=transport(lambda r: httpx.Response(200, json={})))

    assert await client.get_revenue_totals("biz-1", date(2024, 1, 1), date(2024, 1, 31)) == {}


async def test_ledger_non_object_body():
    client = LedgerClient(base_url="http://ledger", transport=transport(lambda r: httpx.Response(200, json=[1, 2])))

    with pytest.raises(DataSourceError):
        await client.get_cash_balance("biz-1", AS_OF)


async def test_ledger_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = LedgerClient(base_url="http://ledger", transport=transport(handler))

    with pytest.raises(DataSourceError, match="unreachable"):
        await client.get_cash_inflows("biz-1", date(2024, 1, 1), date(2024, 1, 31))


def test_explicit_zero_timeout_is_kept():
    assert LiquidFundsClient(base_url="http://funds", timeout=0).timeout == 0
    assert LedgerClient(base_url="http://ledger", timeout=0).timeout == 0
    assert LedgerClient(base_url="http://ledger").timeout == settings.http_timeout_seconds
