"""Pytest fixtures for testing"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from valuation_gateway.api.main import create_app
from valuation_gateway.infrastructure.database.models import Base
from valuation_gateway.infrastructure.database.session import get_db
from valuation_gateway.domain.models import Asset, DepreciationMethod
from valuation_gateway.domain.ports import AssetFilters


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeBalanceReader:
    """In-memory balance source that can succeed, fail or stall"""

    def __init__(self, amount: Decimal | None = None, error: Exception | None = None, delay: float = 0.0):
        self.amount = amount
        self.error = error
        self.delay = delay
        self.calls: List[tuple] = []

    async def get_balance(self, business_id: str, as_of: date) -> Decimal:
        self.calls.append((business_id, as_of))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.amount


class FakeAssetReader:
    """In-memory asset store"""

    def __init__(self, assets: List[Asset] | None = None, error: Exception | None = None):
        self.assets = assets or []
        self.error = error

    def get_assets(self, business_id: str, filters: AssetFilters) -> List[Asset]:
        if self.error is not None:
            raise self.error
        return [
            a for a in self.assets
            if a.business_id == business_id and (a.is_active or not filters.active_only)
        ]

    def get_asset(self, business_id: str, asset_id: str) -> Optional[Asset]:
        return next((a for a in self.assets if a.business_id == business_id and a.asset_id == asset_id), None)


class FakeLedger:
    """In-memory ledger with canned aggregates; records every call"""

    def __init__(
        self,
        net_income: Decimal = Decimal("0"),
        inflows: Dict[str, Decimal] | None = None,
        outflows: Dict[str, Decimal] | None = None,
        revenue: Dict[str, Decimal] | None = None,
        expenses: Dict[str, Decimal] | None = None,
        balances: Dict[date, Decimal] | None = None,
        error: Exception | None = None,
    ):
        self.net_income = net_income
        self.inflows = inflows or {}
        self.outflows = outflows or {}
        self.revenue = revenue or {}
        self.expenses = expenses or {}
        self.balances = balances or {}
        self.error = error
        self.calls: List[str] = []

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.error is not None:
            raise self.error

    async def get_net_income(self, business_id, start, end):
        self._record("net_income")
        return self.net_income

    async def get_cash_inflows(self, business_id, start, end):
        self._record("cash_inflows")
        return self.inflows

    async def get_cash_outflows(self, business_id, start, end):
        self._record("cash_outflows")
        return self.outflows

    async def get_revenue_totals(self, business_id, start, end):
        self._record("revenue")
        return self.revenue

    async def get_expense_totals(self, business_id, start, end):
        self._record("expenses")
        return self.expenses

    async def get_cash_balance(self, business_id, as_of):
        self._record("cash_balance")
        return self.balances.get(as_of, Decimal("0"))


def make_asset(**overrides) -> Asset:
    """Straight-line asset with round numbers; override any field"""
    fields = dict(
        asset_id="asset-1",
        business_id="biz-1",
        name="Delivery van",
        acquisition_date=date(2020, 1, 1),
        acquisition_cost=Decimal("1000.00"),
        salvage_value=Decimal("0.00"),
        useful_life=3,
        method=DepreciationMethod.STRAIGHT_LINE,
    )
    fields.update(overrides)
    return Asset(**fields)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def straight_line_asset() -> Asset:
    return make_asset()


@pytest.fixture
def declining_asset() -> Asset:
    return make_asset(
        asset_id="asset-db",
        acquisition_cost=Decimal("10000.00"),
        salvage_value=Decimal("1000.00"),
        useful_life=5,
        method=DepreciationMethod.DECLINING_BALANCE,
    )


@pytest.fixture
def units_asset() -> Asset:
    return make_asset(
        asset_id="asset-uop",
        acquisition_cost=Decimal("10000.00"),
        salvage_value=Decimal("1000.00"),
        useful_life=4,
        method=DepreciationMethod.UNITS_OF_PRODUCTION,
        total_expected_units=Decimal("1000"),
    )
