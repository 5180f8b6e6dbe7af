"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from valuation_gateway.domain.reports import PeriodReportAssembler
from valuation_gateway.domain.tithe import TitheCalculator
from valuation_gateway.domain.valuation import ValuationAggregator
from valuation_gateway.infrastructure.clients.balances import EquipmentClient, LiquidFundsClient, ReceivablesClient
from valuation_gateway.infrastructure.clients.ledger import LedgerClient
from valuation_gateway.infrastructure.database.repositories import AssetRepository
from valuation_gateway.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_asset_repository(db: Session = Depends(get_db)) -> AssetRepository:
    """Provide asset repository bound to the request session"""
    return AssetRepository(db)


def get_ledger_client() -> LedgerClient:
    """Provide ledger read client instance"""
    return LedgerClient()


def get_valuation_aggregator(assets: AssetRepository = Depends(get_asset_repository)) -> ValuationAggregator:
    """Provide aggregator wired to every value source"""
    return ValuationAggregator(
        liquid_funds=LiquidFundsClient(),
        asset_reader=assets,
        equipment=EquipmentClient(),
        receivables=ReceivablesClient(),
    )


def get_tithe_calculator(ledger: LedgerClient = Depends(get_ledger_client)) -> TitheCalculator:
    return TitheCalculator(ledger)


def get_report_assembler(ledger: LedgerClient = Depends(get_ledger_client)) -> PeriodReportAssembler:
    return PeriodReportAssembler(ledger)
