"""Period report endpoints: cash flow and profit & loss"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from valuation_gateway.api.dependencies import get_report_assembler, get_request_id
from valuation_gateway.api.v1.schemas import CashFlowResponse, ProfitAndLossResponse
from valuation_gateway.domain.exceptions import DataSourceError, InvalidDateRangeError
from valuation_gateway.domain.reports import PeriodReportAssembler

router = APIRouter()


@router.get("/reports/cash-flow", response_model=CashFlowResponse)
async def get_cash_flow(
    request: Request,
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    assembler: PeriodReportAssembler = Depends(get_report_assembler),
):
    """Cash inflows/outflows by activity with opening and closing balances"""
    try:
        report = await assembler.cash_flow(business_id, start_date, end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceError as e:
        logging.error(f"Ledger error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    return CashFlowResponse(**asdict(report))


@router.get("/reports/profit-and-loss", response_model=ProfitAndLossResponse)
async def get_profit_and_loss(
    request: Request,
    business_id: str = Query(..., min_length=1, description="Business identifier"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    assembler: PeriodReportAssembler = Depends(get_report_assembler),
):
    """Revenue and expenses by category with gross and net margins"""
    try:
        report = await assembler.profit_and_loss(business_id, start_date, end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceError as e:
        logging.error(f"Ledger error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    return ProfitAndLossResponse(**asdict(report))
