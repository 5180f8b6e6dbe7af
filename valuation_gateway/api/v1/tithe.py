"""POST /v1/tithe - tithe on net income for a period"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from valuation_gateway.api.dependencies import get_request_id, get_tithe_calculator
from valuation_gateway.api.v1.schemas import TitheRequest, TitheResponse
from valuation_gateway.domain.exceptions import DataSourceError, InvalidDateRangeError, InvalidParameterError
from valuation_gateway.domain.models import TitheOptions
from valuation_gateway.domain.tithe import TitheCalculator

router = APIRouter()


@router.post("/tithe", response_model=TitheResponse)
async def calculate_tithe(
    request_body: TitheRequest,
    request: Request,
    calculator: TitheCalculator = Depends(get_tithe_calculator),
):
    """Calculate the tithe; a disabled tithe returns 0 without reading the ledger"""
    request_id = get_request_id(request)
    options = TitheOptions(
        start_date=request_body.start_date,
        end_date=request_body.end_date,
        percentage=request_body.percentage,
        enabled=request_body.enabled,
    )

    try:
        result = await calculator.calculate(request_body.business_id, options)
    except (InvalidParameterError, InvalidDateRangeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceError as e:
        logging.error(f"Ledger error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    return TitheResponse(
        enabled=result.enabled,
        calculation_basis=result.calculation_basis,
        start_date=result.start_date,
        end_date=result.end_date,
        percentage=result.percentage,
        net_income=result.net_income,
        amount=result.amount,
    )
