"""GET /v1/valuation - business valuation with partial-data semantics"""

import time
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from valuation_gateway.api.dependencies import get_request_id, get_valuation_aggregator
from valuation_gateway.api.v1.schemas import ValuationComponentSchema, ValuationResponse
from valuation_gateway.domain.exceptions import InvalidParameterError
from valuation_gateway.domain.valuation import ValuationAggregator
from valuation_gateway.infrastructure.observability.logging import log_valuation
from valuation_gateway.infrastructure.observability.metrics import record_valuation

router = APIRouter()


@router.get("/valuation", response_model=ValuationResponse)
async def get_business_valuation(
    request: Request,
    business_id: str = Query(..., description="Business identifier"),
    as_of: Optional[date] = Query(None, description="Valuation date (default: today)"),
    aggregator: ValuationAggregator = Depends(get_valuation_aggregator),
):
    """
    Value a business from liquid funds, fixed assets, equipment and receivables.

    Flow:
    1. Fetch all four components concurrently
    2. Components that fail or time out count as 0 and are listed in warnings
    3. Respond 200 with status "partial" when any warning is present

    Only malformed input is an error; missing data never is.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        valuation = await aggregator.get_business_valuation(business_id, as_of or date.today())
    except InvalidParameterError as e:
        logging.warning(f"Invalid valuation request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    duration_ms = (time.time() - start_time) * 1000
    record_valuation(valuation)
    log_valuation(request_id, valuation.business_id, str(valuation.total), valuation.warnings, duration_ms)

    return ValuationResponse(
        business_id=valuation.business_id,
        as_of=valuation.as_of,
        status="partial" if valuation.is_partial else "complete",
        components=valuation.components,
        total=valuation.total,
        warnings=valuation.warnings,
        details=[
            ValuationComponentSchema(name=c.name, value=c.value, failure_reason=c.failure_reason)
            for c in valuation.details
        ],
    )
