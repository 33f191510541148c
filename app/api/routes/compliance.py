"""
Compliance API
Compliance balance (CB) for a ship and year
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_compliance_service, to_http_exception
from app.domain.schemas.compliance import ComplianceBalanceResponse
from app.domain.services.compliance_service import ComplianceService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/cb", response_model=ComplianceBalanceResponse)
async def get_compliance_balance(
    ship_id: str = Query(..., description="Ship identifier"),
    year: int = Query(..., description="Compliance year (2025-2030)"),
    route_id: Optional[str] = Query(None, description="Route to use (default: baseline)"),
    service: ComplianceService = Depends(get_compliance_service),
):
    """
    Calculate the compliance balance.

    Route behavior:
    - Uses route_id if given
    - Otherwise the current baseline route
    """
    try:
        cb = await service.compute(ship_id, year, route_id)
    except ValueError as e:
        raise to_http_exception(e)

    return ComplianceBalanceResponse.from_domain(cb)
