"""
Route API
Voyage route registry, baseline selection and baseline comparison
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_route_service, to_http_exception
from app.domain.schemas.routes import (
    ComparisonResponse,
    CreateRouteRequest,
    RouteResponse,
)
from app.domain.services.route_service import RouteService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[RouteResponse])
async def list_routes(service: RouteService = Depends(get_route_service)):
    """List all routes"""
    routes = await service.list_routes()
    return [RouteResponse.from_domain(r) for r in routes]


@router.post("", response_model=RouteResponse, status_code=201)
async def create_route(
    request: CreateRouteRequest,
    service: RouteService = Depends(get_route_service),
):
    """Register a route"""
    try:
        route = await service.register_route(request.to_domain())
        return RouteResponse.from_domain(route)
    except ValueError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("❌ Route registration failed")
        raise HTTPException(status_code=500, detail="Internal server error while registering route")


@router.get("/comparison", response_model=ComparisonResponse)
async def compare_routes(
    year: int = Query(2025, description="Compliance year (2025-2030)"),
    service: RouteService = Depends(get_route_service),
):
    """Compare all routes against the baseline for a year"""
    try:
        result = await service.compare(year)
        return ComparisonResponse.from_domain(result)
    except ValueError as e:
        raise to_http_exception(e)


@router.post("/{route_id}/baseline", response_model=RouteResponse)
async def set_baseline(
    route_id: str,
    service: RouteService = Depends(get_route_service),
):
    """Set the baseline route (replaces the previous baseline)"""
    try:
        route = await service.set_baseline(route_id)
        return RouteResponse.from_domain(route)
    except ValueError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("❌ Setting baseline failed")
        raise HTTPException(status_code=500, detail="Internal server error while setting baseline")
