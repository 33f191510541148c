"""
Pooling API
Create pools of ships, inspect them, change membership
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_pool_aggregator, to_http_exception
from app.domain.models import Pool
from app.domain.schemas.pooling import (
    AddPoolMemberRequest,
    CreatePoolRequest,
    PoolDetailsResponse,
    PoolListResponse,
    PoolOperationResponse,
)
from app.domain.services import pool_aggregator as aggregator
from app.domain.services.pool_aggregator import PoolAggregator

logger = logging.getLogger(__name__)

router = APIRouter()


def _creation_message(pool: Pool) -> str:
    if pool.is_compliant:
        return (
            f'Pool "{pool.name}" created. Pool is COMPLIANT with a total surplus of '
            f"{pool.total_balance_tonnes:.2f} tonnes CO2e."
        )
    return (
        f'Pool "{pool.name}" created but is NON-COMPLIANT. '
        f"Total deficit: {abs(pool.total_balance_tonnes):.2f} tonnes. "
        f"Penalty: EUR {aggregator.total_penalty(pool):.2f} "
        f"(EUR {aggregator.penalty_per_member(pool):.2f} per member)."
    )


@router.post("", response_model=PoolOperationResponse, status_code=201)
async def create_pool(
    request: CreatePoolRequest,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    """Create a pool; each ship's CB is computed from its route (or the baseline)"""
    logger.info(
        "📥 Create pool | %s | %s | ships=%d",
        request.pool_name, request.year, len(request.ships),
    )

    try:
        pool = await pools.create_pool_for_ships(
            name=request.pool_name,
            year=request.year,
            ships=[(s.ship_id, s.route_id) for s in request.ships],
            created_by=request.created_by,
            description=request.description,
        )
    except ValueError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("❌ Pool creation failed due to system error")
        raise HTTPException(status_code=500, detail="Internal server error while creating pool")

    return PoolOperationResponse(
        message=_creation_message(pool),
        pool=PoolDetailsResponse.from_domain(pool),
    )


@router.get("", response_model=PoolListResponse)
async def list_pools(
    year: Optional[int] = Query(None, description="Filter by year"),
    ship_id: Optional[str] = Query(None, description="Filter by member ship"),
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    """List pools (year filter wins over ship filter)"""
    try:
        result = await pools.list_pools(year=year, ship_id=ship_id)
    except ValueError as e:
        raise to_http_exception(e)
    return PoolListResponse.from_domain(result)


@router.get("/by-name/{pool_name}", response_model=PoolDetailsResponse)
async def get_pool_by_name(
    pool_name: str,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    try:
        pool = await pools.get_pool_by_name(pool_name)
    except ValueError as e:
        raise to_http_exception(e)
    return PoolDetailsResponse.from_domain(pool)


@router.get("/{pool_id}", response_model=PoolDetailsResponse)
async def get_pool(
    pool_id: int,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    try:
        pool = await pools.get_pool(pool_id)
    except ValueError as e:
        raise to_http_exception(e)
    return PoolDetailsResponse.from_domain(pool)


@router.post("/{pool_id}/members", response_model=PoolDetailsResponse)
async def add_pool_member(
    pool_id: int,
    request: AddPoolMemberRequest,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    """Add a ship; its CB is computed for the pool year"""
    try:
        pool = await pools.add_member_to_pool(pool_id, request.ship_id, request.route_id)
    except ValueError as e:
        raise to_http_exception(e)
    return PoolDetailsResponse.from_domain(pool)


@router.delete("/{pool_id}/members/{ship_id}", response_model=PoolDetailsResponse)
async def remove_pool_member(
    pool_id: int,
    ship_id: str,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    try:
        pool = await pools.remove_member_from_pool(pool_id, ship_id)
    except ValueError as e:
        raise to_http_exception(e)
    return PoolDetailsResponse.from_domain(pool)


@router.delete("/{pool_id}", status_code=204)
async def delete_pool(
    pool_id: int,
    pools: PoolAggregator = Depends(get_pool_aggregator),
):
    try:
        await pools.delete_pool(pool_id)
    except ValueError as e:
        raise to_http_exception(e)
