from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from app.domain.models import Pool
from app.domain.regulation.fueleu import display_tonnes
from app.domain.services import pool_aggregator as aggregator


class PoolShipInput(BaseModel):
    ship_id: str = Field(..., min_length=1)
    route_id: Optional[str] = Field(None, description="Specific route, otherwise the baseline")


class CreatePoolRequest(BaseModel):
    pool_name: str = Field(..., min_length=1)
    year: int
    ships: List[PoolShipInput]
    created_by: Optional[str] = None
    description: Optional[str] = None


class AddPoolMemberRequest(BaseModel):
    ship_id: str = Field(..., min_length=1)
    route_id: Optional[str] = None


class PoolMemberResponse(BaseModel):
    ship_id: str
    route_id: Optional[str]
    compliance_balance: float
    compliance_balance_tonnes: float
    contribution: str


class PoolDetailsResponse(BaseModel):
    id: Optional[int]
    pool_name: str
    year: int
    member_count: int
    members: List[PoolMemberResponse]

    total_cb: float
    total_cb_tonnes: float
    total_surplus: float
    total_deficit: float
    total_surplus_tonnes: float
    total_deficit_tonnes: float
    surplus_members: int
    deficit_members: int

    is_compliant: bool
    status: str
    penalty: float
    penalty_per_member: float

    created_by: Optional[str]
    created_at: datetime
    description: Optional[str]

    @classmethod
    def from_domain(cls, pool: Pool) -> "PoolDetailsResponse":
        surplus = aggregator.total_surplus(pool)
        deficit = aggregator.total_deficit(pool)
        return cls(
            id=pool.id,
            pool_name=pool.name,
            year=pool.year,
            member_count=pool.member_count,
            members=[
                PoolMemberResponse(
                    ship_id=m.ship_id,
                    route_id=m.route_id,
                    compliance_balance=float(m.compliance_balance),
                    compliance_balance_tonnes=display_tonnes(m.compliance_balance),
                    contribution=m.contribution,
                )
                for m in pool.members
            ],
            total_cb=float(pool.total_balance),
            total_cb_tonnes=display_tonnes(pool.total_balance),
            total_surplus=float(surplus),
            total_deficit=float(deficit),
            total_surplus_tonnes=display_tonnes(surplus),
            total_deficit_tonnes=display_tonnes(deficit),
            surplus_members=len(aggregator.surplus_members(pool)),
            deficit_members=len(aggregator.deficit_members(pool)),
            is_compliant=pool.is_compliant,
            status=pool.status,
            penalty=float(round(aggregator.total_penalty(pool), 2)),
            penalty_per_member=float(round(aggregator.penalty_per_member(pool), 2)),
            created_by=pool.created_by,
            created_at=pool.created_at,
            description=pool.description,
        )


class PoolOperationResponse(BaseModel):
    success: bool = True
    message: str
    pool: PoolDetailsResponse


class PoolSummaryResponse(BaseModel):
    id: Optional[int]
    pool_name: str
    year: int
    member_count: int
    total_cb_tonnes: float
    is_compliant: bool
    status: str
    created_at: datetime


class PoolListResponse(BaseModel):
    success: bool = True
    total_pools: int
    compliant_pools: int
    non_compliant_pools: int
    pools: List[PoolSummaryResponse]

    @classmethod
    def from_domain(cls, pools: List[Pool]) -> "PoolListResponse":
        compliant = sum(1 for p in pools if p.is_compliant)
        return cls(
            total_pools=len(pools),
            compliant_pools=compliant,
            non_compliant_pools=len(pools) - compliant,
            pools=[
                PoolSummaryResponse(
                    id=p.id,
                    pool_name=p.name,
                    year=p.year,
                    member_count=p.member_count,
                    total_cb_tonnes=display_tonnes(p.total_balance),
                    is_compliant=p.is_compliant,
                    status=p.status,
                    created_at=p.created_at,
                )
                for p in pools
            ],
        )
