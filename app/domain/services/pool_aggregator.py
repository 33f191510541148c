"""
POOL AGGREGATOR (ENGINE-3)
Combines ship compliance balances into a pool balance

RESPONSIBILITIES:
- Validate and create pools (unique name, >= 2 unique members, valid year)
- Recompute pool totals on every membership change
- Derive pool penalty and its even split across members

RULES:
❌ Totals are never patched incrementally
❌ No proportional liability: penalty is split evenly per member
✅ Membership changes return a new Pool value
✅ Validation happens before any store write
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

from app.domain.errors import (
    InvalidInputError,
    NotFoundError,
    PoolMembershipError,
)
from app.domain.models import Pool, PoolMember
from app.domain.regulation.fueleu import (
    PENALTY_EUR_PER_TONNE,
    to_tonnes,
    validate_year,
)
from app.domain.services.compliance_calculator import validate_ship_id
from app.domain.services.compliance_service import ComplianceService
from app.utils.time import now_utc_naive

logger = logging.getLogger(__name__)

MIN_POOL_MEMBERS = 2


class PoolRepository(Protocol):
    """Protocol for pool data access - ASYNC"""

    async def save(self, pool: Pool) -> Pool:
        """Persist a new pool, returning it with its id"""
        ...

    async def find_by_id(self, pool_id: int) -> Optional[Pool]:
        ...

    async def find_by_name(self, name: str) -> Optional[Pool]:
        ...

    async def find_by_year(self, year: int) -> List[Pool]:
        ...

    async def find_by_ship(self, ship_id: str) -> List[Pool]:
        """Pools the ship is a member of"""
        ...

    async def find_all(self) -> List[Pool]:
        ...

    async def update(self, pool: Pool) -> Pool:
        """Replace members / totals of an existing pool"""
        ...

    async def delete(self, pool_id: int) -> bool:
        ...


# -------------------------------------------------------------------
# Pure pool arithmetic
# -------------------------------------------------------------------

def _summarize(members: Sequence[PoolMember]) -> Tuple[Decimal, bool]:
    total = sum((m.compliance_balance for m in members), Decimal("0"))
    return total, total >= Decimal("0")


def _validate_ship_ids(ship_ids: Sequence[str]) -> None:
    if not ship_ids or len(ship_ids) < MIN_POOL_MEMBERS:
        raise InvalidInputError(f"Pool must have at least {MIN_POOL_MEMBERS} members")
    if len(ship_ids) != len(set(ship_ids)):
        raise InvalidInputError("Pool cannot have duplicate members")


def build_pool(
    name: str,
    year: int,
    members: Iterable[PoolMember],
    created_by: Optional[str] = None,
    description: Optional[str] = None,
) -> Pool:
    """
    Validate input and construct a Pool with derived totals

    Raises:
        InvalidInputError: Blank name, bad year, < 2 or duplicate members
    """
    if not name or not name.strip():
        raise InvalidInputError("Pool name is required")
    validate_year(year)

    members = tuple(members)
    _validate_ship_ids([m.ship_id for m in members])

    total, is_compliant = _summarize(members)

    return Pool(
        name=name.strip(),
        year=year,
        members=members,
        total_balance=total,
        is_compliant=is_compliant,
        created_at=now_utc_naive(),
        created_by=created_by,
        description=description,
    )


def add_member(pool: Pool, member: PoolMember) -> Pool:
    """Return a new pool including member, totals recomputed"""
    if pool.get_member(member.ship_id) is not None:
        raise InvalidInputError(f"Ship {member.ship_id} is already in the pool")

    members = pool.members + (member,)
    total, is_compliant = _summarize(members)
    return replace(pool, members=members, total_balance=total, is_compliant=is_compliant)


def remove_member(pool: Pool, ship_id: str) -> Pool:
    """Return a new pool without ship_id, totals recomputed"""
    if pool.get_member(ship_id) is None:
        raise NotFoundError(f"Ship {ship_id} is not in the pool")
    if pool.member_count - 1 < MIN_POOL_MEMBERS:
        raise PoolMembershipError(
            f"Cannot remove {ship_id}: pool must keep at least {MIN_POOL_MEMBERS} members"
        )

    members = tuple(m for m in pool.members if m.ship_id != ship_id)
    total, is_compliant = _summarize(members)
    return replace(pool, members=members, total_balance=total, is_compliant=is_compliant)


def total_penalty(pool: Pool) -> Decimal:
    """Penalty for the pool deficit; 0 when the pool is compliant"""
    if pool.is_compliant:
        return Decimal("0")
    return to_tonnes(abs(pool.total_balance)) * PENALTY_EUR_PER_TONNE


def penalty_per_member(pool: Pool) -> Decimal:
    """Even split of the pool penalty, regardless of each member's balance"""
    penalty = total_penalty(pool)
    if penalty == 0 or pool.member_count == 0:
        return Decimal("0")
    return penalty / Decimal(pool.member_count)


def surplus_members(pool: Pool) -> List[PoolMember]:
    return [m for m in pool.members if m.compliance_balance > 0]


def deficit_members(pool: Pool) -> List[PoolMember]:
    return [m for m in pool.members if m.compliance_balance < 0]


def total_surplus(pool: Pool) -> Decimal:
    return sum((m.compliance_balance for m in surplus_members(pool)), Decimal("0"))


def total_deficit(pool: Pool) -> Decimal:
    return abs(sum((m.compliance_balance for m in deficit_members(pool)), Decimal("0")))


# -------------------------------------------------------------------
# Aggregator over the pool store
# -------------------------------------------------------------------

class PoolAggregator:
    """Pool lifecycle over an injected pool repository"""

    def __init__(
        self,
        pool_repo: PoolRepository,
        compliance_service: Optional[ComplianceService] = None,
    ):
        self.pool_repo = pool_repo
        self.compliance_service = compliance_service

    async def create_pool(
        self,
        name: str,
        year: int,
        members: Sequence[PoolMember],
        created_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Pool:
        """
        Create and store a pool from members with known balances

        Raises:
            InvalidInputError: Name taken or invalid members / year
        """
        pool = build_pool(name, year, members, created_by, description)

        existing = await self.pool_repo.find_by_name(pool.name)
        if existing is not None:
            raise InvalidInputError(f'Pool with name "{pool.name}" already exists')

        saved = await self.pool_repo.save(pool)

        logger.info(
            "🤝 Pool created | %s | year=%s | members=%d | total=%.2f t | %s",
            saved.name, saved.year, saved.member_count,
            saved.total_balance_tonnes, saved.status,
        )
        return saved

    async def create_pool_for_ships(
        self,
        name: str,
        year: int,
        ships: Sequence[Tuple[str, Optional[str]]],
        created_by: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Pool:
        """
        Create a pool from (ship_id, route_id) pairs

        Each ship's balance is computed through the compliance service; a
        missing route_id means the baseline route.
        """
        # Shape checks first so no route lookups happen for a doomed request
        if not name or not name.strip():
            raise InvalidInputError("Pool name is required")
        validate_year(year)
        ship_ids = [validate_ship_id(ship_id) for ship_id, _ in ships]
        _validate_ship_ids(ship_ids)

        members = []
        for ship_id, (_, route_id) in zip(ship_ids, ships):
            cb = await self._compliance().compute(ship_id, year, route_id)
            members.append(
                PoolMember(
                    ship_id=cb.ship_id,
                    compliance_balance=cb.balance,
                    route_id=cb.route_id,
                )
            )

        return await self.create_pool(name, year, members, created_by, description)

    async def get_pool(self, pool_id: int) -> Pool:
        pool = await self.pool_repo.find_by_id(pool_id)
        if pool is None:
            raise NotFoundError(f"Pool {pool_id} not found")
        return pool

    async def get_pool_by_name(self, name: str) -> Pool:
        pool = await self.pool_repo.find_by_name(name)
        if pool is None:
            raise NotFoundError(f'Pool "{name}" not found')
        return pool

    async def list_pools(
        self,
        year: Optional[int] = None,
        ship_id: Optional[str] = None,
    ) -> List[Pool]:
        """List pools; the year filter takes precedence over the ship filter"""
        if year is not None:
            validate_year(year)
            return await self.pool_repo.find_by_year(year)
        if ship_id:
            return await self.pool_repo.find_by_ship(ship_id)
        return await self.pool_repo.find_all()

    async def add_member_to_pool(
        self,
        pool_id: int,
        ship_id: str,
        route_id: Optional[str] = None,
    ) -> Pool:
        """Compute the ship's balance for the pool year and add it"""
        pool = await self.get_pool(pool_id)
        if pool.get_member(ship_id) is not None:
            raise InvalidInputError(f"Ship {ship_id} is already in the pool")

        cb = await self._compliance().compute(ship_id, pool.year, route_id)
        updated = add_member(
            pool,
            PoolMember(ship_id=cb.ship_id, compliance_balance=cb.balance, route_id=cb.route_id),
        )
        saved = await self.pool_repo.update(updated)

        logger.info(
            "➕ Member added | pool=%s | ship=%s | total=%.2f t",
            saved.name, ship_id, saved.total_balance_tonnes,
        )
        return saved

    async def remove_member_from_pool(self, pool_id: int, ship_id: str) -> Pool:
        pool = await self.get_pool(pool_id)
        updated = remove_member(pool, ship_id)
        saved = await self.pool_repo.update(updated)

        logger.info(
            "➖ Member removed | pool=%s | ship=%s | total=%.2f t",
            saved.name, ship_id, saved.total_balance_tonnes,
        )
        return saved

    async def delete_pool(self, pool_id: int) -> None:
        await self.get_pool(pool_id)
        await self.pool_repo.delete(pool_id)
        logger.info("🗑️ Pool deleted | id=%s", pool_id)

    def _compliance(self) -> ComplianceService:
        if self.compliance_service is None:
            raise RuntimeError("PoolAggregator was built without a ComplianceService")
        return self.compliance_service
