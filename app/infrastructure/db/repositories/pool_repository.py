"""
Pool Repository
CRUD operations for pooling agreements
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import InvalidInputError
from app.domain.models import Pool, PoolMember
from app.infrastructure.db.models import PoolModel


class PoolRepository:
    """Repository for Pool data access"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, pool: Pool) -> Pool:
        """
        Insert a new pool

        The unique index on pool_name settles concurrent creates; the loser
        gets the same rejection as the service-level name check.
        """
        model = PoolModel(
            pool_name=pool.name,
            year=pool.year,
            members=self._members_to_json(pool.members),
            total_cb=pool.total_balance,
            is_compliant=pool.is_compliant,
            created_by=pool.created_by,
            description=pool.description,
            created_at=pool.created_at,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            raise InvalidInputError(f'Pool with name "{pool.name}" already exists') from exc
        return self._to_domain(model)

    async def find_by_id(self, pool_id: int) -> Optional[Pool]:
        model = await self.session.get(PoolModel, pool_id)
        return self._to_domain(model) if model else None

    async def find_by_name(self, name: str) -> Optional[Pool]:
        result = await self.session.execute(
            select(PoolModel).where(PoolModel.pool_name == name)
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def find_by_year(self, year: int) -> List[Pool]:
        result = await self.session.execute(
            select(PoolModel)
            .where(PoolModel.year == year)
            .order_by(PoolModel.created_at.desc(), PoolModel.id.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def find_by_ship(self, ship_id: str) -> List[Pool]:
        # JSON containment differs per dialect; pool counts are small
        pools = await self.find_all()
        return [p for p in pools if p.get_member(ship_id) is not None]

    async def find_all(self) -> List[Pool]:
        result = await self.session.execute(
            select(PoolModel).order_by(PoolModel.created_at.desc(), PoolModel.id.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def update(self, pool: Pool) -> Pool:
        model = await self.session.get(PoolModel, pool.id)
        if model is None:
            raise LookupError(f"Pool {pool.id} not found")

        model.members = self._members_to_json(pool.members)
        model.total_cb = pool.total_balance
        model.is_compliant = pool.is_compliant
        model.description = pool.description

        await self.session.flush()
        return self._to_domain(model)

    async def delete(self, pool_id: int) -> bool:
        result = await self.session.execute(
            delete(PoolModel).where(PoolModel.id == pool_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    @staticmethod
    def _members_to_json(members) -> list:
        return [
            {
                "ship_id": m.ship_id,
                "compliance_balance": str(m.compliance_balance),
                "route_id": m.route_id,
            }
            for m in members
        ]

    @staticmethod
    def _to_domain(model: PoolModel) -> Pool:
        """Convert database model to domain entity"""
        members = tuple(
            PoolMember(
                ship_id=m["ship_id"],
                compliance_balance=Decimal(str(m["compliance_balance"])),
                route_id=m.get("route_id"),
            )
            for m in (model.members or [])
        )
        return Pool(
            id=model.id,
            name=model.pool_name,
            year=model.year,
            members=members,
            total_balance=Decimal(str(model.total_cb)),
            is_compliant=bool(model.is_compliant),
            created_by=model.created_by,
            description=model.description,
            created_at=model.created_at,
        )
