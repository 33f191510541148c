"""
Route Repository
CRUD operations for voyage routes and the baseline flag
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from typing import List, Optional

from app.domain.models import Route
from app.infrastructure.db.models import RouteModel


class RouteRepository:
    """Repository for Route data access"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def create(self, route: Route) -> Route:
        model = RouteModel(
            route_id=route.route_id,
            vessel_type=route.vessel_type,
            fuel_type=route.fuel_type,
            year=route.year,
            ghg_intensity=route.ghg_intensity,
            fuel_consumption=route.fuel_consumption,
            distance=route.distance,
            is_baseline=route.is_baseline,
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_domain(model)

    async def find_by_route_id(self, route_id: str) -> Optional[Route]:
        result = await self.session.execute(
            select(RouteModel).where(RouteModel.route_id == route_id)
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def find_baseline(self) -> Optional[Route]:
        result = await self.session.execute(
            select(RouteModel).where(RouteModel.is_baseline.is_(True))
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def find_all(self) -> List[Route]:
        result = await self.session.execute(
            select(RouteModel).order_by(RouteModel.route_id)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def set_baseline(self, route_id: str) -> Route:
        """
        Move the baseline flag to route_id

        Both statements run in the caller's transaction; the partial unique
        index rejects a second baseline if two of these race.
        """
        await self.session.execute(
            update(RouteModel)
            .where(RouteModel.is_baseline.is_(True))
            .values(is_baseline=False)
        )
        await self.session.flush()

        result = await self.session.execute(
            update(RouteModel)
            .where(RouteModel.route_id == route_id)
            .values(is_baseline=True)
        )
        if result.rowcount == 0:
            raise LookupError(f"Route {route_id} not found")
        await self.session.flush()

        # Bulk updates bypass the identity map
        self.session.expire_all()

        route = await self.find_by_route_id(route_id)
        return route

    @staticmethod
    def _to_domain(model: RouteModel) -> Route:
        """Convert database model to domain entity"""
        return Route(
            id=model.id,
            route_id=model.route_id,
            vessel_type=model.vessel_type,
            fuel_type=model.fuel_type,
            year=model.year,
            ghg_intensity=model.ghg_intensity,
            fuel_consumption=model.fuel_consumption,
            distance=model.distance,
            is_baseline=bool(model.is_baseline),
        )
