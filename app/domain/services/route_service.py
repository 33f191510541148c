"""
Route Service
Route registry access, baseline selection and baseline comparison
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import List, Optional, Protocol

from app.domain.errors import InvalidInputError, NotFoundError, StateConflictError
from app.domain.models import Route
from app.domain.regulation.fueleu import get_target
from app.domain.services.compliance_calculator import ComplianceCalculator

logger = logging.getLogger(__name__)

COMPARISON_SHIP_ID = "COMPARISON"


class RouteRepository(Protocol):
    """Protocol for route data access - ASYNC"""

    async def find_by_route_id(self, route_id: str) -> Optional[Route]:
        """Get route by its business identifier (e.g. R001)"""
        ...

    async def find_baseline(self) -> Optional[Route]:
        """Get the single baseline route, if any"""
        ...

    async def find_all(self) -> List[Route]:
        """Get all routes"""
        ...

    async def create(self, route: Route) -> Route:
        """Persist a new route"""
        ...

    async def set_baseline(self, route_id: str) -> Route:
        """Unset the current baseline and flag route_id, atomically"""
        ...


@dataclass(frozen=True)
class RouteComparison:
    """One route measured against the baseline"""
    route: Route
    percent_diff_from_baseline: Decimal
    compliant: bool
    surplus: Decimal    # gCO2e
    deficit: Decimal    # gCO2e


@dataclass(frozen=True)
class ComparisonResult:
    baseline: Route
    year: int
    target: Decimal
    comparisons: List[RouteComparison]


class RouteService:
    """Route registry operations"""

    def __init__(
        self,
        route_repo: RouteRepository,
        calculator: Optional[ComplianceCalculator] = None,
    ):
        self.route_repo = route_repo
        self.calculator = calculator or ComplianceCalculator()

    async def list_routes(self) -> List[Route]:
        return await self.route_repo.find_all()

    async def register_route(self, route: Route) -> Route:
        """
        Register a new route

        Raises:
            InvalidInputError: If the route id is already taken
        """
        existing = await self.route_repo.find_by_route_id(route.route_id)
        if existing is not None:
            raise InvalidInputError(f"Route {route.route_id} already exists")

        if route.is_baseline:
            # Baseline is only ever assigned through set_baseline
            created = await self.route_repo.create(replace(route, is_baseline=False))
            return await self.set_baseline(created.route_id)

        created = await self.route_repo.create(route)
        logger.info("🛳️ Route registered | %s", created.route_id)
        return created

    async def set_baseline(self, route_id: str) -> Route:
        """
        Flag a route as the baseline (only one baseline exists at a time)

        Raises:
            InvalidInputError: If route_id is blank
            NotFoundError: If the route does not exist
        """
        if not route_id or not route_id.strip():
            raise InvalidInputError("Route ID is required")

        route = await self.route_repo.find_by_route_id(route_id)
        if route is None:
            raise NotFoundError(f"Route {route_id} not found")

        updated = await self.route_repo.set_baseline(route_id)
        logger.info("📌 Baseline route set | %s", route_id)
        return updated

    async def compare(self, year: int) -> ComparisonResult:
        """
        Compare every non-baseline route against the baseline

        Args:
            year: Compliance year whose target is applied

        Raises:
            InvalidInputError: Year outside the target table
            StateConflictError: No baseline route set
        """
        target = get_target(year)

        baseline = await self.route_repo.find_baseline()
        if baseline is None:
            raise StateConflictError("No baseline route found. Please set a baseline first.")

        routes = await self.route_repo.find_all()
        comparisons = []

        for route in routes:
            if route.route_id == baseline.route_id:
                continue

            if baseline.ghg_intensity == 0:
                percent_diff = Decimal("0")
            else:
                percent_diff = (
                    (route.ghg_intensity - baseline.ghg_intensity)
                    / baseline.ghg_intensity
                    * Decimal("100")
                )

            cb = self.calculator.calculate(
                ship_id=COMPARISON_SHIP_ID,
                year=year,
                fuel_consumption=route.fuel_consumption,
                ghg_actual=route.ghg_intensity,
                route_id=route.route_id,
            )

            comparisons.append(
                RouteComparison(
                    route=route,
                    percent_diff_from_baseline=percent_diff,
                    compliant=route.ghg_intensity <= target,
                    surplus=cb.surplus,
                    deficit=cb.deficit,
                )
            )

        logger.info(
            "📊 Compared %d routes against baseline %s for %s",
            len(comparisons), baseline.route_id, year,
        )

        return ComparisonResult(
            baseline=baseline,
            year=year,
            target=target,
            comparisons=comparisons,
        )
