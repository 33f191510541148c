"""
Compliance Service
Resolves route data for a ship and runs the compliance calculator
"""

import logging
from decimal import Decimal
from typing import Optional

from app.domain.errors import NotFoundError, StateConflictError
from app.domain.models import ComplianceBalance, Route
from app.domain.regulation.fueleu import validate_year
from app.domain.services.compliance_calculator import (
    ComplianceCalculator,
    validate_ship_id,
)
from app.domain.services.route_service import RouteRepository

logger = logging.getLogger(__name__)


class ComplianceService:
    """Compute compliance balances from stored routes"""

    MULTIPLIER = Decimal("1.0")

    def __init__(
        self,
        route_repo: RouteRepository,
        calculator: Optional[ComplianceCalculator] = None,
    ):
        self.route_repo = route_repo
        self.calculator = calculator or ComplianceCalculator()

    async def resolve_route(self, route_id: Optional[str] = None) -> Route:
        """
        Resolve the route to calculate against

        Args:
            route_id: Explicit route, or None for the current baseline

        Raises:
            NotFoundError: Explicit route does not exist
            StateConflictError: No baseline route is set
        """
        if route_id:
            route = await self.route_repo.find_by_route_id(route_id)
            if route is None:
                raise NotFoundError(f"Route {route_id} not found")
            return route

        route = await self.route_repo.find_baseline()
        if route is None:
            raise StateConflictError(
                "No baseline route found. Please set a baseline route first."
            )
        return route

    async def compute(
        self,
        ship_id: str,
        year: int,
        route_id: Optional[str] = None,
    ) -> ComplianceBalance:
        """
        Compute the compliance balance for a ship and year

        Input is validated before the route lookup so a bad request never
        touches the store.
        """
        ship_id = validate_ship_id(ship_id)
        validate_year(year)

        route = await self.resolve_route(route_id)

        cb = self.calculator.calculate(
            ship_id=ship_id,
            year=year,
            fuel_consumption=route.fuel_consumption,
            ghg_actual=route.ghg_intensity,
            multiplier=self.MULTIPLIER,
            route_id=route.route_id,
        )

        logger.info(
            "🧮 CB | ship=%s | year=%s | route=%s | %.2f t | %s",
            ship_id, year, route.route_id, cb.balance_tonnes, cb.status,
        )
        return cb
