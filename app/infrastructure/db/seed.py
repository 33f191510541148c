"""
Demo route seed
Loads the reference voyage routes when the routes table is empty
"""

import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import Route
from app.infrastructure.db.models import RouteModel
from app.infrastructure.db.repositories.route_repository import RouteRepository

logger = logging.getLogger(__name__)

DEMO_ROUTES: List[Route] = [
    Route(
        route_id="R001", vessel_type="Container", fuel_type="HFO", year=2024,
        ghg_intensity=Decimal("91.0"), fuel_consumption=Decimal("5000"),
        distance=Decimal("12000"),
    ),
    Route(
        route_id="R002", vessel_type="BulkCarrier", fuel_type="LNG", year=2024,
        ghg_intensity=Decimal("88.0"), fuel_consumption=Decimal("4800"),
        distance=Decimal("11500"),
    ),
    Route(
        route_id="R003", vessel_type="Tanker", fuel_type="HFO", year=2024,
        ghg_intensity=Decimal("93.5"), fuel_consumption=Decimal("5200"),
        distance=Decimal("13000"),
    ),
    Route(
        route_id="R004", vessel_type="Container", fuel_type="MGO", year=2025,
        ghg_intensity=Decimal("87.5"), fuel_consumption=Decimal("4700"),
        distance=Decimal("11000"),
    ),
]

DEMO_BASELINE = "R001"


async def seed_routes(session: AsyncSession) -> int:
    """
    Insert DEMO_ROUTES and flag the baseline

    No-op when any route already exists. Returns the number of routes added.
    """
    existing = await session.scalar(select(func.count()).select_from(RouteModel))
    if existing:
        logger.info("🌱 Route seed skipped, %s routes present", existing)
        return 0

    repo = RouteRepository(session)
    for route in DEMO_ROUTES:
        await repo.create(route)
    await repo.set_baseline(DEMO_BASELINE)
    await session.commit()

    logger.info("🌱 Seeded %d demo routes (baseline %s)", len(DEMO_ROUTES), DEMO_BASELINE)
    return len(DEMO_ROUTES)
