"""
FastAPI dependency providers
Wire request-scoped repositories into the domain services
"""

import logging

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.errors import NotFoundError, StateConflictError
from app.domain.services.banking_ledger import BankingLedger, ShipLockRegistry
from app.domain.services.compliance_calculator import ComplianceCalculator
from app.domain.services.compliance_service import ComplianceService
from app.domain.services.pool_aggregator import PoolAggregator
from app.domain.services.route_service import RouteService
from app.infrastructure.db.database import get_db
from app.infrastructure.db.repositories.banking_repository import BankingRecordRepository
from app.infrastructure.db.repositories.pool_repository import PoolRepository
from app.infrastructure.db.repositories.route_repository import RouteRepository

logger = logging.getLogger(__name__)

# Process-wide singletons
_calculator = ComplianceCalculator()
_ship_locks = ShipLockRegistry()


def get_calculator() -> ComplianceCalculator:
    return _calculator


def get_ship_locks() -> ShipLockRegistry:
    return _ship_locks


def get_route_service(
    db: AsyncSession = Depends(get_db),
    calculator: ComplianceCalculator = Depends(get_calculator),
) -> RouteService:
    return RouteService(RouteRepository(db), calculator)


def get_compliance_service(
    db: AsyncSession = Depends(get_db),
    calculator: ComplianceCalculator = Depends(get_calculator),
) -> ComplianceService:
    return ComplianceService(RouteRepository(db), calculator)


def get_banking_ledger(
    db: AsyncSession = Depends(get_db),
    locks: ShipLockRegistry = Depends(get_ship_locks),
) -> BankingLedger:
    return BankingLedger(BankingRecordRepository(db), locks)


def get_pool_aggregator(
    db: AsyncSession = Depends(get_db),
    compliance_service: ComplianceService = Depends(get_compliance_service),
) -> PoolAggregator:
    return PoolAggregator(PoolRepository(db), compliance_service)


def to_http_exception(exc: ValueError) -> HTTPException:
    """Map an expected domain rejection to an HTTP error"""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, StateConflictError):
        status_code = 409
    else:
        # InvalidInputError and plain ValueError from entity checks
        status_code = 400

    logger.warning("⚠️ Request rejected (%s): %s", status_code, exc)
    return HTTPException(status_code=status_code, detail=str(exc))
