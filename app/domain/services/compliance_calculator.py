"""
COMPLIANCE CALCULATOR (ENGINE-1)
Turns fuel / GHG route data into a signed compliance balance

RESPONSIBILITIES:
- Derive energy in scope from fuel mass
- Compare achieved GHG intensity against the yearly target
- Split the signed balance into surplus / deficit
- Derive the penalty for a deficit

RULES:
❌ No I/O, no repositories
❌ No silent default year
✅ Decimal arithmetic only
✅ Pure and stateless, safe to share
"""

import logging
from decimal import Decimal
from typing import Optional

from app.domain.errors import InvalidInputError
from app.domain.models import ComplianceBalance
from app.domain.regulation.fueleu import (
    energy_in_scope,
    get_target,
    penalty_for_deficit,
)

logger = logging.getLogger(__name__)

DEFAULT_MULTIPLIER = Decimal("1.0")


def _as_decimal(value, field: str) -> Decimal:
    if value is None:
        raise InvalidInputError(f"{field} is required")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        raise InvalidInputError(f"{field} must be a number")
    if not number.is_finite():
        raise InvalidInputError(f"{field} must be a finite number")
    return number


def validate_ship_id(ship_id: Optional[str]) -> str:
    if not ship_id or not ship_id.strip():
        raise InvalidInputError("Ship ID is required")
    return ship_id.strip()


class ComplianceCalculator:
    """
    Compliance Calculator

    CB = (target - actual) * energy_in_scope * multiplier
    Positive CB is a surplus, negative CB is a deficit.
    """

    def calculate(
        self,
        ship_id: str,
        year: int,
        fuel_consumption,
        ghg_actual,
        multiplier=DEFAULT_MULTIPLIER,
        route_id: Optional[str] = None,
    ) -> ComplianceBalance:
        """
        Calculate the compliance balance for one ship and year

        Args:
            ship_id: Ship identifier
            year: Compliance year (2025-2030)
            fuel_consumption: Fuel consumed in tonnes
            ghg_actual: Achieved GHG intensity in gCO2e/MJ
            multiplier: Scaling factor applied to the balance
            route_id: Route the data came from (reporting only)

        Returns:
            ComplianceBalance

        Raises:
            InvalidInputError: On blank ship id, unknown year or bad numbers
        """
        ship_id = validate_ship_id(ship_id)
        target = get_target(year)

        fuel = _as_decimal(fuel_consumption, "Fuel consumption")
        actual = _as_decimal(ghg_actual, "GHG intensity")
        factor = _as_decimal(multiplier, "Multiplier")

        if fuel < Decimal("0"):
            raise InvalidInputError("Fuel consumption cannot be negative")
        if factor <= Decimal("0"):
            raise InvalidInputError("Multiplier must be positive")

        energy = energy_in_scope(fuel)
        balance = (target - actual) * energy * factor

        surplus = max(balance, Decimal("0"))
        deficit = max(-balance, Decimal("0"))

        logger.debug(
            "CB calculated | ship=%s | year=%s | energy=%s MJ | balance=%s g",
            ship_id, year, energy, balance,
        )

        return ComplianceBalance(
            ship_id=ship_id,
            year=year,
            route_id=route_id,
            fuel_consumption=fuel,
            energy_in_scope=energy,
            ghg_target=target,
            ghg_actual=actual,
            balance=balance,
            is_compliant=balance >= Decimal("0"),
            surplus=surplus,
            deficit=deficit,
            penalty=penalty_for_deficit(deficit),
        )
