"""
FUELEU MARITIME PARAMETERS

Fixed regulatory constants shared by every compliance path (single ship
calculation, route comparison, pooling). Nothing in this module reads state
or performs I/O.

Values:
- Energy density used to derive energy-in-scope from fuel mass
- Yearly GHG intensity targets (gCO2e/MJ)
- Penalty rate per tonne of CO2e deficit
"""

from decimal import Decimal

from app.domain.errors import InvalidInputError

# -------------------------------------------------------------------
# Conversion Constants
# -------------------------------------------------------------------

ENERGY_DENSITY_MJ_PER_TONNE = Decimal("41000")
GRAMS_PER_TONNE = Decimal("1000000")

# -------------------------------------------------------------------
# GHG Intensity Targets (gCO2e/MJ)
# 2% .. 13% reduction from the 91.16 reference value
# -------------------------------------------------------------------

GHG_TARGETS = {
    2025: Decimal("89.3368"),
    2026: Decimal("87.7528"),
    2027: Decimal("86.1688"),
    2028: Decimal("84.5848"),
    2029: Decimal("83.0008"),
    2030: Decimal("81.4168"),
}

MIN_YEAR = min(GHG_TARGETS)
MAX_YEAR = max(GHG_TARGETS)

# -------------------------------------------------------------------
# Penalty
# -------------------------------------------------------------------

PENALTY_EUR_PER_TONNE = Decimal("2400")


# -------------------------------------------------------------------
# Helper Functions
# -------------------------------------------------------------------

def validate_year(year: int, field: str = "Year") -> int:
    """Reject years outside the target table."""
    if year is None or isinstance(year, bool) or not isinstance(year, int):
        raise InvalidInputError(f"{field} must be between {MIN_YEAR} and {MAX_YEAR}")
    if year < MIN_YEAR or year > MAX_YEAR:
        raise InvalidInputError(f"{field} must be between {MIN_YEAR} and {MAX_YEAR}")
    return year


def get_target(year: int) -> Decimal:
    """Return the GHG intensity target for a compliance year."""
    validate_year(year)
    return GHG_TARGETS[year]


def energy_in_scope(fuel_consumption_tonnes: Decimal) -> Decimal:
    """Energy content (MJ) of the consumed fuel."""
    return Decimal(fuel_consumption_tonnes) * ENERGY_DENSITY_MJ_PER_TONNE


def penalty_for_deficit(deficit_grams: Decimal) -> Decimal:
    """Penalty (EUR) for a deficit expressed in grams CO2e."""
    if deficit_grams <= 0:
        return Decimal("0")
    return to_tonnes(deficit_grams) * PENALTY_EUR_PER_TONNE


def to_tonnes(grams: Decimal) -> Decimal:
    return Decimal(grams) / GRAMS_PER_TONNE


def to_grams(tonnes: Decimal) -> Decimal:
    return Decimal(tonnes) * GRAMS_PER_TONNE


def display_tonnes(grams: Decimal) -> float:
    """Tonnes rounded to 2 decimals, for API responses only."""
    return float(round(to_tonnes(grams), 2))
