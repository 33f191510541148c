"""
Domain Models - Entities
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from app.domain.regulation.fueleu import to_tonnes


class TransactionType(str, Enum):
    """Banking ledger transaction kind"""
    BANK = "BANK"
    BORROW = "BORROW"


@dataclass(frozen=True)
class Route:
    """Voyage route snapshot - Immutable"""
    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: Decimal      # gCO2e/MJ
    fuel_consumption: Decimal   # tonnes
    distance: Decimal           # km
    is_baseline: bool = False
    id: Optional[int] = None

    def __post_init__(self):
        if not self.route_id or not self.route_id.strip():
            raise ValueError("Route ID cannot be empty")
        for name in ("ghg_intensity", "fuel_consumption", "distance"):
            if not getattr(self, name).is_finite():
                raise ValueError(f"{name} must be a finite number")
        if self.fuel_consumption < Decimal("0"):
            raise ValueError("Fuel consumption cannot be negative")
        if self.ghg_intensity < Decimal("0"):
            raise ValueError("GHG intensity cannot be negative")


@dataclass(frozen=True)
class ComplianceBalance:
    """Compliance balance for a ship and year - Immutable, never persisted"""
    ship_id: str
    year: int
    route_id: Optional[str]
    fuel_consumption: Decimal   # tonnes
    energy_in_scope: Decimal    # MJ
    ghg_target: Decimal         # gCO2e/MJ
    ghg_actual: Decimal         # gCO2e/MJ
    balance: Decimal            # gCO2e, positive = surplus
    is_compliant: bool
    surplus: Decimal            # gCO2e
    deficit: Decimal            # gCO2e
    penalty: Decimal            # EUR

    @property
    def balance_tonnes(self) -> Decimal:
        return to_tonnes(self.balance)

    @property
    def surplus_tonnes(self) -> Decimal:
        return to_tonnes(self.surplus)

    @property
    def deficit_tonnes(self) -> Decimal:
        return to_tonnes(self.deficit)

    @property
    def status(self) -> str:
        return "compliant" if self.is_compliant else "non-compliant"

    @property
    def message(self) -> str:
        """Human readable summary of the result"""
        if self.is_compliant:
            if self.surplus > 0:
                return (
                    f"Compliant! Surplus of {self.surplus_tonnes:.2f} tonnes CO2e "
                    "can be banked or pooled."
                )
            return "Compliant! The FuelEU target was met exactly."
        return (
            f"Non-compliant! Deficit of {self.deficit_tonnes:.2f} tonnes CO2e. "
            f"Use banked credits, join a pool, or pay a penalty of EUR {self.penalty:.2f}."
        )


@dataclass(frozen=True)
class BankingRecord:
    """Banking ledger entry - Immutable once written"""
    ship_id: str
    transaction_type: TransactionType
    year: int
    amount: Decimal                 # gCO2e, always positive
    resulting_balance: Decimal      # gCO2e after this transaction
    transaction_date: datetime
    source_year: Optional[int] = None
    description: Optional[str] = None
    id: Optional[int] = None

    def __post_init__(self):
        if not self.ship_id or not self.ship_id.strip():
            raise ValueError("Ship ID is required")
        if self.amount <= Decimal("0"):
            raise ValueError("Amount must be positive")
        if self.resulting_balance < Decimal("0"):
            raise ValueError("Resulting balance cannot be negative")
        if self.transaction_type == TransactionType.BORROW:
            if self.source_year is None:
                raise ValueError("Source year is required for BORROW transactions")
            if self.source_year >= self.year:
                raise ValueError("Source year must be before the year of use")

    @property
    def is_bank(self) -> bool:
        return self.transaction_type == TransactionType.BANK

    @property
    def is_borrow(self) -> bool:
        return self.transaction_type == TransactionType.BORROW

    @property
    def amount_tonnes(self) -> Decimal:
        return to_tonnes(self.amount)

    @property
    def resulting_balance_tonnes(self) -> Decimal:
        return to_tonnes(self.resulting_balance)


@dataclass(frozen=True)
class LedgerReconciliation:
    """Cross-check of the stored balance against the full history"""
    ship_id: str
    recorded_balance: Decimal
    recomputed_balance: Decimal
    total_banked: Decimal
    total_borrowed: Decimal
    transaction_count: int

    @property
    def is_consistent(self) -> bool:
        return self.recorded_balance == self.recomputed_balance

    @property
    def drift(self) -> Decimal:
        return self.recorded_balance - self.recomputed_balance


@dataclass(frozen=True)
class PoolMember:
    """Ship participating in a pool - Immutable"""
    ship_id: str
    compliance_balance: Decimal     # gCO2e at pool creation time
    route_id: Optional[str] = None

    def __post_init__(self):
        if not self.ship_id or not self.ship_id.strip():
            raise ValueError("Ship ID is required")

    @property
    def compliance_balance_tonnes(self) -> Decimal:
        return to_tonnes(self.compliance_balance)

    @property
    def contribution(self) -> str:
        return "surplus" if self.compliance_balance >= 0 else "deficit"


@dataclass(frozen=True)
class Pool:
    """
    Pooling agreement - Immutable value

    total_balance and is_compliant are always derived from members by the
    pool aggregator; membership changes produce a new Pool.
    """
    name: str
    year: int
    members: Tuple[PoolMember, ...]
    total_balance: Decimal
    is_compliant: bool
    created_at: datetime
    created_by: Optional[str] = None
    description: Optional[str] = None
    id: Optional[int] = None

    @property
    def member_count(self) -> int:
        return len(self.members)

    @property
    def total_balance_tonnes(self) -> Decimal:
        return to_tonnes(self.total_balance)

    @property
    def status(self) -> str:
        return "compliant" if self.is_compliant else "non-compliant"

    def get_member(self, ship_id: str) -> Optional[PoolMember]:
        for member in self.members:
            if member.ship_id == ship_id:
                return member
        return None
