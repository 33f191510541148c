"""
BANKING LEDGER (ENGINE-2)
Per-ship append-only log of banked / borrowed compliance credit

RESPONSIBILITIES:
- Record BANK transactions (surplus saved for later years)
- Record BORROW transactions (banked surplus applied to a later year)
- Report current balance and history per ship

BALANCE RULE:
The current balance of a ship is the resulting_balance of its most recent
record (transaction_date, then id). It is NOT re-summed on each write.
That rule is only correct while writers for the same ship are serialized, so
every mutation runs under the ship's lock from the balance read until the
store has committed the new record. reconcile() recomputes
sum(BANK) - sum(BORROW) from the full history to detect drift.

RULES:
❌ No partial writes: every check runs before append
❌ No retries at this layer
✅ At most one in-flight mutation per ship
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, Dict, List, Optional, Protocol

from app.domain.errors import InsufficientBalanceError, InvalidInputError
from app.domain.models import BankingRecord, LedgerReconciliation, TransactionType
from app.domain.regulation.fueleu import to_tonnes, validate_year
from app.domain.services.compliance_calculator import validate_ship_id
from app.utils.time import now_utc_naive

logger = logging.getLogger(__name__)


class BankingRecordRepository(Protocol):
    """Protocol for ledger data access - ASYNC"""

    async def append(self, record: BankingRecord) -> BankingRecord:
        """Persist and commit a record, returning it with its id"""
        ...

    async def find_by_ship(self, ship_id: str) -> List[BankingRecord]:
        """All records for a ship, oldest first"""
        ...

    async def find_by_ship_and_year(self, ship_id: str, year: int) -> List[BankingRecord]:
        """Records for a ship in one year, oldest first"""
        ...

    async def find_latest_for_ship(self, ship_id: str) -> Optional[BankingRecord]:
        """Most recent record for a ship"""
        ...

    async def find_all(self) -> List[BankingRecord]:
        """All records, newest first"""
        ...


class ShipLockRegistry:
    """
    One asyncio.Lock per ship id

    Must be shared by every ledger instance in the process; the ledger itself
    is rebuilt per request around a request-scoped repository.

    A lock lives only while some caller holds or waits on it, so the registry
    stays as large as the set of ships with in-flight mutations.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, ship_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(ship_id, asyncio.Lock())
        self._users[ship_id] = self._users.get(ship_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[ship_id] -= 1
            if self._users[ship_id] == 0:
                del self._users[ship_id]
                del self._locks[ship_id]

    def __len__(self) -> int:
        return len(self._locks)


def _positive_amount(amount) -> Decimal:
    if amount is None:
        raise InvalidInputError("Amount must be positive")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except ArithmeticError:
        raise InvalidInputError("Amount must be a number")
    if not value.is_finite():
        raise InvalidInputError("Amount must be a finite number")
    if value <= Decimal("0"):
        raise InvalidInputError("Amount must be positive")
    return value


class BankingLedger:
    """Banking ledger over an injected record repository"""

    def __init__(
        self,
        banking_repo: BankingRecordRepository,
        locks: Optional[ShipLockRegistry] = None,
    ):
        self.banking_repo = banking_repo
        self.locks = locks or ShipLockRegistry()

    async def current_balance(self, ship_id: str) -> Decimal:
        """
        Current banked balance for a ship in grams

        Returns 0 when the ship has no ledger record.
        """
        ship_id = validate_ship_id(ship_id)
        latest = await self.banking_repo.find_latest_for_ship(ship_id)
        if latest is None:
            return Decimal("0")
        return latest.resulting_balance

    async def bank(
        self,
        ship_id: str,
        year: int,
        amount,
        description: Optional[str] = None,
    ) -> BankingRecord:
        """
        Bank surplus credit

        Args:
            ship_id: Ship identifier
            year: Year the surplus was earned
            amount: Grams CO2e to bank (> 0)
            description: Optional note; a default is generated

        Returns:
            Stored BankingRecord
        """
        ship_id = validate_ship_id(ship_id)
        validate_year(year)
        amount = _positive_amount(amount)

        async with self.locks.hold(ship_id):
            current = await self.current_balance(ship_id)

            record = BankingRecord(
                ship_id=ship_id,
                transaction_type=TransactionType.BANK,
                year=year,
                amount=amount,
                resulting_balance=current + amount,
                transaction_date=now_utc_naive(),
                description=description
                or f"Banked {to_tonnes(amount):.2f} tonnes CO2e from {year}",
            )
            saved = await self.banking_repo.append(record)

        logger.info(
            "🏦 BANK | ship=%s | year=%s | +%.2f t | balance %.2f -> %.2f t",
            ship_id, year, to_tonnes(amount),
            to_tonnes(current), to_tonnes(saved.resulting_balance),
        )
        return saved

    async def borrow(
        self,
        ship_id: str,
        year: int,
        amount,
        source_year: Optional[int],
        description: Optional[str] = None,
    ) -> BankingRecord:
        """
        Apply banked credit to a later year

        Args:
            ship_id: Ship identifier
            year: Year the credit is applied to
            amount: Grams CO2e to draw down (> 0)
            source_year: Year the surplus was banked, strictly before year
            description: Optional note; a default is generated

        Raises:
            InvalidInputError: Bad ship id, year, amount or source year
            InsufficientBalanceError: amount exceeds the current balance
        """
        ship_id = validate_ship_id(ship_id)
        validate_year(year)
        amount = _positive_amount(amount)

        if source_year is None:
            raise InvalidInputError("Source year is required for BORROW transactions")
        validate_year(source_year, field="Source year")
        if source_year >= year:
            raise InvalidInputError("Source year must be before the year of use")

        async with self.locks.hold(ship_id):
            current = await self.current_balance(ship_id)

            if amount > current:
                logger.warning(
                    "⚠️ BORROW rejected | ship=%s | requested=%s g | available=%s g",
                    ship_id, amount, current,
                )
                raise InsufficientBalanceError(ship_id, current, amount)

            record = BankingRecord(
                ship_id=ship_id,
                transaction_type=TransactionType.BORROW,
                year=year,
                amount=amount,
                source_year=source_year,
                resulting_balance=current - amount,
                transaction_date=now_utc_naive(),
                description=description
                or f"Borrowed {to_tonnes(amount):.2f} tonnes CO2e for {year}",
            )
            saved = await self.banking_repo.append(record)

        logger.info(
            "💸 BORROW | ship=%s | year=%s | source=%s | -%.2f t | balance %.2f -> %.2f t",
            ship_id, year, source_year, to_tonnes(amount),
            to_tonnes(current), to_tonnes(saved.resulting_balance),
        )
        return saved

    async def history(self, ship_id: str, year: Optional[int] = None) -> List[BankingRecord]:
        """Ledger records for a ship, oldest first, optionally one year only"""
        ship_id = validate_ship_id(ship_id)
        if year is not None:
            validate_year(year)
            return await self.banking_repo.find_by_ship_and_year(ship_id, year)
        return await self.banking_repo.find_by_ship(ship_id)

    async def reconcile(self, ship_id: str) -> LedgerReconciliation:
        """Recompute the balance from the full history and compare"""
        ship_id = validate_ship_id(ship_id)
        records = await self.banking_repo.find_by_ship(ship_id)

        banked = sum((r.amount for r in records if r.is_bank), Decimal("0"))
        borrowed = sum((r.amount for r in records if r.is_borrow), Decimal("0"))
        recorded = await self.current_balance(ship_id)

        result = LedgerReconciliation(
            ship_id=ship_id,
            recorded_balance=recorded,
            recomputed_balance=banked - borrowed,
            total_banked=banked,
            total_borrowed=borrowed,
            transaction_count=len(records),
        )

        if not result.is_consistent:
            logger.warning(
                "❗ Ledger drift | ship=%s | recorded=%s | recomputed=%s",
                ship_id, result.recorded_balance, result.recomputed_balance,
            )
        return result
