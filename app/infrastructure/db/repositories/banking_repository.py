"""
Banking Record Repository
Insert-only storage for the banking ledger
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.models import BankingRecord, TransactionType
from app.infrastructure.db.models import BankingRecordModel, TransactionTypeEnum


class BankingRecordRepository:
    """
    Repository for banking ledger records

    append() commits immediately: the ledger holds the ship lock until the
    record is durable, so the next writer reads it as the latest record.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def append(self, record: BankingRecord) -> BankingRecord:
        model = BankingRecordModel(
            ship_id=record.ship_id,
            transaction_type=TransactionTypeEnum(record.transaction_type.value),
            year=record.year,
            amount=record.amount,
            source_year=record.source_year,
            resulting_balance=record.resulting_balance,
            transaction_date=record.transaction_date,
            description=record.description,
        )

        self.session.add(model)
        await self.session.commit()
        await self.session.refresh(model)

        return self._to_domain(model)

    async def find_by_ship(self, ship_id: str) -> List[BankingRecord]:
        result = await self.session.execute(
            select(BankingRecordModel)
            .where(BankingRecordModel.ship_id == ship_id)
            .order_by(BankingRecordModel.transaction_date.asc(), BankingRecordModel.id.asc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def find_by_ship_and_year(self, ship_id: str, year: int) -> List[BankingRecord]:
        result = await self.session.execute(
            select(BankingRecordModel)
            .where(
                BankingRecordModel.ship_id == ship_id,
                BankingRecordModel.year == year,
            )
            .order_by(BankingRecordModel.transaction_date.asc(), BankingRecordModel.id.asc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def find_latest_for_ship(self, ship_id: str) -> Optional[BankingRecord]:
        result = await self.session.execute(
            select(BankingRecordModel)
            .where(BankingRecordModel.ship_id == ship_id)
            .order_by(BankingRecordModel.transaction_date.desc(), BankingRecordModel.id.desc())
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def find_all(self) -> List[BankingRecord]:
        result = await self.session.execute(
            select(BankingRecordModel)
            .order_by(BankingRecordModel.transaction_date.desc(), BankingRecordModel.id.desc())
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    @staticmethod
    def _to_domain(model: BankingRecordModel) -> BankingRecord:
        """Convert database model to domain entity"""
        return BankingRecord(
            id=model.id,
            ship_id=model.ship_id,
            transaction_type=TransactionType(model.transaction_type.value),
            year=model.year,
            amount=Decimal(str(model.amount)),
            source_year=model.source_year,
            resulting_balance=Decimal(str(model.resulting_balance)),
            transaction_date=model.transaction_date,
            description=model.description,
        )
