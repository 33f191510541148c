from datetime import datetime
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from app.domain.models import BankingRecord, LedgerReconciliation
from app.domain.regulation.fueleu import display_tonnes


class _AmountRequest(BaseModel):
    """Amount may be given in grams or in tonnes; tonnes wins when both are set"""
    ship_id: str = Field(..., min_length=1, examples=["SHIP001"])
    year: int = Field(..., examples=[2025])
    amount: Optional[float] = Field(None, allow_inf_nan=False, description="gCO2e")
    amount_tonnes: Optional[float] = Field(None, allow_inf_nan=False, description="tonnes CO2e")
    description: Optional[str] = None

    @model_validator(mode="after")
    def _require_amount(self):
        if self.amount is None and self.amount_tonnes is None:
            raise ValueError("Missing required field: amount or amount_tonnes")
        return self


class BankRequest(_AmountRequest):
    pass


class BorrowRequest(_AmountRequest):
    source_year: int = Field(..., examples=[2025])


class BankingTransactionResponse(BaseModel):
    id: Optional[int]
    ship_id: str
    transaction_type: str
    year: int
    amount: float
    amount_tonnes: float
    source_year: Optional[int]
    resulting_balance: float
    resulting_balance_tonnes: float
    transaction_date: datetime
    description: Optional[str]

    @classmethod
    def from_domain(cls, record: BankingRecord) -> "BankingTransactionResponse":
        return cls(
            id=record.id,
            ship_id=record.ship_id,
            transaction_type=record.transaction_type.value,
            year=record.year,
            amount=float(record.amount),
            amount_tonnes=display_tonnes(record.amount),
            source_year=record.source_year,
            resulting_balance=float(record.resulting_balance),
            resulting_balance_tonnes=display_tonnes(record.resulting_balance),
            transaction_date=record.transaction_date,
            description=record.description,
        )


class BankingOperationResponse(BaseModel):
    success: bool = True
    message: str
    previous_balance: float
    previous_balance_tonnes: float
    transaction: BankingTransactionResponse


class BankingHistoryResponse(BaseModel):
    success: bool = True
    ship_id: str
    current_balance: float
    current_balance_tonnes: float
    total_transactions: int
    transactions: List[BankingTransactionResponse]


class ReconciliationResponse(BaseModel):
    ship_id: str
    recorded_balance: float
    recomputed_balance: float
    total_banked: float
    total_borrowed: float
    transaction_count: int
    is_consistent: bool

    @classmethod
    def from_domain(cls, result: LedgerReconciliation) -> "ReconciliationResponse":
        return cls(
            ship_id=result.ship_id,
            recorded_balance=float(result.recorded_balance),
            recomputed_balance=float(result.recomputed_balance),
            total_banked=float(result.total_banked),
            total_borrowed=float(result.total_borrowed),
            transaction_count=result.transaction_count,
            is_consistent=result.is_consistent,
        )
