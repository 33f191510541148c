"""
Banking API
Bank surplus, borrow banked credit, inspect the ledger
"""

import logging
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.dependencies import get_banking_ledger, to_http_exception
from app.domain.errors import InvalidInputError
from app.domain.regulation.fueleu import display_tonnes, to_grams, to_tonnes
from app.domain.schemas.banking import (
    BankingHistoryResponse,
    BankingOperationResponse,
    BankingTransactionResponse,
    BankRequest,
    BorrowRequest,
    ReconciliationResponse,
)
from app.domain.services.banking_ledger import BankingLedger

logger = logging.getLogger(__name__)

router = APIRouter()


def resolve_amount_grams(amount: Optional[float], amount_tonnes: Optional[float]) -> Decimal:
    """Request amount in grams; amount_tonnes takes precedence"""
    try:
        if amount_tonnes is not None:
            return to_grams(Decimal(str(amount_tonnes)))
        return Decimal(str(amount))
    except ArithmeticError:
        raise InvalidInputError("Amount must be a number")


@router.post("/bank", response_model=BankingOperationResponse, status_code=201)
async def bank_surplus(
    request: BankRequest,
    ledger: BankingLedger = Depends(get_banking_ledger),
):
    """Bank surplus compliance balance for later years"""
    logger.info("📥 Bank request | %s | %s", request.ship_id, request.year)

    try:
        amount = resolve_amount_grams(request.amount, request.amount_tonnes)
        record = await ledger.bank(
            ship_id=request.ship_id,
            year=request.year,
            amount=amount,
            description=request.description,
        )
    except ValueError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("❌ Banking failed due to system error")
        raise HTTPException(status_code=500, detail="Internal server error while banking surplus")

    previous = record.resulting_balance - record.amount
    return BankingOperationResponse(
        message=(
            f"Successfully banked {to_tonnes(record.amount):.2f} tonnes CO2e. "
            f"New balance: {to_tonnes(record.resulting_balance):.2f} tonnes CO2e."
        ),
        previous_balance=float(previous),
        previous_balance_tonnes=display_tonnes(previous),
        transaction=BankingTransactionResponse.from_domain(record),
    )


@router.post("/borrow", response_model=BankingOperationResponse, status_code=201)
async def borrow_banked(
    request: BorrowRequest,
    ledger: BankingLedger = Depends(get_banking_ledger),
):
    """Apply previously banked credit to a later year"""
    logger.info(
        "📥 Borrow request | %s | %s | source=%s",
        request.ship_id, request.year, request.source_year,
    )

    try:
        amount = resolve_amount_grams(request.amount, request.amount_tonnes)
        record = await ledger.borrow(
            ship_id=request.ship_id,
            year=request.year,
            amount=amount,
            source_year=request.source_year,
            description=request.description,
        )
    except ValueError as e:
        raise to_http_exception(e)
    except Exception:
        logger.exception("❌ Borrowing failed due to system error")
        raise HTTPException(status_code=500, detail="Internal server error while applying banked credit")

    previous = record.resulting_balance + record.amount
    return BankingOperationResponse(
        message=(
            f"Successfully applied {to_tonnes(record.amount):.2f} tonnes CO2e from banked credits. "
            f"Remaining balance: {to_tonnes(record.resulting_balance):.2f} tonnes CO2e."
        ),
        previous_balance=float(previous),
        previous_balance_tonnes=display_tonnes(previous),
        transaction=BankingTransactionResponse.from_domain(record),
    )


@router.get("/history", response_model=BankingHistoryResponse)
async def get_history(
    ship_id: str = Query(..., description="Ship identifier"),
    year: Optional[int] = Query(None, description="Only transactions for this year"),
    ledger: BankingLedger = Depends(get_banking_ledger),
):
    """Ledger history and current balance for a ship"""
    try:
        records = await ledger.history(ship_id, year)
        balance = await ledger.current_balance(ship_id)
    except ValueError as e:
        raise to_http_exception(e)

    return BankingHistoryResponse(
        ship_id=ship_id,
        current_balance=float(balance),
        current_balance_tonnes=display_tonnes(balance),
        total_transactions=len(records),
        transactions=[BankingTransactionResponse.from_domain(r) for r in records],
    )


@router.get("/reconcile/{ship_id}", response_model=ReconciliationResponse)
async def reconcile(
    ship_id: str,
    ledger: BankingLedger = Depends(get_banking_ledger),
):
    """Compare the stored balance with sum(BANK) - sum(BORROW)"""
    try:
        result = await ledger.reconcile(ship_id)
    except ValueError as e:
        raise to_http_exception(e)
    return ReconciliationResponse.from_domain(result)
