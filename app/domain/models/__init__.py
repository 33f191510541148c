"""
Domain Models Package
Export all domain entities
"""

from .entities import (
    # Enums
    TransactionType,

    # Entities
    BankingRecord,
    ComplianceBalance,
    LedgerReconciliation,
    Pool,
    PoolMember,
    Route,
)

__all__ = [
    # Enums
    "TransactionType",

    # Entities
    "BankingRecord",
    "ComplianceBalance",
    "LedgerReconciliation",
    "Pool",
    "PoolMember",
    "Route",
]
