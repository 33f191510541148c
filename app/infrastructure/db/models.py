"""
Database Models (SQLAlchemy ORM)
Banking records are insert-only audit rows - NO UPDATES, NO DELETES
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, DateTime,
    Boolean, Text, Enum as SQLEnum, Index, JSON
)
import enum

from app.infrastructure.db.database import Base
from app.utils.time import now_utc_naive


# Enums
class TransactionTypeEnum(str, enum.Enum):
    BANK = "BANK"
    BORROW = "BORROW"


# Tables

class RouteModel(Base):
    """Voyage route data used for compliance calculations"""
    __tablename__ = "routes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    route_id = Column(String(50), nullable=False, unique=True, index=True)
    vessel_type = Column(String(50), nullable=False)
    fuel_type = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False)

    ghg_intensity = Column(Numeric(10, 4), nullable=False)      # gCO2e/MJ
    fuel_consumption = Column(Numeric(12, 2), nullable=False)   # tonnes
    distance = Column(Numeric(12, 2), nullable=False)           # km

    is_baseline = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)

    # At most one row may carry is_baseline = true
    __table_args__ = (
        Index(
            'uq_routes_single_baseline',
            'is_baseline',
            unique=True,
            postgresql_where=(is_baseline.is_(True)),
            sqlite_where=(is_baseline.is_(True)),
        ),
    )


class BankingRecordModel(Base):
    """Banking ledger entry - AUDIT RECORD"""
    __tablename__ = "banking_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ship_id = Column(String(100), nullable=False, index=True)
    transaction_type = Column(SQLEnum(TransactionTypeEnum), nullable=False)
    year = Column(Integer, nullable=False)

    amount = Column(Numeric(24, 4), nullable=False)             # gCO2e
    source_year = Column(Integer, nullable=True)
    resulting_balance = Column(Numeric(24, 4), nullable=False)  # gCO2e

    transaction_date = Column(DateTime, nullable=False, default=now_utc_naive)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)

    # Indexes
    __table_args__ = (
        Index('ix_banking_records_ship_date', 'ship_id', 'transaction_date'),
        Index('ix_banking_records_ship_year', 'ship_id', 'year'),
    )


class PoolModel(Base):
    """Pooling agreement; members stored as a JSON array"""
    __tablename__ = "pools"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pool_name = Column(String(200), nullable=False, unique=True, index=True)
    year = Column(Integer, nullable=False, index=True)

    # [{"ship_id": str, "compliance_balance": str, "route_id": str | null}]
    members = Column(JSON, nullable=False)
    total_cb = Column(Numeric(24, 4), nullable=False)           # gCO2e
    is_compliant = Column(Boolean, nullable=False)

    created_by = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)
