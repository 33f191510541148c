from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from app.domain.errors import InvalidInputError
from app.domain.models import BankingRecord, PoolMember, Route, TransactionType
from app.domain.services import pool_aggregator as aggregator
from app.infrastructure.db.models import RouteModel
from app.infrastructure.db.seed import seed_routes
from app.infrastructure.db.repositories.banking_repository import BankingRecordRepository
from app.infrastructure.db.repositories.pool_repository import PoolRepository
from app.infrastructure.db.repositories.route_repository import RouteRepository


def make_route(route_id: str, is_baseline: bool = False) -> Route:
    return Route(
        route_id=route_id,
        vessel_type="Container",
        fuel_type="HFO",
        year=2024,
        ghg_intensity=Decimal("91.0"),
        fuel_consumption=Decimal("5000"),
        distance=Decimal("12000"),
        is_baseline=is_baseline,
    )


def make_record(amount: str, balance: str, when: datetime, kind=TransactionType.BANK) -> BankingRecord:
    return BankingRecord(
        ship_id="SHIP001",
        transaction_type=kind,
        year=2026 if kind == TransactionType.BORROW else 2025,
        amount=Decimal(amount),
        resulting_balance=Decimal(balance),
        transaction_date=when,
        source_year=2025 if kind == TransactionType.BORROW else None,
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_route_repository_roundtrip(db_session):
    repo = RouteRepository(db_session)

    await repo.create(make_route("R002"))
    created = await repo.create(make_route("R001"))

    assert created.id is not None
    fetched = await repo.find_by_route_id("R001")
    assert fetched is not None
    assert fetched.ghg_intensity == Decimal("91.0")
    assert fetched.fuel_consumption == Decimal("5000")
    assert [r.route_id for r in await repo.find_all()] == ["R001", "R002"]
    assert await repo.find_baseline() is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_route_repository_single_baseline(db_session):
    repo = RouteRepository(db_session)
    await repo.create(make_route("R001"))
    await repo.create(make_route("R002"))

    await repo.set_baseline("R001")
    updated = await repo.set_baseline("R002")

    assert updated.is_baseline is True
    baseline = await repo.find_baseline()
    assert baseline.route_id == "R002"
    assert (await repo.find_by_route_id("R001")).is_baseline is False

    with pytest.raises(LookupError):
        await repo.set_baseline("R999")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_second_baseline_row_rejected_by_index(db_session):
    db_session.add(RouteModel(
        route_id="R001", vessel_type="Container", fuel_type="HFO", year=2024,
        ghg_intensity=Decimal("91"), fuel_consumption=Decimal("1"),
        distance=Decimal("1"), is_baseline=True,
    ))
    db_session.add(RouteModel(
        route_id="R002", vessel_type="Container", fuel_type="HFO", year=2024,
        ghg_intensity=Decimal("91"), fuel_consumption=Decimal("1"),
        distance=Decimal("1"), is_baseline=True,
    ))

    with pytest.raises(IntegrityError):
        await db_session.flush()
    await db_session.rollback()


@pytest.mark.asyncio
@pytest.mark.integration
async def test_banking_repository_latest_record(db_session):
    repo = BankingRecordRepository(db_session)
    same_time = datetime(2026, 3, 1, 12, 0, 0)

    first = await repo.append(make_record("100", "100", datetime(2026, 2, 1)))
    await repo.append(make_record("50", "150", same_time))
    await repo.append(make_record("30", "120", same_time, kind=TransactionType.BORROW))

    assert first.id is not None

    latest = await repo.find_latest_for_ship("SHIP001")
    assert latest.resulting_balance == Decimal("120")
    assert latest.transaction_type == TransactionType.BORROW
    assert latest.source_year == 2025

    history = await repo.find_by_ship("SHIP001")
    assert [r.resulting_balance for r in history] == [
        Decimal("100"), Decimal("150"), Decimal("120"),
    ]
    assert len(await repo.find_by_ship_and_year("SHIP001", 2026)) == 1
    assert await repo.find_latest_for_ship("SHIP404") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pool_repository_roundtrip(db_session):
    repo = PoolRepository(db_session)
    pool = aggregator.build_pool(
        "Alpha",
        2025,
        [
            PoolMember("SHIP001", Decimal("10000000.5"), route_id="R001"),
            PoolMember("SHIP002", Decimal("-4000000")),
        ],
        created_by="ops",
    )

    saved = await repo.save(pool)
    fetched = await repo.find_by_id(saved.id)

    assert fetched.name == "Alpha"
    assert fetched.get_member("SHIP001").compliance_balance == Decimal("10000000.5")
    assert fetched.get_member("SHIP001").route_id == "R001"
    assert fetched.total_balance == Decimal("6000000.5")
    assert fetched.is_compliant is True

    assert (await repo.find_by_name("Alpha")).id == saved.id
    assert len(await repo.find_by_year(2025)) == 1
    assert len(await repo.find_by_ship("SHIP002")) == 1
    assert await repo.find_by_ship("SHIP999") == []

    grown = aggregator.add_member(fetched, PoolMember("SHIP003", Decimal("-7000000")))
    updated = await repo.update(grown)
    assert updated.member_count == 3
    assert updated.is_compliant is False

    assert await repo.delete(saved.id) is True
    assert await repo.find_by_id(saved.id) is None
    assert await repo.delete(saved.id) is False


@pytest.mark.asyncio
@pytest.mark.integration
async def test_seed_routes_runs_once(db_session):
    added = await seed_routes(db_session)
    assert added == 4

    repo = RouteRepository(db_session)
    assert [r.route_id for r in await repo.find_all()] == ["R001", "R002", "R003", "R004"]
    assert (await repo.find_baseline()).route_id == "R001"

    assert await seed_routes(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.integration
async def test_pool_repository_duplicate_name_rejected(db_session):
    repo = PoolRepository(db_session)
    members = [PoolMember("SHIP001", Decimal("10")), PoolMember("SHIP002", Decimal("-4"))]

    await repo.save(aggregator.build_pool("Alpha", 2025, members))
    await db_session.commit()

    # a racing create that skipped the name lookup
    with pytest.raises(InvalidInputError, match="already exists"):
        await repo.save(aggregator.build_pool("Alpha", 2026, members))

    assert len(await repo.find_all()) == 1
    assert (await repo.find_by_name("Alpha")).year == 2025
