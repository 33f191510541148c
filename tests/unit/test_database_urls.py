"""
Unit Tests for database URL mapping
"""

import pytest

from app.infrastructure.db.database import to_async_url, to_sync_url


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgres://u:p@db/fueleu", "postgresql+asyncpg://u:p@db/fueleu"),
        ("postgresql://u:p@db/fueleu", "postgresql+asyncpg://u:p@db/fueleu"),
        ("sqlite:///./fueleu.db", "sqlite+aiosqlite:///./fueleu.db"),
        ("sqlite+aiosqlite:///./fueleu.db", "sqlite+aiosqlite:///./fueleu.db"),
    ],
)
def test_to_async_url(url, expected):
    assert to_async_url(url) == expected


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgres://u:p@db/fueleu", "postgresql://u:p@db/fueleu"),
        ("postgresql+asyncpg://u:p@db/fueleu", "postgresql+psycopg2://u:p@db/fueleu"),
        ("sqlite+aiosqlite:///./fueleu.db", "sqlite:///./fueleu.db"),
        ("sqlite:///./fueleu.db", "sqlite:///./fueleu.db"),
    ],
)
def test_to_sync_url(url, expected):
    assert to_sync_url(url) == expected
