"""Tests for the SQL-backed ticker cache."""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from coinprice.models.database import Base
from coinprice.models.price import TickerRecord, format_price
from coinprice.models.transient import Transient
from coinprice.services.transient_store import KEY_PREFIX, TransientStore

BITCOIN = TickerRecord(name="Bitcoin", symbol="btc", price="65,000.00")


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory
    await engine.dispose()


@pytest.fixture
def store(session_factory, clock):
    return TransientStore(session_factory, default_ttl=60, clock=clock)


@pytest.mark.asyncio
async def test_cold_store_is_empty(store):
    assert await store.get("bitcoin") is None


@pytest.mark.asyncio
async def test_set_and_get(store):
    await store.set("bitcoin", BITCOIN)
    assert await store.get("bitcoin") == BITCOIN


@pytest.mark.asyncio
async def test_entry_expires(store, clock):
    await store.set("bitcoin", BITCOIN, ttl=30)
    clock.advance(29.9)
    assert await store.get("bitcoin") == BITCOIN
    clock.advance(0.1)
    assert await store.get("bitcoin") is None


@pytest.mark.asyncio
async def test_expired_row_is_removed_on_read(store, session_factory, clock):
    await store.set("bitcoin", BITCOIN)
    clock.advance(60)
    await store.get("bitcoin")
    async with session_factory() as session:
        assert await session.get(Transient, KEY_PREFIX + "bitcoin") is None


@pytest.mark.asyncio
async def test_set_replaces_row(store, session_factory, clock):
    await store.set("bitcoin", BITCOIN)
    clock.advance(50)
    newer = TickerRecord(name="Bitcoin", symbol="btc", price="66,000.00")
    await store.set("bitcoin", newer)
    clock.advance(50)
    assert await store.get("bitcoin") == newer
    async with session_factory() as session:
        rows = (await session.execute(select(Transient))).scalars().all()
    assert len(rows) == 1
    assert rows[0].created_at == 1050.0


@pytest.mark.asyncio
async def test_state_survives_new_store_instance(session_factory, clock):
    await TransientStore(session_factory, clock=clock).set("bitcoin", BITCOIN)
    assert await TransientStore(session_factory, clock=clock).get("bitcoin") == BITCOIN


@pytest.mark.asyncio
async def test_concurrent_sets_leave_one_intact_row(tmp_path, clock):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ticker.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    store = TransientStore(factory, clock=clock)

    # Each writer uses its own TTL so a mixed-up row would show
    writes = {
        10 + n: TickerRecord(name="Bitcoin", symbol="btc", price=format_price(60000 + n))
        for n in range(10)
    }
    await asyncio.gather(*(store.set("bitcoin", record, ttl=ttl) for ttl, record in writes.items()))

    async with factory() as session:
        rows = (await session.execute(select(Transient))).scalars().all()
    await engine.dispose()

    assert len(rows) == 1
    row = rows[0]
    ttl = row.expires_at - row.created_at
    assert ttl in writes
    assert TickerRecord.model_validate_json(row.value) == writes[ttl]
