"""SQL-backed expiring store for the ticker tier."""

import logging
import time
from typing import Callable

from sqlalchemy import delete
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coinprice.models.price import TickerRecord
from coinprice.models.transient import Transient

logger = logging.getLogger(__name__)

KEY_PREFIX = "coinprice_ticker_"


class TransientStore:
    """Expiring key -> TickerRecord store persisted in the transient table.

    Lives as long as its database; a fresh database behaves as an empty
    cache. Uses wall-clock time because expiry is stored as an absolute
    timestamp.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        default_ttl: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self._session_factory = session_factory
        self._default_ttl = default_ttl
        self._clock = clock

    async def get(self, key: str) -> TickerRecord | None:
        row_key = KEY_PREFIX + key
        async with self._session_factory() as session:
            row = await session.get(Transient, row_key)
            if row is None:
                return None
            if self._clock() >= row.expires_at:
                logger.debug(f"Transient expired for: {key}")
                await session.execute(
                    delete(Transient).where(
                        Transient.key == row_key,
                        Transient.expires_at == row.expires_at,
                    )
                )
                await session.commit()
                return None
            return TickerRecord.model_validate_json(row.value)

    async def set(self, key: str, record: TickerRecord, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        now = self._clock()
        values = {
            "key": KEY_PREFIX + key,
            "value": record.model_dump_json(),
            "created_at": now,
            "expires_at": now + ttl,
        }
        stmt = insert(Transient).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Transient.key],
            set_={k: v for k, v in values.items() if k != "key"},
        )
        async with self._session_factory() as session:
            await session.execute(stmt)
            await session.commit()

