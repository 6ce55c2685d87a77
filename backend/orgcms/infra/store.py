"""Process-wide record store selection (memory or Postgres)."""

from __future__ import annotations

import logging
from typing import Optional

from orgcms.infra import postgres
from orgcms.infra.memory_store import MemoryRecordStore
from orgcms.infra.postgres_store import PostgresRecordStore
from orgcms.infra.records import RecordStore
from orgcms.settings import settings

logger = logging.getLogger(__name__)

_store: Optional[RecordStore] = None


async def init_store() -> RecordStore:
	global _store
	if _store is None:
		if settings.store_backend == "postgres":
			pool = await postgres.init_pool()
			pg_store = PostgresRecordStore(pool)
			await pg_store.ensure_schema()
			_store = pg_store
		else:
			_store = MemoryRecordStore()
		logger.info("record_store_ready", extra={"backend": settings.store_backend})
	return _store


def set_store(store: Optional[RecordStore]) -> None:
	global _store
	_store = store


def get_store() -> RecordStore:
	if _store is None:
		raise RuntimeError("record store not initialised")
	return _store


async def close_store() -> None:
	global _store
	if _store is not None:
		await _store.close()
		_store = None
		postgres.set_pool(None)
