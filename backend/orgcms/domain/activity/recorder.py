"""Best-effort side effects: view counters and the activity log.

Nothing here may fail the request that triggered it. Errors are logged,
counted and dropped. Callers that do not want to wait hand the coroutine to
:meth:`ActivityRecorder.dispatch`, which runs it as an independent task so a
disconnecting client does not cancel a write that was already started.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Optional

from orgcms.domain.activity.models import ActivityLogEntry
from orgcms.infra import where
from orgcms.infra.records import ACTIVITY_LOGS, RecordStore
from orgcms.infra.store import get_store
from orgcms.obs import metrics as obs_metrics

logger = logging.getLogger(__name__)


class ActivityRecorder:
	def __init__(self, store: Optional[RecordStore] = None) -> None:
		self._store = store
		self._tasks: set[asyncio.Task[Any]] = set()

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	async def record_view(self, collection: str, content_id: str) -> None:
		"""Increment ``views`` on a document.

		This is a read-increment-write without a lock or a conditional update:
		two requests that read the same base value both write ``base + 1`` and
		one increment is lost. The counter is an approximate popularity signal,
		so the race is accepted.
		"""
		try:
			found = await self.store.find(collection, where=where.equals("id", content_id), limit=1)
			if not found.docs:
				obs_metrics.inc_view_write(collection, "missing")
				logger.warning("view_target_missing", extra={"collection": collection, "document_id": content_id})
				return
			current = found.docs[0].get("views") or 0
			await self.store.update(collection, content_id, {"views": int(current) + 1})
		except Exception:
			obs_metrics.inc_view_write(collection, "failed")
			logger.exception("view_count_failed", extra={"collection": collection, "document_id": content_id})
			return
		obs_metrics.inc_view_write(collection, "ok")

	async def record_activity(self, entry: ActivityLogEntry) -> None:
		try:
			await self.store.create(ACTIVITY_LOGS, entry.to_doc())
		except Exception:
			obs_metrics.inc_activity_write(entry.action.value, "failed")
			logger.exception(
				"activity_log_failed",
				extra={"action": entry.action.value, "collection": entry.collection, "document_id": entry.document_id},
			)
			return
		obs_metrics.inc_activity_write(entry.action.value, "ok")

	def dispatch(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task[None]:
		"""Run ``coro`` in the background; the caller does not await it."""
		task = asyncio.get_running_loop().create_task(coro)
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)
		return task

	@property
	def pending(self) -> int:
		return len(self._tasks)

	async def drain(self) -> None:
		"""Wait for every dispatched side effect (shutdown and tests)."""
		while self._tasks:
			await asyncio.gather(*list(self._tasks), return_exceptions=True)


recorder = ActivityRecorder()
