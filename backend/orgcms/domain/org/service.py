"""Period selection and organization structure assembly."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from orgcms.domain.activity import ActivityAction, ActivityLogEntry, ActivityRecorder
from orgcms.domain.errors import NotFoundError
from orgcms.domain.org.models import Member, Period, Position, Structure, StructureEntry
from orgcms.infra import where
from orgcms.infra.records import MEMBERS, PERIODS, POSITIONS, RecordStore, find_all
from orgcms.infra.store import get_store

logger = logging.getLogger(__name__)


class PeriodSelector:
	"""Resolves which organizational period a request is about."""

	def __init__(self, store: Optional[RecordStore] = None, recorder: Optional[ActivityRecorder] = None) -> None:
		self._store = store
		self._recorder = recorder

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	async def resolve_active_period(self) -> Period:
		"""Return the first active period in retrieval order.

		More than one active period is tolerated; the earliest stored wins.
		"""
		result = await self.store.find(PERIODS, where=where.equals("isActive", True), limit=1)
		if not result.docs:
			raise NotFoundError("No active period found", code="no_active_period")
		if result.total_docs > 1:
			logger.warning("multiple_active_periods", extra={"count": result.total_docs})
		return Period.from_doc(result.docs[0])

	async def resolve(self, period_id: Optional[str] = None) -> str:
		# An explicit id is trusted as-is; an unknown one yields an empty structure.
		if period_id:
			return period_id
		return (await self.resolve_active_period()).id

	async def list_periods(self) -> list[Period]:
		docs = await find_all(self.store, PERIODS, sort="-startDate")
		return [Period.from_doc(doc) for doc in docs]

	async def activate_period(
		self,
		period_id: str,
		*,
		actor_id: str,
		ip_address: Optional[str] = None,
	) -> Period:
		"""Make ``period_id`` the only active period."""
		found = await self.store.find(PERIODS, where=where.equals("id", period_id), limit=1)
		if not found.docs:
			raise NotFoundError("Period not found", code="period_not_found")
		updated = await self.store.update(PERIODS, period_id, {"isActive": True})
		others = await find_all(
			self.store,
			PERIODS,
			where=where.and_(where.equals("isActive", True), where.not_equals("id", period_id)),
		)
		for doc in others:
			await self.store.update(PERIODS, doc["id"], {"isActive": False})
		logger.info("period_activated", extra={"period_id": period_id, "deactivated": len(others)})
		if self._recorder is not None:
			self._recorder.dispatch(
				self._recorder.record_activity(
					ActivityLogEntry(
						action=ActivityAction.UPDATE,
						user_id=actor_id,
						collection=PERIODS,
						document_id=period_id,
						details=f"activated period; deactivated {len(others)} other(s)",
						ip_address=ip_address,
					)
				)
			)
		return Period.from_doc(updated)


class StructureAssembler:
	"""Joins a period's ordered positions with their active members."""

	def __init__(self, store: Optional[RecordStore] = None) -> None:
		self._store = store

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	async def assemble_structure(self, period_id: str) -> Structure:
		position_docs, member_docs = await asyncio.gather(
			find_all(self.store, POSITIONS, where=where.equals("period", period_id), sort="order", depth=1),
			find_all(
				self.store,
				MEMBERS,
				where=where.and_(where.equals("period", period_id), where.equals("isActive", True)),
				depth=1,
			),
		)
		# Stable: equal orders keep retrieval order.
		positions = sorted((Position.from_doc(doc) for doc in position_docs), key=lambda pos: pos.order)

		by_position: dict[str, list[Member]] = {}
		for doc in member_docs:
			member = Member.from_doc(doc)
			if member.period_id != period_id or not member.is_active or member.position_id is None:
				continue
			by_position.setdefault(member.position_id, []).append(member)

		hierarchy: list[StructureEntry] = []
		seen: set[str] = set()
		for position in positions:
			if position.id in seen:
				continue
			seen.add(position.id)
			hierarchy.append(StructureEntry(position=position, members=by_position.get(position.id, [])))

		period = positions[0].period if positions else None
		return Structure(period=period, hierarchy=hierarchy)


class MemberDirectory:
	def __init__(self, store: Optional[RecordStore] = None) -> None:
		self._store = store

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	async def get_by_slug(self, slug: str) -> Member:
		result = await self.store.find(MEMBERS, where=where.equals("slug", slug), limit=1, depth=2)
		if not result.docs:
			raise NotFoundError("Member not found", code="member_not_found")
		return Member.from_doc(result.docs[0])
