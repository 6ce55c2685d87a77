"""In-process record store used by tests and single-node development."""

from __future__ import annotations

import asyncio
import copy
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional
from uuid import uuid4

from orgcms.domain.errors import NotFoundError
from orgcms.infra import where as where_tree
from orgcms.infra.records import RELATIONS, Document, FindResult, Where, apply_defaults, page_window, relation_id


def _now_iso() -> str:
	return datetime.now(timezone.utc).isoformat()


def _store_relations(collection: str, doc: Document) -> Document:
	for field in RELATIONS.get(collection, {}):
		if field in doc:
			doc[field] = relation_id(doc[field])
	return doc


def _sorted(docs: list[Document], sort: Optional[str]) -> list[Document]:
	if not sort:
		return docs
	descending = sort.startswith("-")
	field = sort.lstrip("-")
	present = [doc for doc in docs if doc.get(field) is not None]
	missing = [doc for doc in docs if doc.get(field) is None]
	# sorted() is stable in both directions, so ties keep insertion order.
	ordered = sorted(present, key=lambda doc: doc[field], reverse=descending)
	return ordered + missing


class MemoryRecordStore:
	"""Dict-backed store that mirrors the Postgres adapter's semantics.

	Reads yield to the event loop once before returning so that interleavings
	between concurrent requests (e.g. two view-count updates) are observable
	the same way they are against a real database.
	"""

	def __init__(self) -> None:
		self._lock = asyncio.Lock()
		self._collections: dict[str, list[Document]] = {}
		self._globals: dict[str, Document] = {}

	async def seed(self, collection: str, docs: Iterable[Mapping[str, Any]]) -> list[Document]:
		created = []
		for doc in docs:
			created.append(await self.create(collection, doc))
		return created

	async def find(
		self,
		collection: str,
		*,
		where: Optional[Where] = None,
		sort: Optional[str] = None,
		limit: int = 10,
		page: int = 1,
		depth: int = 0,
	) -> FindResult:
		async with self._lock:
			rows = [doc for doc in self._collections.get(collection, []) if where_tree.matches(where, doc)]
			result = page_window(len(rows), limit, page)
			if result.limit > 0:
				start = (result.page - 1) * result.limit
				window = _sorted(rows, sort)[start : start + result.limit]
				result.docs = [self._populate(collection, copy.deepcopy(doc), depth) for doc in window]
		await asyncio.sleep(0)
		return result

	async def create(self, collection: str, data: Mapping[str, Any]) -> Document:
		now = _now_iso()
		doc: Document = apply_defaults(collection, _store_relations(collection, copy.deepcopy(dict(data))))
		doc["id"] = str(doc.get("id") or uuid4())
		doc.setdefault("createdAt", now)
		doc["updatedAt"] = now
		async with self._lock:
			self._collections.setdefault(collection, []).append(doc)
			return copy.deepcopy(doc)

	async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Document:
		async with self._lock:
			for doc in self._collections.get(collection, []):
				if doc["id"] == str(doc_id):
					doc.update(_store_relations(collection, copy.deepcopy(dict(data))))
					doc["id"] = str(doc_id)
					doc["updatedAt"] = _now_iso()
					return copy.deepcopy(doc)
		raise NotFoundError(f"{collection} document not found", code=f"{collection}_not_found")

	async def find_global(self, slug: str, *, depth: int = 0) -> Document:
		async with self._lock:
			return copy.deepcopy(self._globals.get(slug, {}))

	async def update_global(self, slug: str, data: Mapping[str, Any]) -> Document:
		async with self._lock:
			current = self._globals.setdefault(slug, {"globalType": slug})
			current.update(copy.deepcopy(dict(data)))
			current["updatedAt"] = _now_iso()
			return copy.deepcopy(current)

	async def close(self) -> None:
		return None

	def _get(self, collection: str, doc_id: Optional[str]) -> Optional[Document]:
		if doc_id is None:
			return None
		for doc in self._collections.get(collection, []):
			if doc["id"] == doc_id:
				return doc
		return None

	def _populate(self, collection: str, doc: Document, depth: int) -> Document:
		if depth <= 0:
			return doc
		for field, target in RELATIONS.get(collection, {}).items():
			related = self._get(target, relation_id(doc.get(field)))
			if related is not None:
				doc[field] = self._populate(target, copy.deepcopy(related), depth - 1)
		return doc
