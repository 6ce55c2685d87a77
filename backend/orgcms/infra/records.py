"""Record store contract shared by the memory and Postgres adapters.

Collections hold JSON-like documents keyed by a string ``id``. Relation fields
are stored as bare identifiers and expanded into the related document when a
caller asks for ``depth >= 1``; readers must therefore accept both shapes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol

Document = dict[str, Any]
Where = Mapping[str, Any]

PERIODS = "periods"
POSITIONS = "positions"
MEMBERS = "members"
POSTS = "posts"
PAGES = "pages"
GALLERIES = "galleries"
DOCUMENTS = "documents"
USERS = "users"
ACTIVITY_LOGS = "activity-logs"
CONTACT_MESSAGES = "contact-messages"

# collection -> {field: related collection}
RELATIONS: dict[str, dict[str, str]] = {
	POSITIONS: {"period": PERIODS},
	MEMBERS: {"position": POSITIONS, "period": PERIODS},
	POSTS: {"author": USERS},
	ACTIVITY_LOGS: {"user": USERS},
}

# collection -> {field: value written when a new document omits it}
DEFAULTS: dict[str, dict[str, Any]] = {
	PERIODS: {"isActive": False},
	POSITIONS: {"order": 0},
	MEMBERS: {"isActive": True},
	POSTS: {"status": "draft", "views": 0},
	PAGES: {"status": "draft"},
	DOCUMENTS: {"isPublic": False},
}


def relation_id(value: Any) -> Optional[str]:
	"""Normalise a relation value (embedded document or bare id) to its id."""

	if value is None:
		return None
	if isinstance(value, Mapping):
		inner = value.get("id")
		return None if inner is None else str(inner)
	return str(value)


def apply_defaults(collection: str, doc: dict[str, Any]) -> dict[str, Any]:
	"""Fill fields a new document left out with the collection's defaults."""

	for field_name, value in DEFAULTS.get(collection, {}).items():
		doc.setdefault(field_name, value)
	return doc

@dataclass(slots=True)
class FindResult:
	docs: list[Document] = field(default_factory=list)
	total_docs: int = 0
	limit: int = 10
	page: int = 1
	total_pages: int = 1
	has_next_page: bool = False
	has_prev_page: bool = False


def page_window(total_docs: int, limit: int, page: int) -> FindResult:
	"""Compute pagination metadata; ``limit == 0`` is count-only."""

	if limit <= 0:
		return FindResult(docs=[], total_docs=total_docs, limit=0, page=1, total_pages=1)
	page = max(1, page)
	total_pages = max(1, math.ceil(total_docs / limit))
	return FindResult(
		docs=[],
		total_docs=total_docs,
		limit=limit,
		page=page,
		total_pages=total_pages,
		has_next_page=page < total_pages,
		has_prev_page=page > 1,
	)


class RecordStore(Protocol):
	async def find(
		self,
		collection: str,
		*,
		where: Optional[Where] = None,
		sort: Optional[str] = None,
		limit: int = 10,
		page: int = 1,
		depth: int = 0,
	) -> FindResult: ...

	async def create(self, collection: str, data: Mapping[str, Any]) -> Document: ...

	async def update(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> Document: ...

	async def find_global(self, slug: str, *, depth: int = 0) -> Document: ...

	async def update_global(self, slug: str, data: Mapping[str, Any]) -> Document: ...

	async def close(self) -> None: ...


async def find_all(
	store: RecordStore,
	collection: str,
	*,
	where: Optional[Where] = None,
	sort: Optional[str] = None,
	depth: int = 0,
	batch_size: int = 100,
) -> list[Document]:
	"""Read every matching document, walking the store's pages in order."""

	docs: list[Document] = []
	page = 1
	while True:
		result = await store.find(collection, where=where, sort=sort, limit=batch_size, page=page, depth=depth)
		docs.extend(result.docs)
		if not result.has_next_page:
			return docs
		page += 1
