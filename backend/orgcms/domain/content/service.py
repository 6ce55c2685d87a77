"""Listing, search and count queries over publishable content.

Every query carries the collection's visibility predicate. Caller filters are
ANDed onto it and can only narrow a listing, never widen it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from orgcms.domain.content.models import POLICIES, CollectionPolicy, Page, SiteStats
from orgcms.domain.errors import InvalidQueryError, NotFoundError
from orgcms.infra import where
from orgcms.infra.records import DOCUMENTS, GALLERIES, MEMBERS, POSTS, Document, RecordStore, Where
from orgcms.infra.store import get_store
from orgcms.settings import settings

logger = logging.getLogger(__name__)

GLOBAL_SLUGS = ("settings", "about", "navigation")


class ContentQueryComposer:
	def __init__(self, store: Optional[RecordStore] = None) -> None:
		self._store = store

	@property
	def store(self) -> RecordStore:
		return self._store or get_store()

	def policy(self, collection: str) -> CollectionPolicy:
		try:
			return POLICIES[collection]
		except KeyError:
			raise InvalidQueryError(f"Unknown collection: {collection}", code="unknown_collection") from None

	def visibility_filter(self, collection: str, *, is_privileged: bool = False) -> Optional[Where]:
		policy = self.policy(collection)
		if policy.visibility_field is None:
			return None
		if is_privileged and policy.privileged_bypass:
			return None
		return where.equals(policy.visibility_field, policy.visibility_value)

	def compose_where(
		self,
		collection: str,
		filters: Optional[Mapping[str, Any]] = None,
		*,
		is_privileged: bool = False,
	) -> Optional[Where]:
		policy = self.policy(collection)
		clauses: list[Optional[Where]] = [self.visibility_filter(collection, is_privileged=is_privileged)]
		for name, value in (filters or {}).items():
			if value is None or (isinstance(value, str) and not value.strip()):
				continue
			field = policy.filter_fields.get(name)
			if field is None or field == policy.visibility_field:
				logger.debug("content_filter_ignored", extra={"collection": collection, "filter": name})
				continue
			clauses.append(where.equals(field, value))
		return where.and_(*clauses)

	def resolve_limit(self, collection: str, limit: Optional[int]) -> int:
		if limit is None:
			return int(getattr(settings, self.policy(collection).page_size_setting))
		if limit < 0:
			raise InvalidQueryError("limit must not be negative", code="invalid_limit")
		return min(limit, settings.max_page_size)

	def resolve_sort(self, collection: str, sort: Optional[str]) -> str:
		policy = self.policy(collection)
		if not sort:
			return policy.default_sort
		if sort.lstrip("-") not in policy.sortable_fields:
			raise InvalidQueryError(f"Unsupported sort: {sort}", code="invalid_sort")
		return sort

	async def list_content(
		self,
		collection: str,
		filters: Optional[Mapping[str, Any]] = None,
		*,
		page: int = 1,
		limit: Optional[int] = None,
		sort: Optional[str] = None,
		is_privileged: bool = False,
	) -> Page:
		"""List visible documents; ``limit=0`` returns only the total count."""
		result = await self.store.find(
			collection,
			where=self.compose_where(collection, filters, is_privileged=is_privileged),
			sort=self.resolve_sort(collection, sort),
			limit=self.resolve_limit(collection, limit),
			page=max(1, page),
			depth=1,
		)
		return Page.from_result(result)

	async def search_content(
		self,
		query: Optional[str],
		collection: str = POSTS,
		*,
		page: int = 1,
		limit: Optional[int] = None,
		is_privileged: bool = False,
	) -> Page:
		"""Substring search over the collection's search fields.

		Results keep the collection's default ordering; there is no ranking.
		"""
		term = (query or "").strip()
		if not term:
			raise InvalidQueryError("Search query required", code="empty_query")
		policy = self.policy(collection)
		matcher = where.or_(*(where.contains(field, term) for field in policy.search_fields))
		result = await self.store.find(
			collection,
			where=where.and_(self.visibility_filter(collection, is_privileged=is_privileged), matcher),
			sort=policy.default_sort,
			limit=self.resolve_limit(collection, limit),
			page=max(1, page),
			depth=1,
		)
		return Page.from_result(result)

	async def latest(self, collection: str = POSTS, limit: Optional[int] = None) -> Page:
		return await self.list_content(
			collection,
			limit=settings.latest_page_size if limit is None else limit,
		)

	async def count(
		self,
		collection: str,
		filters: Optional[Mapping[str, Any]] = None,
		*,
		is_privileged: bool = False,
	) -> int:
		page = await self.list_content(collection, filters, limit=0, is_privileged=is_privileged)
		return page.total_docs

	async def get_by_slug(self, collection: str, slug: str, *, is_privileged: bool = False) -> Document:
		result = await self.store.find(
			collection,
			where=where.and_(self.visibility_filter(collection, is_privileged=is_privileged), where.equals("slug", slug)),
			limit=1,
			depth=2,
		)
		if not result.docs:
			noun = self.policy(collection).noun
			raise NotFoundError(f"{noun.capitalize()} not found", code=f"{noun}_not_found")
		return result.docs[0]

	async def stats(self) -> SiteStats:
		"""Count-only queries for the public dashboard, issued concurrently."""
		members, posts, galleries, documents = await asyncio.gather(
			self.store.find(MEMBERS, where=where.equals("isActive", True), limit=0),
			self.count(POSTS),
			self.count(GALLERIES),
			self.count(DOCUMENTS),
		)
		return SiteStats(
			total_members=members.total_docs,
			total_posts=posts,
			total_galleries=galleries,
			total_documents=documents,
		)

	async def get_global(self, slug: str) -> Document:
		if slug not in GLOBAL_SLUGS:
			raise NotFoundError("Global not found", code="global_not_found")
		return await self.store.find_global(slug, depth=2)
