"""Listing policies and the page envelope for publishable content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from orgcms.infra.records import DOCUMENTS, GALLERIES, PAGES, POSTS, Document, FindResult


@dataclass(frozen=True, slots=True)
class CollectionPolicy:
	"""How one collection is listed, searched and hidden from the public."""

	slug: str
	noun: str
	default_sort: str
	page_size_setting: str = "default_page_size"
	# Mandatory predicate ``visibility_field == visibility_value``
	visibility_field: Optional[str] = None
	visibility_value: Any = None
	# Authenticated callers see everything (documents only)
	privileged_bypass: bool = False
	# caller filter name -> document field
	filter_fields: dict[str, str] = field(default_factory=dict)
	search_fields: tuple[str, ...] = ("title",)
	sortable_fields: tuple[str, ...] = ()


POLICIES: dict[str, CollectionPolicy] = {
	POSTS: CollectionPolicy(
		slug=POSTS,
		noun="post",
		default_sort="-publishedDate",
		visibility_field="status",
		visibility_value="published",
		filter_fields={"category": "category", "tag": "tags.tag"},
		search_fields=("title", "excerpt"),
		sortable_fields=("publishedDate", "title", "views"),
	),
	PAGES: CollectionPolicy(
		slug=PAGES,
		noun="page",
		default_sort="title",
		visibility_field="status",
		visibility_value="published",
		search_fields=("title",),
		sortable_fields=("title",),
	),
	GALLERIES: CollectionPolicy(
		slug=GALLERIES,
		noun="gallery",
		default_sort="-eventDate",
		page_size_setting="gallery_page_size",
		filter_fields={"type": "type"},
		search_fields=("title", "description"),
		sortable_fields=("eventDate", "title"),
	),
	DOCUMENTS: CollectionPolicy(
		slug=DOCUMENTS,
		noun="document",
		default_sort="-uploadDate",
		visibility_field="isPublic",
		visibility_value=True,
		privileged_bypass=True,
		filter_fields={"category": "category", "tag": "tags.tag"},
		search_fields=("title", "description"),
		sortable_fields=("uploadDate", "documentDate", "title"),
	),
}


@dataclass(slots=True)
class Page:
	items: list[Document]
	page: int
	total_pages: int
	total_docs: int
	has_next_page: bool
	has_prev_page: bool
	limit: int

	@classmethod
	def from_result(cls, result: FindResult) -> "Page":
		return cls(
			items=list(result.docs),
			page=result.page,
			total_pages=result.total_pages,
			total_docs=result.total_docs,
			has_next_page=result.has_next_page,
			has_prev_page=result.has_prev_page,
			limit=result.limit,
		)

	def to_dict(self) -> dict[str, Any]:
		return {
			"items": self.items,
			"page": self.page,
			"totalPages": self.total_pages,
			"totalDocs": self.total_docs,
			"hasNextPage": self.has_next_page,
			"hasPrevPage": self.has_prev_page,
			"limit": self.limit,
		}


@dataclass(slots=True)
class SiteStats:
	total_members: int
	total_posts: int
	total_galleries: int
	total_documents: int

	def to_dict(self) -> dict[str, int]:
		return {
			"totalMembers": self.total_members,
			"totalPosts": self.total_posts,
			"totalGalleries": self.total_galleries,
			"totalDocuments": self.total_documents,
		}
