"""Publishable content: posts, pages, galleries and documents."""

from .models import POLICIES, CollectionPolicy, Page, SiteStats
from .service import ContentQueryComposer

__all__ = [
	"POLICIES",
	"CollectionPolicy",
	"ContentQueryComposer",
	"Page",
	"SiteStats",
]
