"""Public read API for the organization website.

Handlers are thin: they resolve caller context (privilege, client ip) and
delegate to the domain services. Every response uses the
``{"success": true, "data": ...}`` envelope.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel

from orgcms.api.request_id import client_ip
from orgcms.domain.activity import recorder
from orgcms.domain.contact import THANK_YOU_MESSAGE, ContactService
from orgcms.domain.content import ContentQueryComposer
from orgcms.domain.org import MemberDirectory, PeriodSelector, StructureAssembler
from orgcms.infra.auth import AuthenticatedUser, get_optional_user
from orgcms.infra.records import DOCUMENTS, GALLERIES, PAGES, POSTS

router = APIRouter(prefix="/api/public", tags=["public"])

_selector = PeriodSelector()
_assembler = StructureAssembler()
_members = MemberDirectory()
_content = ContentQueryComposer()
_contact = ContactService()


class ContactRequest(BaseModel):
    """Contact form body; field rules are enforced by the contact service."""
    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None


def ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


# Organization structure

@router.get("/period/active")
async def get_active_period() -> dict[str, Any]:
    period = await _selector.resolve_active_period()
    return ok(period.to_dict())


@router.get("/periods")
async def list_periods() -> dict[str, Any]:
    periods = await _selector.list_periods()
    return ok([period.to_dict() for period in periods])


@router.get("/structure")
@router.get("/structure/{period_id}")
async def get_structure(period_id: Optional[str] = None) -> dict[str, Any]:
    resolved = await _selector.resolve(period_id)
    structure = await _assembler.assemble_structure(resolved)
    return ok(structure.to_dict())


@router.get("/members/{slug}")
async def get_member(slug: str) -> dict[str, Any]:
    member = await _members.get_by_slug(slug)
    return ok(member.to_dict())


# Posts

@router.get("/posts")
async def list_posts(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=0),
) -> dict[str, Any]:
    result = await _content.list_content(POSTS, {"category": category, "tag": tag}, page=page, limit=limit)
    return ok(result.to_dict())


@router.get("/posts/latest")
async def latest_posts(limit: Optional[int] = Query(default=None, ge=1)) -> dict[str, Any]:
    result = await _content.latest(POSTS, limit=limit)
    return ok(result.to_dict())


@router.get("/posts/search")
async def search_posts(
    q: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=1),
) -> dict[str, Any]:
    result = await _content.search_content(q, POSTS, page=page, limit=limit)
    return ok(result.to_dict())


@router.get("/posts/{slug}")
async def get_post(slug: str) -> dict[str, Any]:
    post = await _content.get_by_slug(POSTS, slug)
    # Not awaited: the counter must not delay or fail the read.
    recorder.dispatch(recorder.record_view(POSTS, post["id"]))
    return ok(post)


# Galleries, documents, pages

@router.get("/galleries")
async def list_galleries(
    type: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=0),
) -> dict[str, Any]:
    result = await _content.list_content(GALLERIES, {"type": type}, page=page, limit=limit)
    return ok(result.to_dict())


@router.get("/galleries/{slug}")
async def get_gallery(slug: str) -> dict[str, Any]:
    return ok(await _content.get_by_slug(GALLERIES, slug))


@router.get("/documents")
async def list_documents(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: Optional[int] = Query(default=None, ge=0),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> dict[str, Any]:
    result = await _content.list_content(
        DOCUMENTS,
        {"category": category, "tag": tag},
        page=page,
        limit=limit,
        is_privileged=user is not None,
    )
    return ok(result.to_dict())


@router.get("/pages/{slug}")
async def get_page(slug: str) -> dict[str, Any]:
    return ok(await _content.get_by_slug(PAGES, slug))


# Globals and stats

@router.get("/settings")
async def get_settings() -> dict[str, Any]:
    return ok(await _content.get_global("settings"))


@router.get("/about")
async def get_about() -> dict[str, Any]:
    return ok(await _content.get_global("about"))


@router.get("/navigation")
async def get_navigation() -> dict[str, Any]:
    return ok(await _content.get_global("navigation"))


@router.get("/stats")
async def get_stats() -> dict[str, Any]:
    stats = await _content.stats()
    return ok(stats.to_dict())


# Contact

@router.post("/contact", status_code=status.HTTP_201_CREATED)
async def submit_contact(request: Request, body: ContactRequest) -> dict[str, Any]:
    doc = await _contact.submit(body.model_dump(), ip_address=client_ip(request))
    return ok({"id": doc["id"], "message": THANK_YOU_MESSAGE})
