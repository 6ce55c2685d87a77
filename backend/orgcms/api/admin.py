"""Administrative write endpoints that the public core depends on."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request

from orgcms.api.public import ok
from orgcms.api.request_id import client_ip
from orgcms.domain.activity import recorder
from orgcms.domain.org import PeriodSelector
from orgcms.infra.auth import AuthenticatedUser, get_admin_user

router = APIRouter(prefix="/api/admin", tags=["admin"])

_selector = PeriodSelector(recorder=recorder)


@router.post("/periods/{period_id}/activate")
async def activate_period(
    request: Request,
    period_id: str,
    admin: AuthenticatedUser = Depends(get_admin_user),
) -> dict[str, Any]:
    period = await _selector.activate_period(period_id, actor_id=admin.id, ip_address=client_ip(request))
    return ok(period.to_dict())
