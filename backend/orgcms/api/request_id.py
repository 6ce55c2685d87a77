"""Request ID helper for endpoints and error handlers.

Relies on the observability middleware binding the request id into the
logging context; falls back to ``request.state`` and then a default.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from orgcms.obs import logging as obs_logging

REQUEST_ID_ATTR = "request_id"


def get_request_id(request: Optional[Request] = None, default: str = "unknown") -> str:
    rid = obs_logging.current_request_id()
    if not rid and request is not None:
        rid = getattr(request.state, REQUEST_ID_ATTR, None)
    return rid or default


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.client.host if request.client else None
