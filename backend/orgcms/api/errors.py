"""Global error handlers rendering the ``{success: false, error}`` envelope."""

from __future__ import annotations

import logging
import re
from http import HTTPStatus
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orgcms.api.request_id import get_request_id
from orgcms.domain.errors import OrgCmsError, StoreError, ValidationError

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def _status_code_name(status_code: int) -> str:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return "http_error"
    return re.sub(r"[^a-z0-9]+", "_", phrase.lower()).strip("_")


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    *,
    fields: Optional[list[dict[str, Any]]] = None,
) -> JSONResponse:
    error: dict[str, Any] = {"code": code, "message": message}
    if fields is not None:
        error["fields"] = fields
    payload = {"success": False, "error": error, "request_id": get_request_id(request)}
    return JSONResponse(status_code=status_code, content=payload)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(OrgCmsError)
    async def domain_exc_handler(request: Request, exc: OrgCmsError):  # type: ignore[override]
        if isinstance(exc, StoreError):
            logger.error(
                "store_error",
                exc_info=exc.cause or exc,
                extra={"operation": exc.operation, "collection": exc.collection},
            )
            return error_response(request, exc.status_code, exc.code, "Internal server error")
        if isinstance(exc, ValidationError):
            fields = [err.as_dict() for err in exc.errors]
            return error_response(request, exc.status_code, exc.code, exc.message, fields=fields)
        return error_response(request, exc.status_code, exc.code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        detail = exc.detail if isinstance(exc.detail, str) else None
        # Details raised by our dependencies ("invalid_token") are codes already.
        if detail and _CODE_RE.match(detail):
            code = detail
        else:
            code = _status_code_name(exc.status_code)
        return error_response(request, exc.status_code, code, detail or code)

    @app.exception_handler(RequestValidationError)
    async def validation_exc_handler(request: Request, exc: RequestValidationError):  # type: ignore[override]
        fields = [
            {"field": ".".join(str(part) for part in err.get("loc", ())[1:]), "reason": err.get("msg", "")}
            for err in exc.errors()
        ]
        return error_response(request, 422, "validation_error", "Request validation failed", fields=fields)
