import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

'''
Helper _error_response()

Takes status_code, detail, code, request and returns a JSONResponse.

Every error leaves the API in the same shape.
'''
def _error_response(
    *,
    status_code: int,
    detail: str,
    code: str,
    request: Request,
    fields: Optional[dict] = None,
) -> JSONResponse:
    content = {
        "error": detail,
        "code": code,
        "path": request.url.path,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
    if fields:
        content["fields"] = fields
    return JSONResponse(status_code=status_code, content=content)

# Base class AppError
class AppError(Exception):
    status_code = 400
    code = "app_error"
    detail = "Application error"

    def __init__(self, detail: str | None = None, code: str | None = None):
        if detail is not None:
            self.detail = detail
        if code is not None:
            self.code = code
        super().__init__(self.detail)


# =============
# Domain errors
# =============

class ValidationError(AppError):
    status_code = 400
    code = "validation_error"
    detail = "Validation failed"

    def __init__(self, fields: dict[str, str] | None = None, detail: str | None = None):
        super().__init__(detail=detail)
        self.fields = fields or {}


class AuthError(AppError):
    status_code = 401
    code = "unauthorized"
    detail = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    code = "forbidden"
    detail = "You are not allowed to perform this action"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    detail = "Resource not found"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"
    detail = "Resource already exists"


class InternalError(AppError):
    status_code = 500
    code = "internal_server_error"
    detail = "Internal server error"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.detail)
        # Internals stay in the log
        exc = InternalError()
    else:
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.detail)
    return _error_response(
        status_code=exc.status_code,
        detail=exc.detail,
        code=exc.code,
        request=request,
        fields=getattr(exc, "fields", None),
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(
        status_code=exc.status_code,
        detail=detail,
        code="http_error",
        request=request,
    )


def _field_message(error: dict) -> str:
    name = str(error["loc"][-1]) if error.get("loc") else "body"
    if error["type"] in ("missing", "string_too_short", "too_short"):
        return f"{name.capitalize()} is required"
    message = error.get("msg", "Invalid value")
    return message.removeprefix("Value error, ")


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    fields = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        # ("body", "title") -> "title"; a missing or non-object body -> "body"
        name = str(loc[-1]) if len(loc) > 1 else "body"
        fields.setdefault(name, _field_message(error))
    logger.warning("Validation error on %s: %s", request.url.path, fields)
    return _error_response(
        status_code=400,
        detail="Validation failed",
        code="validation_error",
        request=request,
        fields=fields,
    )


async def rate_limit_exceeded_handler(
    request: Request,
    exc: RateLimitExceeded,
) -> JSONResponse:
    return _error_response(
        status_code=429,
        detail=f"Rate limit exceeded: {exc.detail}",
        code="rate_limited",
        request=request,
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s: %s", request.url.path, exc, exc_info=exc,
    )
    return _error_response(
        status_code=500,
        detail="Internal server error",
        code="internal_server_error",
        request=request,
    )
