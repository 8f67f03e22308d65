"""Exception handler middleware for structured error responses."""

import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from ..exceptions import PreviewException

logger = logging.getLogger(__name__)

# Detail keys lifted into top-level log fields so preview failures can be
# filtered by plugin, index or handle.
_LOGGED_DETAILS = ("plugin_id", "index_name", "handle", "operation")


async def preview_exception_handler(request: Request, exc: PreviewException) -> JSONResponse:
    """
    Handle preview exceptions and return structured JSON responses.

    Server-side failures (search engine, build) log at ERROR, client
    mistakes such as unknown handles or unsupported entities at WARNING.
    """
    extra = {
        "error_code": exc.error_code.value,
        "path": request.url.path,
        "method": request.method,
        "status_code": exc.status_code,
        "details": exc.details,
    }
    for key in _LOGGED_DETAILS:
        if key in exc.details:
            extra[key] = exc.details[key]

    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.error_code.value}: {exc.message}", extra=extra)

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
