import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"

# Ids from callers are echoed in a response header and in every log line.
_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")


def accepted_request_id(value: Optional[str]) -> Optional[str]:
    """Return *value* if it is usable as a correlation id, else ``None``."""
    if value and _REQUEST_ID_PATTERN.fullmatch(value):
        return value
    return None


class CorrelationIdMiddleware:
    """Tag every request, its log lines and its response with one id.

    The id comes from the ``X-Request-ID`` header when the caller sends a
    well-formed one (e.g. an upstream gateway) and is generated as a UUID4
    otherwise.  It is bound into structlog's context together with the
    request method and path, so catalogue and order events logged while
    handling the request carry ``correlation_id``, ``method`` and ``path``.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        supplied = request.headers.get(REQUEST_ID_HEADER)
        cid = accepted_request_id(supplied) or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=cid, method=request.method, path=request.path
        )
        if supplied and supplied != cid:
            logger.warning("request_id_rejected", supplied_length=len(supplied))

        logger.info("request_started")
        start = time.monotonic()
        response = self.get_response(request)
        logger.info(
            "request_finished",
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
