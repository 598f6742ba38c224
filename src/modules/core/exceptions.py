"""API error taxonomy and the DRF exception handler.

Services raise the exceptions declared here (or module-specific
subclasses).  Views never catch them: ``api_exception_handler`` is the
single place where a failure becomes an HTTP response, and every error
response shares one envelope::

    {"timestamp", "status", "error", "message", "path", "details"}

``details`` is only present for field-validation and business-rule
failures.  Data-integrity and unexpected failures are logged with their
full diagnostic but only a generic message reaches the client.
"""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Sequence

import structlog
from django.db import IntegrityError
from django.http import Http404
from django.utils import timezone
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import set_rollback

from modules.core.messages import get_message, is_known_code

logger = structlog.get_logger(__name__)

VALIDATION_FAILED_MESSAGE = "Request validation failed"
MALFORMED_REQUEST_MESSAGE = "The request body is malformed"


@dataclass(frozen=True)
class ErrorDetail:
    """One ``{element, code, description}`` entry of an error response."""

    code: str
    description: str
    element: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        data: Dict[str, str] = {}
        if self.element is not None:
            data["element"] = self.element
        data["code"] = self.code
        data["description"] = self.description
        return data


# ---------------------------------------------------------------------------
# Failure kinds
# ---------------------------------------------------------------------------


class FieldValidationFailed(Exception):
    """The request payload is malformed, incomplete or out of range (400).

    Carries every violation found, one detail per offending field.
    """

    def __init__(self, details: Sequence[ErrorDetail]) -> None:
        super().__init__(VALIDATION_FAILED_MESSAGE)
        self.details = list(details)


class InvalidParameter(Exception):
    """A path or query parameter cannot be parsed (400)."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(f"The parameter '{name}' has an invalid type")
        self.name = name
        self.value = value


class BusinessRuleViolation(Exception):
    """A well-formed request breaks a domain rule (422).

    Business rules are checked fail-fast, so a violation carries exactly
    the detail of the first rule that failed.
    """

    message = "Business rule validation failed"

    def __init__(self, detail: ErrorDetail) -> None:
        super().__init__(detail.description)
        self.details = [detail]


class ResourceNotFound(Exception):
    """The requested resource does not exist (404)."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def classify_integrity_error(exc: BaseException) -> str:
    """Map a database integrity failure to its generic error code.

    The database driver only reports the violated constraint in the
    message text, so the classification inspects it.
    """
    text = str(exc).lower()
    if "primary key" in text:
        return "GENERIC-001"
    if "null" in text:
        return "GENERIC-002"
    if "unique" in text:
        return "GENERIC-004"
    return "GENERIC-003"


def collect_field_violations(errors: Any, element: str = "") -> List[ErrorDetail]:
    """Flatten DRF serializer errors into ``ErrorDetail`` triples.

    Nested fields are joined with dots and list positions are written as
    ``items[1].quantity``.  Messages that are catalogue codes resolve to
    their description; any other message is kept verbatim under the DRF
    error code.
    """
    violations: List[ErrorDetail] = []
    if isinstance(errors, dict):
        for key, value in errors.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                child = element
            elif isinstance(key, int):
                child = f"{element}[{key}]"
            else:
                child = f"{element}.{key}" if element else str(key)
            violations.extend(collect_field_violations(value, child))
    elif isinstance(errors, list):
        for index, value in enumerate(errors):
            if isinstance(value, (dict, list)):
                violations.extend(
                    collect_field_violations(value, f"{element}[{index}]")
                )
            else:
                violations.append(_field_violation(element, value))
    else:
        violations.append(_field_violation(element, errors))
    return violations


def _field_violation(element: str, message: Any) -> ErrorDetail:
    text = str(message)
    if is_known_code(text):
        code, description = text, get_message(text)
    else:
        code, description = getattr(message, "code", None) or "invalid", text
    return ErrorDetail(code=code, description=description, element=element or None)


def _format_timestamp() -> str:
    now = timezone.now()
    return f"{now:%Y-%m-%dT%H:%M:%S}.{now.microsecond // 1000:03d}Z"


def error_response(
    status_code: int,
    message: str,
    path: str,
    details: Optional[Sequence[ErrorDetail]] = None,
) -> Response:
    """Build a response carrying the shared error envelope."""
    body: Dict[str, Any] = {
        "timestamp": _format_timestamp(),
        "status": status_code,
        "error": HTTPStatus(status_code).phrase,
        "message": message,
        "path": path,
    }
    if details is not None:
        body["details"] = [detail.as_dict() for detail in details]
    return Response(body, status=status_code)


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Translate any exception raised by a view into the error envelope."""
    request = context.get("request")
    path = request.path if request is not None else ""
    log = logger.bind(path=path, error_type=type(exc).__name__)

    if isinstance(exc, FieldValidationFailed):
        log.warning("api.field_validation_failed", violations=len(exc.details))
        response = error_response(
            status.HTTP_400_BAD_REQUEST, str(exc), path, exc.details
        )
    elif isinstance(exc, drf_exceptions.ValidationError):
        details = collect_field_violations(exc.detail)
        log.warning("api.field_validation_failed", violations=len(details))
        response = error_response(
            status.HTTP_400_BAD_REQUEST, VALIDATION_FAILED_MESSAGE, path, details
        )
    elif isinstance(exc, drf_exceptions.ParseError):
        log.warning("api.malformed_request", error=str(exc.detail))
        response = error_response(
            status.HTTP_400_BAD_REQUEST, MALFORMED_REQUEST_MESSAGE, path
        )
    elif isinstance(exc, InvalidParameter):
        log.warning("api.invalid_parameter", parameter=exc.name)
        response = error_response(status.HTTP_400_BAD_REQUEST, str(exc), path)
    elif isinstance(exc, BusinessRuleViolation):
        log.warning("api.business_rule_violation", error=str(exc))
        response = error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, exc.message, path, exc.details
        )
    elif isinstance(exc, (ResourceNotFound, Http404, drf_exceptions.NotFound)):
        log.info("api.not_found")
        response = error_response(
            status.HTTP_404_NOT_FOUND, str(exc) or "Not found.", path
        )
    elif isinstance(exc, IntegrityError):
        log.error("api.data_integrity_violation", exc_info=exc)
        response = error_response(
            status.HTTP_409_CONFLICT,
            get_message(classify_integrity_error(exc)),
            path,
        )
    elif isinstance(exc, drf_exceptions.APIException):
        log.warning("api.request_rejected", status_code=exc.status_code)
        response = error_response(exc.status_code, str(exc.detail), path)
    else:
        log.error("api.unexpected_error", exc_info=exc)
        response = error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, get_message("GENERIC-005"), path
        )

    set_rollback()
    return response
