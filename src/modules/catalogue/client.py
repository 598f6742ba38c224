"""HTTP client for the remote books catalogue.

One synchronous ``GET`` per lookup, no retries and no caching: the
price and visibility of a book must be read fresh for every order line.
Failures never raise; they are returned as ``BookMissing`` or
``CatalogueUnreachable`` and logged with the underlying cause.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog
from django.conf import settings
from pydantic import ValidationError

from modules.catalogue.dtos import (
    BookFound,
    BookMissing,
    CatalogueBook,
    CatalogueLookup,
    CatalogueUnreachable,
)

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 5.0


class CatalogueClient:
    """Resolves book ids against the catalogue's book endpoint.

    ``book_url`` is a template with a ``{book_id}`` placeholder, e.g.
    ``http://catalogue:8088/books/{book_id}``.  ``transport`` replaces the
    network layer (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        book_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._book_url = book_url
        self._timeout = timeout
        self._transport = transport

    def lookup(self, book_id: int) -> CatalogueLookup:
        url = self._book_url.format(book_id=book_id)
        log = logger.bind(book_id=book_id, url=url)
        log.info("catalogue.lookup_started")

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as http:
                response = http.get(url)
        except httpx.TimeoutException as exc:
            log.error("catalogue.timeout", error=str(exc))
            return CatalogueUnreachable(book_id=book_id, reason="timeout")
        except httpx.HTTPError as exc:
            log.error("catalogue.transport_error", error=str(exc))
            return CatalogueUnreachable(book_id=book_id, reason=type(exc).__name__)

        if response.is_client_error:
            log.warning("catalogue.book_not_found", status_code=response.status_code)
            return BookMissing(book_id=book_id, status_code=response.status_code)
        if not response.is_success:
            log.error("catalogue.server_error", status_code=response.status_code)
            return CatalogueUnreachable(
                book_id=book_id, reason=f"HTTP {response.status_code}"
            )

        try:
            book = CatalogueBook.model_validate_json(response.content)
        except ValidationError as exc:
            log.error("catalogue.invalid_payload", error_count=exc.error_count())
            return CatalogueUnreachable(book_id=book_id, reason="invalid payload")

        log.info(
            "catalogue.book_found",
            title=book.title,
            price=str(book.price),
            visible=book.visible,
        )
        return BookFound(book=book)


def build_catalogue_client() -> CatalogueClient:
    """Build a client from the ``CATALOGUE_*`` Django settings."""
    return CatalogueClient(
        book_url=settings.CATALOGUE_BOOK_URL,
        timeout=getattr(settings, "CATALOGUE_TIMEOUT", DEFAULT_TIMEOUT),
    )
