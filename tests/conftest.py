from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx
import pytest

from rest_framework.test import APIClient

from modules.catalogue.client import CatalogueClient

CATALOGUE_BOOK_URL = "http://catalogue.test/books/{book_id}"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


class FakeCatalogue:
    """In-memory books catalogue served through ``httpx.MockTransport``.

    Unknown ids answer 404.  ``outage`` makes every call fail at the
    transport level and ``server_error`` makes every call answer 500.
    """

    def __init__(self) -> None:
        self.books: Dict[int, Dict[str, Any]] = {}
        self.requested_ids: List[int] = []
        self.outage = False
        self.server_error = False

    def add_book(
        self,
        book_id: int,
        price: Any = "19.99",
        visible: Optional[bool] = True,
        **extra: Any,
    ) -> Dict[str, Any]:
        book: Dict[str, Any] = {
            "id": book_id,
            "title": f"Book {book_id}",
            "author": "Jane Author",
            "publicationDate": "2020-05-01",
            "category": "Fiction",
            "isbn": f"978000000{book_id:04d}",
            "rating": 4,
            "price": float(Decimal(str(price))),
            **extra,
        }
        if visible is not None:
            book["visible"] = visible
        self.books[book_id] = book
        return book

    def handler(self, request: httpx.Request) -> httpx.Response:
        book_id = int(request.url.path.rsplit("/", 1)[-1])
        self.requested_ids.append(book_id)
        if self.outage:
            raise httpx.ConnectError("connection refused", request=request)
        if self.server_error:
            return httpx.Response(500, json={"error": "boom"})
        book = self.books.get(book_id)
        if book is None:
            return httpx.Response(404, json={"error": "Not Found"})
        return httpx.Response(200, json=book)

    def client(self) -> CatalogueClient:
        return CatalogueClient(
            book_url=CATALOGUE_BOOK_URL,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture()
def fake_catalogue():
    return FakeCatalogue()


@pytest.fixture()
def catalogue(fake_catalogue, monkeypatch):
    """Route the API's catalogue calls to ``fake_catalogue``."""
    monkeypatch.setattr(
        "modules.orders.views.build_catalogue_client", fake_catalogue.client
    )
    return fake_catalogue
