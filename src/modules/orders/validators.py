"""Business-rule validation of order lines against the books catalogue.

Lines are checked one by one, in request order, and the first failure
aborts the whole order (no partial orders).  This is the opposite of the
field-validation layer, which reports every malformed field at once.

A catalogue outage is reported as ``BOOK_NOT_FOUND``, like a missing
book; the two cases are told apart only in the logs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

import structlog

from modules.catalogue.dtos import BookMissing, CatalogueUnreachable
from modules.orders.dtos import CreateOrderItemDTO, OrderLineDTO
from modules.orders.exceptions import BookNotFound, BookNotVisible

if TYPE_CHECKING:
    from modules.catalogue.client import CatalogueClient

logger = structlog.get_logger(__name__)


class OrderItemValidator:
    """Turns requested lines into lines with a captured unit price."""

    def __init__(self, catalogue_client: CatalogueClient) -> None:
        self._catalogue = catalogue_client

    def validate(self, items: Sequence[CreateOrderItemDTO]) -> List[OrderLineDTO]:
        """Validate *items* in order and capture their prices.

        Raises:
            BookNotFound: the catalogue cannot resolve a book.
            BookNotVisible: a book exists but is not for sale.
        """
        return [self._capture(index, item) for index, item in enumerate(items)]

    def _capture(self, index: int, item: CreateOrderItemDTO) -> OrderLineDTO:
        log = logger.bind(book_id=item.book_id, line=index)
        result = self._catalogue.lookup(item.book_id)

        if isinstance(result, CatalogueUnreachable):
            log.error("order.catalogue_unreachable", reason=result.reason)
            raise BookNotFound(item.book_id, index)
        if isinstance(result, BookMissing):
            log.warning("order.book_not_found", status_code=result.status_code)
            raise BookNotFound(item.book_id, index)

        book = result.book
        if not book.visible:
            log.warning("order.book_not_visible", title=book.title)
            raise BookNotVisible(item.book_id, index)

        log.info(
            "order.line_captured",
            title=book.title,
            quantity=item.quantity,
            unit_price=str(book.price),
        )
        return OrderLineDTO(
            book_id=item.book_id,
            quantity=item.quantity,
            captured_unit_price=book.price,
        )
