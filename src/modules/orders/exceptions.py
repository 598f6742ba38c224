"""Order domain exceptions.

Raised by the Service Layer when a request cannot be fulfilled.  The
API exception handler renders them through their ``modules.core``
base classes: ``ResourceNotFound`` (404), ``InvalidParameter`` (400)
and ``BusinessRuleViolation`` (422).
"""

from __future__ import annotations

from typing import Any

from modules.core.exceptions import (
    BusinessRuleViolation,
    ErrorDetail,
    InvalidParameter,
    ResourceNotFound,
)
from modules.core.messages import get_message
from modules.orders.constants import BOOK_NOT_FOUND, BOOK_NOT_VISIBLE


class OrderNotFound(ResourceNotFound):
    """The requested order does not exist."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found.")
        self.order_id = order_id


class InvalidOrderId(InvalidParameter):
    """The order id in the URL is not an integer."""

    def __init__(self, value: Any) -> None:
        super().__init__("id", value)


class _BookRuleViolation(BusinessRuleViolation):
    code: str

    def __init__(self, book_id: int, index: int) -> None:
        self.book_id = book_id
        self.index = index
        super().__init__(
            ErrorDetail(
                code=self.code,
                description=get_message(self.code, book_id),
                element=f"items[{index}].bookId",
            )
        )


class BookNotFound(_BookRuleViolation):
    """A line references a book the catalogue could not resolve."""

    code = BOOK_NOT_FOUND


class BookNotVisible(_BookRuleViolation):
    """A line references a book that is hidden from sale."""

    code = BOOK_NOT_VISIBLE
