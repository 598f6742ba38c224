"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers),
the Service layer and the repository.  DTOs are immutable
(``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``OrderLineDTO``: a validated line with its captured unit price.
- ``NewOrderDTO``: a complete order ready to be persisted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import (
    MAX_BOOK_ID,
    MAX_ITEM_QUANTITY,
    MIN_BOOK_ID,
    MIN_ITEM_QUANTITY,
)

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line in a creation request.

    The client sends ``book_id`` and ``quantity``; the unit price is
    captured from the books catalogue by the Service Layer.
    """

    model_config = ConfigDict(frozen=True)

    book_id: int
    quantity: int

    @field_validator("book_id")
    @classmethod
    def book_id_must_be_in_range(cls, v: int) -> int:
        if v < MIN_BOOK_ID:
            raise ValueError("Book id must be greater than 0.")
        if v > MAX_BOOK_ID:
            raise ValueError("Book id must fit in a signed 64-bit integer.")
        return v

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_in_range(cls, v: int) -> int:
        if not MIN_ITEM_QUANTITY <= v <= MAX_ITEM_QUANTITY:
            raise ValueError(
                f"Quantity must be between {MIN_ITEM_QUANTITY} and {MAX_ITEM_QUANTITY}."
            )
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    ``items`` keeps the request order; the same book may appear on
    several lines.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v


# ---------------------------------------------------------------------------
# Validated / persistence-bound DTOs
# ---------------------------------------------------------------------------


class OrderLineDTO(BaseModel):
    """A line that passed the catalogue checks.

    ``captured_unit_price`` is the catalogue price observed during
    validation and is persisted as is.
    """

    model_config = ConfigDict(frozen=True)

    book_id: int
    quantity: int
    captured_unit_price: Decimal


class NewOrderDTO(BaseModel):
    """An order aggregate that has not been stored yet (no id)."""

    model_config = ConfigDict(frozen=True)

    items: Tuple[OrderLineDTO, ...]
    order_date: datetime

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: Tuple[OrderLineDTO, ...]
    ) -> Tuple[OrderLineDTO, ...]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @field_validator("order_date")
    @classmethod
    def order_date_must_be_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("Order date must be timezone-aware.")
        return v.astimezone(timezone.utc)
