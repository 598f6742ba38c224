"""Unit tests for Order DTOs.

Covers:
- CreateOrderItemDTO: book id and quantity ranges, frozen immutability.
- CreateOrderDTO: non-empty items, duplicates kept in order.
- NewOrderDTO: non-empty items, timezone-aware date normalised to UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from modules.orders.dtos import (
    CreateOrderDTO,
    CreateOrderItemDTO,
    NewOrderDTO,
    OrderLineDTO,
)

pytestmark = pytest.mark.unit


# ===========================================================================
# CreateOrderItemDTO
# ===========================================================================


class TestCreateOrderItemDTOValid:
    def test_valid_item(self):
        dto = CreateOrderItemDTO(book_id=1, quantity=3)
        assert dto.book_id == 1
        assert dto.quantity == 3

    @pytest.mark.parametrize("quantity", [1, 999])
    def test_quantity_bounds(self, quantity):
        assert CreateOrderItemDTO(book_id=1, quantity=quantity).quantity == quantity


class TestCreateOrderItemDTOValidation:
    @pytest.mark.parametrize("quantity", [0, -1, 1000])
    def test_quantity_out_of_range_raises(self, quantity):
        with pytest.raises(ValidationError, match="Quantity must be between 1 and 999"):
            CreateOrderItemDTO(book_id=1, quantity=quantity)

    def test_non_positive_book_id_raises(self):
        with pytest.raises(ValidationError, match="Book id must be greater than 0"):
            CreateOrderItemDTO(book_id=0, quantity=1)

    def test_book_id_beyond_64_bits_raises(self):
        with pytest.raises(ValidationError, match="signed 64-bit integer"):
            CreateOrderItemDTO(book_id=2**63, quantity=1)


class TestCreateOrderItemDTOFrozen:
    def test_is_immutable(self):
        dto = CreateOrderItemDTO(book_id=1, quantity=2)
        with pytest.raises(ValidationError):
            dto.quantity = 5


# ===========================================================================
# CreateOrderDTO
# ===========================================================================


class TestCreateOrderDTO:
    def test_valid_order(self):
        dto = CreateOrderDTO(items=[CreateOrderItemDTO(book_id=1, quantity=1)])
        assert len(dto.items) == 1

    def test_empty_items_raises(self):
        with pytest.raises(ValidationError, match="Order must have at least one item"):
            CreateOrderDTO(items=[])

    def test_duplicate_books_are_kept_in_order(self):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(book_id=2, quantity=1),
                CreateOrderItemDTO(book_id=1, quantity=4),
                CreateOrderItemDTO(book_id=2, quantity=3),
            ]
        )
        assert [(i.book_id, i.quantity) for i in dto.items] == [(2, 1), (1, 4), (2, 3)]


# ===========================================================================
# NewOrderDTO
# ===========================================================================


LINE = OrderLineDTO(book_id=1, quantity=2, captured_unit_price=Decimal("19.99"))


class TestNewOrderDTO:
    def test_valid_new_order(self):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        dto = NewOrderDTO(items=(LINE,), order_date=now)
        assert dto.items == (LINE,)
        assert dto.order_date == now

    def test_empty_items_raises(self):
        with pytest.raises(ValidationError, match="Order must have at least one item"):
            NewOrderDTO(items=(), order_date=datetime.now(timezone.utc))

    def test_naive_date_raises(self):
        with pytest.raises(ValidationError, match="Order date must be timezone-aware"):
            NewOrderDTO(items=(LINE,), order_date=datetime(2024, 3, 1, 12, 0))

    def test_date_is_converted_to_utc(self):
        local = datetime(2024, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
        dto = NewOrderDTO(items=(LINE,), order_date=local)
        assert dto.order_date == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert dto.order_date.utcoffset() == timedelta(0)
