"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

Field errors use catalogue codes (``ORDER-001``, ``ORDER_ITEM-012``...)
as their message so ``validate_order_request`` can report them as
``{element, code, description}`` triples.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from rest_framework import serializers

from modules.core.exceptions import ErrorDetail, collect_field_violations
from modules.orders.constants import (
    MAX_BOOK_ID,
    MAX_ITEM_QUANTITY,
    MIN_BOOK_ID,
    MIN_ITEM_QUANTITY,
)
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order, OrderItem

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single line of an order creation request."""

    default_error_messages = {"invalid": "ORDER_ITEM-020", "null": "ORDER_ITEM-020"}

    bookId = serializers.IntegerField(
        source="book_id",
        min_value=MIN_BOOK_ID,
        max_value=MAX_BOOK_ID,
        error_messages={
            "required": "ORDER_ITEM-001",
            "null": "ORDER_ITEM-001",
            "invalid": "ORDER_ITEM-003",
            "max_string_length": "ORDER_ITEM-003",
            "min_value": "ORDER_ITEM-002",
            "max_value": "ORDER_ITEM-003",
        },
    )
    quantity = serializers.IntegerField(
        min_value=MIN_ITEM_QUANTITY,
        max_value=MAX_ITEM_QUANTITY,
        error_messages={
            "required": "ORDER_ITEM-010",
            "null": "ORDER_ITEM-010",
            "invalid": "ORDER_ITEM-013",
            "max_string_length": "ORDER_ITEM-013",
            "min_value": "ORDER_ITEM-011",
            "max_value": "ORDER_ITEM-012",
        },
    )


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    default_error_messages = {"invalid": "ORDER-004"}

    items = serializers.ListSerializer(
        child=CreateOrderItemSerializer(),
        allow_empty=False,
        error_messages={
            "required": "ORDER-001",
            "null": "ORDER-001",
            "not_a_list": "ORDER-003",
            "empty": "ORDER-002",
        },
    )

    def to_dto(self) -> CreateOrderDTO:
        return CreateOrderDTO(
            items=[
                CreateOrderItemDTO(book_id=item["book_id"], quantity=item["quantity"])
                for item in self.validated_data["items"]
            ]
        )


def validate_order_request(
    data: Any,
) -> Tuple[Optional[CreateOrderDTO], List[ErrorDetail]]:
    """Run field validation on a raw creation payload.

    Every violation is collected (not only the first one).  Returns the
    DTO and an empty list on success, ``None`` and the violations
    otherwise.
    """
    serializer = CreateOrderSerializer(data=data)
    if not serializer.is_valid():
        return None, collect_field_violations(serializer.errors)
    return serializer.to_dto(), []


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order lines; prices render as JSON numbers."""

    bookId = serializers.IntegerField(source="book_id", read_only=True)
    capturedUnitPrice = serializers.DecimalField(
        source="captured_unit_price",
        max_digits=10,
        decimal_places=2,
        coerce_to_string=False,
        read_only=True,
    )

    class Meta:
        model = OrderItem
        fields = ["id", "bookId", "quantity", "capturedUnitPrice"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested lines."""

    items = OrderItemSerializer(many=True, read_only=True)
    orderDate = serializers.DateTimeField(source="order_date", read_only=True)

    class Meta:
        model = Order
        fields = ["id", "items", "orderDate"]
        read_only_fields = fields
