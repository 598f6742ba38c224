"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Writes are wrapped in ``transaction.atomic()`` so the Order aggregate
(Order + OrderItems) is stored or removed as a unit.  Reads always
prefetch the items (one extra query, no N+1).
"""

from __future__ import annotations

from typing import List, Optional

import structlog
from django.db import transaction

from modules.orders.dtos import NewOrderDTO
from modules.orders.models import Order, OrderItem
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, new_order: NewOrderDTO) -> Order:
        order = Order(order_date=new_order.order_date)
        order.save()

        for line in new_order.items:
            item = OrderItem(
                order=order,
                book_id=line.book_id,
                quantity=line.quantity,
                captured_unit_price=line.captured_unit_price,
            )
            item.save()

        logger.info(
            "order.persisted", order_id=order.id, item_count=len(new_order.items)
        )
        return self._queryset().get(pk=order.pk)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        return self._queryset().filter(pk=id).first()

    def list(self) -> List[Order]:
        return list(self._queryset())

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Delete an order; its items go with it (CASCADE)."""
        order = Order.objects.filter(pk=id).first()
        if not order:
            return False
        deleted, _ = order.delete()
        logger.info("order.deleted", order_id=id, rows=deleted)
        return True

    @staticmethod
    def _queryset():
        return Order.objects.prefetch_related("items").order_by("id")
