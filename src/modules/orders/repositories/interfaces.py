"""Order repository interface.

Extends ``IRepository[Order]`` with the atomic creation of the Order
aggregate (Order + OrderItems).

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import NewOrderDTO
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    OrderItems are never addressed on their own: they are written with
    their Order and read through it.
    """

    @abstractmethod
    def create(self, new_order: NewOrderDTO) -> Order:
        """Persist an order with all its items in one transaction.

        Returns the stored order with its assigned ids.  Constraint
        violations propagate as ``django.db.IntegrityError``.
        """
