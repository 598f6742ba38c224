"""Order service layer (Use Cases).

Orchestrates order creation and the two read use cases.

Creation steps:
1. Validate every line against the books catalogue, fail-fast
   (``OrderItemValidator``).
2. Assemble the aggregate with the current UTC instant (``build_order``).
3. Persist order + items atomically (``IOrderRepository.create``).

Catalogue lookups run before, and outside of, the database transaction.
Store failures (e.g. ``IntegrityError``) propagate unchanged.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, Callable, List

import structlog
from django.utils import timezone

from modules.orders.builder import build_order
from modules.orders.exceptions import InvalidOrderId, OrderNotFound
from modules.orders.validators import OrderItemValidator

if TYPE_CHECKING:
    from modules.catalogue.client import CatalogueClient
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

_ORDER_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_MAX_ORDER_ID = 2**63 - 1


class OrderService:
    """Application service for Order use-cases.

    Receives the catalogue client and the repository via constructor
    injection (DIP).  ``clock`` supplies the order date and is replaced
    by a fixed clock in tests.
    """

    def __init__(
        self,
        catalogue_client: CatalogueClient,
        order_repository: IOrderRepository,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._validator = OrderItemValidator(catalogue_client)
        self._order_repo = order_repository
        self._clock = clock

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order whose lines carry the current catalogue prices.

        Raises:
            BookNotFound: a book is missing or the catalogue is unreachable.
            BookNotVisible: a book is not available for sale.
        """
        log = logger.bind(item_count=len(dto.items))
        log.info("order.creation_started")

        lines = self._validator.validate(dto.items)
        new_order = build_order(lines, now=self._clock())
        order = self._order_repo.create(new_order)

        log.info("order.created", order_id=order.id)
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by its id as received in the URL.

        Raises:
            InvalidOrderId: ``order_id`` is not an integer.
            OrderNotFound: no order has this id.
        """
        pk = _parse_order_id(order_id)
        order = self._order_repo.get_by_id(pk)
        if order is None:
            logger.info("order.not_found", order_id=pk)
            raise OrderNotFound(pk)
        return order

    def list_orders(self) -> List[Order]:
        """Return every order; an empty list when there are none."""
        return list(self._order_repo.list())


def _parse_order_id(value: str) -> int:
    text = str(value).strip()
    if not _ORDER_ID_PATTERN.fullmatch(text):
        raise InvalidOrderId(value)
    pk = int(text)
    if abs(pk) > _MAX_ORDER_ID:
        raise InvalidOrderId(value)
    return pk
