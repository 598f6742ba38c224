"""Assembly of validated lines into a new Order aggregate."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from modules.orders.dtos import NewOrderDTO, OrderLineDTO


def build_order(lines: Sequence[OrderLineDTO], now: datetime) -> NewOrderDTO:
    """Return an order made of *lines*, dated *now* (converted to UTC).

    No id is assigned here; the repository gets one from the database.
    Raises ``pydantic.ValidationError`` for an empty *lines* or a naive
    *now*.
    """
    return NewOrderDTO(items=tuple(lines), order_date=now)
