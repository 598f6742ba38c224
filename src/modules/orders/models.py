"""Order and OrderItem models.

Business rules implemented:
- An Order owns its items: they are created with it in one transaction
  and removed with it (``on_delete=CASCADE``).
- OrderItem snapshots the catalogue price at creation time
  (``captured_unit_price``) and never recomputes it.
- Quantity per line is between 1 and 999 (validator + CHECK constraint).
- ``order_date`` is stored in UTC (``USE_TZ = True``).
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.orders.constants import MAX_ITEM_QUANTITY, MIN_ITEM_QUANTITY


class Order(models.Model):
    """Order aggregate root.

    The integer ``id`` is assigned by the database and is the only
    identifier exposed by the API.
    """

    order_date: models.DateTimeField = models.DateTimeField()

    class Meta:
        db_table = "orders"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.order_date:%Y-%m-%d %H:%M:%S})"


class OrderItem(models.Model):
    """Line of an Order.

    ``book_id`` references a book in the remote catalogue; there is no
    local foreign key because the catalogue is owned by another service.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    book_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField()
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[
            MinValueValidator(MIN_ITEM_QUANTITY),
            MaxValueValidator(MAX_ITEM_QUANTITY),
        ],
    )
    captured_unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=MIN_ITEM_QUANTITY)
                & models.Q(quantity__lte=MAX_ITEM_QUANTITY),
                name="order_items_quantity_range",
            ),
        ]

    def __str__(self) -> str:
        return f"book {self.book_id} x{self.quantity} (${self.captured_unit_price})"
