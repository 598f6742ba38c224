"""Books catalogue DTOs.

``CatalogueBook`` mirrors the book record served by the remote catalogue
(camelCase on the wire).  It is a read-only snapshot: valid at the moment
of the lookup that produced it and never cached.

A lookup has three outcomes, modelled as a tagged result:

- ``BookFound``: the catalogue answered with a decodable book.
- ``BookMissing``: the catalogue answered with a 4xx status.
- ``CatalogueUnreachable``: transport failure, timeout, 5xx status or an
  undecodable body.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

PRICE_QUANTUM = Decimal("0.01")
# Largest value a decimal(10, 2) order line can store.
MAX_PRICE = Decimal("99999999.99")


class CatalogueBook(BaseModel):
    """Immutable snapshot of a catalogue book."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    title: Optional[str] = None
    author: Optional[str] = None
    publication_date: Optional[date] = None
    category: Optional[str] = None
    isbn: Optional[str] = None
    rating: Optional[int] = None
    price: Decimal
    visible: bool = False

    @field_validator("price")
    @classmethod
    def price_must_be_storable(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        if v <= MAX_PRICE:
            v = v.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)
        if v > MAX_PRICE:
            raise ValueError(f"Price cannot exceed {MAX_PRICE}.")
        return v

    @field_validator("visible", mode="before")
    @classmethod
    def missing_visibility_means_hidden(cls, v: Any) -> Any:
        return False if v is None else v


@dataclass(frozen=True)
class BookFound:
    book: CatalogueBook


@dataclass(frozen=True)
class BookMissing:
    book_id: int
    status_code: int


@dataclass(frozen=True)
class CatalogueUnreachable:
    book_id: int
    reason: str


CatalogueLookup = Union[BookFound, BookMissing, CatalogueUnreachable]
