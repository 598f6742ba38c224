"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
aggregate-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the aggregate root managed by the
    repository (e.g. ``Order``).  Identifiers are store-assigned integers.
    """

    @abstractmethod
    def get_by_id(self, id: int) -> Optional[T]:
        """Retrieve an aggregate by its primary key, or ``None``."""

    @abstractmethod
    def list(self) -> List[T]:
        """Return every aggregate; an empty list when there are none."""

    @abstractmethod
    def delete(self, id: int) -> bool:
        """Remove an aggregate and everything it owns."""
