"""
Storage Protocol — Persistence capabilities the services rely on.

Warehouseman defines this protocol, adapters.orm.OrmStore implements it
once for every entity kind (documents and catalog entries alike).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EntityStore(Protocol):
    """
    Capability set for one entity kind.

    Implementations should:
    - Hide soft-deleted rows from get() and get_with_items()
    - Translate uniqueness violations into a domain error
    - Never open their own transaction boundary beyond a savepoint
    """

    def get(self, pk: int) -> Any | None:
        """
        Fetch a live entity.

        Args:
            pk: Primary key

        Returns:
            Entity or None if missing or soft-deleted
        """
        ...

    def get_with_items(self, pk: int, *, for_update: bool = False) -> Any | None:
        """
        Fetch a live entity with its line items prefetched.

        Args:
            pk: Primary key
            for_update: Lock the row until the transaction ends

        Returns:
            Entity or None if missing or soft-deleted
        """
        ...

    def add(self, entity: Any) -> Any:
        """Insert a new entity."""
        ...

    def update(self, entity: Any, fields: list[str] | None = None) -> Any:
        """Persist changes of an existing entity."""
        ...

    def soft_delete(self, pk: int) -> None:
        """Flag as deleted, keep the row."""
        ...

    def hard_delete(self, pk: int) -> None:
        """Remove the row (and owned rows by cascade)."""
        ...
