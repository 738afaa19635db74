"""
Django ORM adapter — EntityStore implementation.

One OrmStore per entity kind:

    supplies = OrmStore(
        SupplyDocument,
        unique_field='number',
        error_class=DocumentError,
        conflict_code='DUPLICATE_NUMBER',
    )
    doc = supplies.get_with_items(pk, for_update=True)

Uniqueness is enforced by the database (partial unique constraints on
non-deleted rows). A violation surfaces as IntegrityError and is
translated here into the domain error.
"""

from __future__ import annotations

from django.db import IntegrityError, transaction


class OrmStore:
    """EntityStore backed by a soft-delete Django model."""

    def __init__(self, model, *, unique_field: str | None = None,
                 error_class=None, conflict_code: str | None = None,
                 case_insensitive: bool = False, using: str | None = None):
        self.model = model
        self.unique_field = unique_field
        self.error_class = error_class
        self.conflict_code = conflict_code
        self.case_insensitive = case_insensitive
        self.using = using

    def __repr__(self) -> str:
        return f"OrmStore({self.model.__name__})"

    def alive(self):
        return self.model.objects.using(self.using).alive()

    def get(self, pk):
        return self.alive().filter(pk=pk).first()

    def get_with_items(self, pk, *, for_update: bool = False):
        qs = self.alive()
        if for_update:
            qs = qs.select_for_update()
        return qs.prefetch_related('items').filter(pk=pk).first()

    def add(self, entity):
        self._save(entity, force_insert=True)
        return entity

    def update(self, entity, fields: list[str] | None = None):
        if fields is not None:
            fields = list(dict.fromkeys([*fields, 'updated_at']))
        self._save(entity, update_fields=fields)
        return entity

    def soft_delete(self, pk) -> None:
        entity = self.get(pk)
        if entity is None:
            return
        entity.mark_deleted()
        entity.save(update_fields=['is_deleted', 'deleted_at', 'updated_at'])

    def hard_delete(self, pk) -> None:
        self.model.objects.using(self.using).filter(pk=pk).delete()

    def is_taken(self, value, exclude_pk=None) -> bool:
        """Is the unique value used by another live row?"""
        lookup = f"{self.unique_field}__iexact" if self.case_insensitive else self.unique_field
        qs = self.alive().filter(**{lookup: value})
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        return qs.exists()

    def _save(self, entity, **kwargs) -> None:
        try:
            # Savepoint: the outer transaction stays usable after a violation
            with transaction.atomic(using=self.using):
                entity.save(**kwargs)
        except IntegrityError as exc:
            if self.unique_field and self.error_class:
                value = getattr(entity, self.unique_field)
                if self.is_taken(value, exclude_pk=entity.pk):
                    raise self.error_class(
                        self.conflict_code,
                        **{self.unique_field: value},
                    ) from exc
            raise
