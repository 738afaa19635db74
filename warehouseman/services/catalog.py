"""
Catalog — resources, units of measure and clients.

Plain CRUD with name uniqueness, archive/unarchive and delete
protection for entries still referenced by documents or balances.
"""

import logging
from typing import Iterable

from django.db import transaction

from warehouseman.adapters.orm import OrmStore
from warehouseman.exceptions import CatalogError, DocumentError
from warehouseman.models.balance import Balance
from warehouseman.models.catalog import Client, Resource, UnitOfMeasure
from warehouseman.models.documents import ShipmentDocument, ShipmentItem, SupplyItem


# (model, field) pairs that keep an entry "in use"
USAGES = {
    Resource: [(Balance, 'resource'), (SupplyItem, 'resource'), (ShipmentItem, 'resource')],
    UnitOfMeasure: [(Balance, 'unit'), (SupplyItem, 'unit'), (ShipmentItem, 'unit')],
    Client: [(ShipmentDocument, 'client')],
}


class Catalog:
    """CRUD + archive for one catalog model."""

    def __init__(self, model, logger=None):
        self.model = model
        self.label = model._meta.model_name
        self.logger = logger or logging.getLogger('warehouseman')
        self.store = OrmStore(
            model,
            unique_field='name',
            error_class=CatalogError,
            conflict_code='DUPLICATE_NAME',
            case_insensitive=True,
        )

    def get(self, pk):
        entry = self.store.get(pk)
        if entry is None:
            self.logger.warning(f"{self.label}.not_found", extra={"id": pk})
            raise CatalogError('NOT_FOUND', kind=self.label, id=pk)
        return entry

    def list(self, ids: Iterable = (), name_contains: str = '',
             include_archived: bool = False):
        qs = self.store.alive()
        ids = list(ids)
        if ids:
            qs = qs.filter(pk__in=ids)
        if name_contains:
            qs = qs.filter(name__icontains=name_contains)
        if not include_archived:
            qs = qs.filter(is_archived=False)
        return qs

    def create(self, name: str, **fields):
        entry = self.model(name=name, **fields)
        with transaction.atomic():
            self.store.add(entry)
        self.logger.info(f"{self.label}.created", extra={"id": entry.pk, "entry_name": name})
        return entry

    def update(self, pk, name: str, **fields):
        with transaction.atomic():
            entry = self.get(pk)
            entry.name = name
            for field, value in fields.items():
                setattr(entry, field, value)
            self.store.update(entry, ['name', *fields])
        self.logger.info(f"{self.label}.updated", extra={"id": pk})
        return entry

    def archive(self, pk):
        return self._set_archived(pk, True)

    def unarchive(self, pk):
        return self._set_archived(pk, False)

    def delete(self, pk) -> None:
        """
        Soft delete.

        Raises:
            CatalogError('IN_USE'): still referenced, archive instead
        """
        with transaction.atomic():
            self.get(pk)
            if self.is_in_use(pk):
                raise CatalogError('IN_USE', kind=self.label, id=pk)
            self.store.soft_delete(pk)
        self.logger.info(f"{self.label}.deleted", extra={"id": pk})

    def is_in_use(self, pk) -> bool:
        return any(
            model.objects.filter(**{f"{field}_id": pk}).exists()
            for model, field in USAGES.get(self.model, [])
        )

    def _set_archived(self, pk, archived: bool):
        with transaction.atomic():
            entry = self.get(pk)
            if entry.is_archived == archived:
                self.logger.warning(
                    f"{self.label}.archive_unchanged",
                    extra={"id": pk, "is_archived": archived},
                )
                return entry
            entry.is_archived = archived
            self.store.update(entry, ['is_archived'])
        event = "archived" if archived else "unarchived"
        self.logger.info(f"{self.label}.{event}", extra={"id": pk})
        return entry


class CatalogLookup:
    """Answers whether catalog entries can be picked for new usage."""

    def ensure_selectable(self, resource_ids: Iterable = (), unit_ids: Iterable = ()) -> None:
        """
        Raises:
            DocumentError('NOT_FOUND'): unknown or deleted resource/unit
            DocumentError('ARCHIVED_ENTITY_USED'): archived resource/unit
        """
        for model, ids, label in ((Resource, resource_ids, 'resource'),
                                  (UnitOfMeasure, unit_ids, 'unit')):
            ids = set(ids)
            if not ids:
                continue

            flags = dict(
                model.objects.alive().filter(pk__in=ids).values_list('pk', 'is_archived')
            )
            missing = sorted(ids - flags.keys())
            if missing:
                raise DocumentError(
                    'NOT_FOUND', f"Unknown {label}", **{f"{label}_ids": missing}
                )
            archived = sorted(pk for pk, is_archived in flags.items() if is_archived)
            if archived:
                raise DocumentError('ARCHIVED_ENTITY_USED', **{f"{label}_ids": archived})

    def ensure_client_selectable(self, client_id) -> Client:
        """
        Raises:
            DocumentError('NOT_FOUND'): unknown or deleted client
            DocumentError('ARCHIVED_CLIENT'): archived client
        """
        client = Client.objects.alive().filter(pk=client_id).first()
        if client is None:
            raise DocumentError('NOT_FOUND', "Unknown client", client_id=client_id)
        if client.is_archived:
            raise DocumentError('ARCHIVED_CLIENT', client_id=client_id)
        return client
