"""
Shared plumbing for supply and shipment services.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from django.db.models import Q

from warehouseman.adapters.orm import OrmStore
from warehouseman.exceptions import DocumentError


@dataclass
class DocumentFilter:
    """
    Document search criteria.

    A document matches when ANY given criterion matches: inside the date
    range, one of the numbers, or at least one line with one of the
    resources/units. No criteria = every live document.
    """

    date_from: date | None = None
    date_to: date | None = None
    numbers: list[str] = field(default_factory=list)
    resource_ids: list[int] = field(default_factory=list)
    unit_ids: list[int] = field(default_factory=list)

    def as_q(self) -> Q:
        criteria = Q()
        if self.date_from or self.date_to:
            period = Q()
            if self.date_from:
                period &= Q(date__gte=self.date_from)
            if self.date_to:
                period &= Q(date__lte=self.date_to)
            criteria |= period
        if self.numbers:
            criteria |= Q(number__in=self.numbers)
        if self.resource_ids:
            criteria |= Q(items__resource_id__in=self.resource_ids)
        if self.unit_ids:
            criteria |= Q(items__unit_id__in=self.unit_ids)
        return criteria

    def apply(self, qs):
        criteria = self.as_q()
        if not criteria:
            return qs
        return qs.filter(criteria).distinct()


class DocumentService:
    """Base for document services: lookup, listing and line persistence."""

    model = None
    label = ''

    def __init__(self, ledger, reconciler, coordinator, logger=None):
        self.ledger = ledger
        self.reconciler = reconciler
        self.coordinator = coordinator
        self.logger = logger or logging.getLogger('warehouseman')
        self.store = OrmStore(
            self.model,
            unique_field='number',
            error_class=DocumentError,
            conflict_code='DUPLICATE_NUMBER',
        )

    def get(self, pk):
        """
        Live document with its items.

        Raises:
            DocumentError('NOT_FOUND')
        """
        return self._require(self.store.get_with_items(pk), pk)

    def list(self, document_filter: DocumentFilter | None = None):
        qs = self.store.alive().prefetch_related('items')
        if document_filter is not None:
            qs = document_filter.apply(qs)
        return qs

    def _get_for_update(self, pk):
        return self._require(self.store.get_with_items(pk, for_update=True), pk)

    def _require(self, document, pk):
        if document is None:
            self.logger.warning(f"{self.label}.not_found", extra={f"{self.label}_id": pk})
            raise DocumentError('NOT_FOUND', **{f"{self.label}_id": pk})
        return document

    def _write_items(self, document, diff) -> None:
        """Persist a reconciliation: removals, then inserts, then updates."""
        item_model = document.items.model

        if diff.removals:
            item_model.objects.filter(pk__in=[item.pk for item in diff.removals]).delete()

        if diff.inserts:
            item_model.objects.bulk_create([
                item_model(
                    document=document,
                    resource_id=line.resource_id,
                    unit_id=line.unit_id,
                    quantity=line.quantity,
                )
                for line in diff.inserts
            ])

        for item, line in diff.updates:
            item.resource_id = line.resource_id
            item.unit_id = line.unit_id
            item.quantity = line.quantity
            item.save(update_fields=['resource', 'unit', 'quantity'])
