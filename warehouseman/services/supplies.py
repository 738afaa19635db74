"""
Supply documents — stock in.

Every supply line adds its quantity to the ledger the moment the
document is saved; edits and deletion move the ledger by the difference.
"""

from datetime import date
from typing import Iterable

from warehouseman.conf import warehouseman_settings
from warehouseman.exceptions import DocumentError
from warehouseman.models.documents import SupplyDocument
from warehouseman.services.documents import DocumentService
from warehouseman.services.reconciler import SUPPLY, ItemLine, Reconciliation


class SupplyDocuments(DocumentService):
    """Create, edit and delete supplies, keeping balances in step."""

    model = SupplyDocument
    label = 'supply'

    def create(self, number: str, date: date, items: Iterable[ItemLine] = ()) -> SupplyDocument:
        """
        Register a supply and receive its lines.

        Raises:
            DocumentError('DUPLICATE_NUMBER')
            DocumentError('ARCHIVED_ENTITY_USED')
            DocumentError('EMPTY_DOCUMENT'): no lines and ALLOW_EMPTY_SUPPLY off
        """
        items = list(items)
        if not items and not warehouseman_settings.ALLOW_EMPTY_SUPPLY:
            raise DocumentError('EMPTY_DOCUMENT', number=number)

        with self.coordinator.atomic('supply.create', number=number):
            diff = self.reconciler.reconcile([], items, SUPPLY)
            document = self.store.add(SupplyDocument(number=number, date=date))
            self._write_items(document, diff)
            self.ledger.adjust_batch(
                diff.adjustments,
                reason='supply.created',
                reference=document,
                number=number,
            )

        self.logger.info(
            "supply.created",
            extra={"supply_id": document.pk, "number": number, "lines": len(items)},
        )
        return self.get(document.pk)

    def update(self, pk, number: str, date: date,
               items: Iterable[ItemLine] | None = None) -> SupplyDocument:
        """
        Replace header and lines; the ledger absorbs the line diff.

        Lines carrying an id edit that line, lines without one are new,
        current lines left out are removed. items=None keeps the lines.

        Raises:
            DocumentError('NOT_FOUND')
            DocumentError('DUPLICATE_NUMBER')
            DocumentError('ARCHIVED_ENTITY_USED')
            StockError('INSUFFICIENT_STOCK'): removed stock already shipped
        """
        if items is not None:
            items = list(items)
            if not items and not warehouseman_settings.ALLOW_EMPTY_SUPPLY:
                raise DocumentError('EMPTY_DOCUMENT', supply_id=pk)

        with self.coordinator.atomic('supply.update', supply_id=pk):
            document = self._get_for_update(pk)
            current = list(document.items.all())

            if items is None:
                diff = Reconciliation(unchanged=current)
            else:
                diff = self.reconciler.reconcile(current, items, SUPPLY)

            document.number = number
            document.date = date
            self.store.update(document, ['number', 'date'])
            self._write_items(document, diff)

            self.ledger.validate_batch(diff.adjustments)
            self.ledger.adjust_batch(
                diff.adjustments,
                reason='supply.updated',
                reference=document,
                number=number,
            )

        self.logger.info(
            "supply.updated",
            extra={
                "supply_id": pk,
                "inserted": len(diff.inserts),
                "updated": len(diff.updates),
                "removed": len(diff.removals),
            },
        )
        return self.get(pk)

    def delete(self, pk) -> None:
        """
        Soft delete and take the received stock back out.

        Raises:
            DocumentError('NOT_FOUND')
            StockError('INSUFFICIENT_STOCK'): part of the stock already left
        """
        with self.coordinator.atomic('supply.delete', supply_id=pk):
            document = self._get_for_update(pk)
            diff = self.reconciler.reconcile(document.items.all(), [], SUPPLY)

            self.ledger.validate_batch(diff.adjustments)
            self.store.soft_delete(pk)
            self.ledger.adjust_batch(
                diff.adjustments,
                reason='supply.deleted',
                reference=document,
                number=document.number,
            )

        self.logger.info("supply.deleted", extra={"supply_id": pk})
