"""
Shipment documents — stock out, gated by status.

Draft shipments never touch the ledger. Signing takes the stock,
revoking gives it back. Lines are frozen once signed.
"""

from datetime import date
from typing import Iterable

from warehouseman.exceptions import DocumentError
from warehouseman.models.documents import ShipmentDocument
from warehouseman.models.enums import ShipmentStatus
from warehouseman.services.documents import DocumentService
from warehouseman.services.reconciler import SHIPMENT, ItemLine, Reconciliation


class ShipmentDocuments(DocumentService):
    """Create, edit, sign, revoke and delete shipments."""

    model = ShipmentDocument
    label = 'shipment'

    def __init__(self, ledger, reconciler, status_machine, coordinator, logger=None):
        super().__init__(ledger, reconciler, coordinator, logger=logger)
        self.status_machine = status_machine

    @property
    def lookup(self):
        return self.reconciler.lookup

    def create(self, number: str, client_id, date: date,
               items: Iterable[ItemLine]) -> ShipmentDocument:
        """
        Register a draft shipment. Stock is untouched until signed.

        Raises:
            DocumentError('EMPTY_DOCUMENT')
            DocumentError('DUPLICATE_NUMBER')
            DocumentError('ARCHIVED_CLIENT')
            DocumentError('ARCHIVED_ENTITY_USED')
        """
        items = list(items or [])
        if not items:
            raise DocumentError('EMPTY_DOCUMENT', number=number)

        with self.coordinator.atomic('shipment.create', number=number):
            self.lookup.ensure_client_selectable(client_id)
            diff = self.reconciler.reconcile([], items, SHIPMENT)
            document = self.store.add(ShipmentDocument(
                number=number,
                client_id=client_id,
                date=date,
                status=ShipmentStatus.DRAFT,
            ))
            self._write_items(document, diff)

        self.logger.info(
            "shipment.created",
            extra={"shipment_id": document.pk, "number": number, "lines": len(items)},
        )
        return self.get(document.pk)

    def update(self, pk, number: str, client_id, date: date,
               items: Iterable[ItemLine] | None = None) -> ShipmentDocument:
        """
        Edit header and, with items given, the lines.

        items=None keeps the lines as they are.

        Raises:
            DocumentError('NOT_FOUND')
            DocumentError('EMPTY_DOCUMENT')
            DocumentError('DUPLICATE_NUMBER')
            DocumentError('SIGNED_DOCUMENT_IMMUTABLE')
            DocumentError('REVOKED_DOCUMENT_IMMUTABLE')
            DocumentError('ARCHIVED_CLIENT')
            DocumentError('ARCHIVED_ENTITY_USED')
        """
        if items is not None:
            items = list(items)
            if not items:
                raise DocumentError('EMPTY_DOCUMENT', shipment_id=pk)

        with self.coordinator.atomic('shipment.update', shipment_id=pk):
            document = self._get_for_update(pk)
            current = list(document.items.all())

            if items is None:
                diff = Reconciliation(unchanged=current)
            else:
                diff = self.reconciler.reconcile(
                    current, items, SHIPMENT, check_selectable=False
                )

            header_changed = (
                (document.number, document.client_id, document.date)
                != (number, client_id, date)
            )
            self.status_machine.ensure_editable(
                document,
                items_changed=diff.has_changes,
                header_changed=header_changed,
            )
            self.reconciler.ensure_selectable(diff)
            if client_id != document.client_id:
                self.lookup.ensure_client_selectable(client_id)

            document.number = number
            document.client_id = client_id
            document.date = date
            self.store.update(document, ['number', 'client', 'date'])
            self._write_items(document, diff)

        self.logger.info(
            "shipment.updated",
            extra={
                "shipment_id": pk,
                "inserted": len(diff.inserts),
                "updated": len(diff.updates),
                "removed": len(diff.removals),
            },
        )
        return self.get(pk)

    def change_status(self, pk, status: str) -> ShipmentDocument:
        """
        Move the shipment to another status, adjusting stock.

        Same status = no-op.

        Raises:
            DocumentError('NOT_FOUND')
            DocumentError('INVALID_TRANSITION')
            StockError('INSUFFICIENT_STOCK')
        """
        with self.coordinator.atomic('shipment.change_status', shipment_id=pk, requested=status):
            document = self._get_for_update(pk)
            if self.status_machine.apply(document, status) is not None:
                self.store.update(document, ['status'])
        return self.get(pk)

    def sign(self, pk) -> ShipmentDocument:
        return self.change_status(pk, ShipmentStatus.SIGNED)

    def revoke(self, pk) -> ShipmentDocument:
        return self.change_status(pk, ShipmentStatus.REVOKED)

    def delete(self, pk) -> None:
        """
        Soft delete. A signed shipment is revoked first so its stock returns.

        Raises:
            DocumentError('NOT_FOUND')
        """
        with self.coordinator.atomic('shipment.delete', shipment_id=pk):
            document = self._get_for_update(pk)
            if document.is_signed:
                self.status_machine.apply(document, ShipmentStatus.REVOKED)
                self.store.update(document, ['status'])
            self.store.soft_delete(pk)

        self.logger.info("shipment.deleted", extra={"shipment_id": pk})
