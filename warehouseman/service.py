"""
Warehouse Service — The single public interface for warehouse operations.

Usage:
    from warehouseman import warehouse, WarehouseError

    supply = warehouse.create_supply('IN-001', today, [ItemLine(flour.pk, kg.pk, 25)])
    shipment = warehouse.create_shipment('OUT-001', client.pk, today, [ItemLine(flour.pk, kg.pk, 5)])
    warehouse.change_shipment_status(shipment.pk, ShipmentStatus.SIGNED)
    warehouse.get_balances([flour.pk], [kg.pk])  # 20 kg
"""

import logging
from datetime import date
from typing import Iterable

from warehouseman.conf import warehouseman_settings
from warehouseman.models.catalog import Client, Resource, UnitOfMeasure
from warehouseman.models.documents import ShipmentDocument, SupplyDocument
from warehouseman.models.enums import ShipmentStatus
from warehouseman.services.catalog import Catalog, CatalogLookup
from warehouseman.services.documents import DocumentFilter
from warehouseman.services.ledger import BalanceLedger
from warehouseman.services.reconciler import DocumentReconciler, ItemLine
from warehouseman.services.shipments import ShipmentDocuments
from warehouseman.services.status import ShipmentStatusMachine
from warehouseman.services.supplies import SupplyDocuments
from warehouseman.services.transactions import TransactionCoordinator


class Warehouse:
    """
    Single interface for all warehouse operations.

    Parameter convention: (id, header fields..., items)
    Items are ItemLine values; a line with an id edits the existing line,
    a line without one is new.

    One logger and one TransactionCoordinator are shared by every
    component, so document operations never nest.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger(warehouseman_settings.LOGGER_NAME)

        self.ledger = BalanceLedger(logger=self.logger)
        self.lookup = CatalogLookup()
        self.reconciler = DocumentReconciler(lookup=self.lookup)
        self.status_machine = ShipmentStatusMachine(self.ledger, logger=self.logger)
        self.coordinator = TransactionCoordinator(logger=self.logger)

        self.supplies = SupplyDocuments(
            self.ledger, self.reconciler, self.coordinator, logger=self.logger,
        )
        self.shipments = ShipmentDocuments(
            self.ledger, self.reconciler, self.status_machine, self.coordinator,
            logger=self.logger,
        )

        self.resources = Catalog(Resource, logger=self.logger)
        self.units = Catalog(UnitOfMeasure, logger=self.logger)
        self.clients = Catalog(Client, logger=self.logger)

    # ══════════════════════════════════════════════════════════════
    # BALANCES
    # ══════════════════════════════════════════════════════════════

    def get_balances(self, resource_ids: Iterable = (), unit_ids: Iterable = ()):
        """Balances filtered by resources and/or units (empty = all)."""
        return list(self.ledger.list_balances(resource_ids, unit_ids))

    # ══════════════════════════════════════════════════════════════
    # SUPPLIES
    # ══════════════════════════════════════════════════════════════

    def get_supply(self, pk) -> SupplyDocument:
        return self.supplies.get(pk)

    def list_supplies(self, document_filter: DocumentFilter | None = None):
        return self.supplies.list(document_filter)

    def create_supply(self, number: str, date: date,
                      items: Iterable[ItemLine] = ()) -> SupplyDocument:
        """
        Receive stock.

        Raises:
            DocumentError: DUPLICATE_NUMBER, ARCHIVED_ENTITY_USED
        """
        return self.supplies.create(number, date, items)

    def update_supply(self, pk, number: str, date: date,
                      items: Iterable[ItemLine] | None = None) -> SupplyDocument:
        """
        items=None keeps the current lines.

        Raises:
            DocumentError: NOT_FOUND, DUPLICATE_NUMBER, ARCHIVED_ENTITY_USED
            StockError: INSUFFICIENT_STOCK
        """
        return self.supplies.update(pk, number, date, items)

    def delete_supply(self, pk) -> None:
        """
        Raises:
            DocumentError: NOT_FOUND
            StockError: INSUFFICIENT_STOCK
        """
        self.supplies.delete(pk)

    # ══════════════════════════════════════════════════════════════
    # SHIPMENTS
    # ══════════════════════════════════════════════════════════════

    def get_shipment(self, pk) -> ShipmentDocument:
        return self.shipments.get(pk)

    def list_shipments(self, document_filter: DocumentFilter | None = None):
        return self.shipments.list(document_filter)

    def create_shipment(self, number: str, client_id, date: date,
                        items: Iterable[ItemLine]) -> ShipmentDocument:
        """
        Draft a shipment. No stock moves until it is signed.

        Raises:
            DocumentError: DUPLICATE_NUMBER, EMPTY_DOCUMENT, ARCHIVED_CLIENT,
                ARCHIVED_ENTITY_USED
        """
        return self.shipments.create(number, client_id, date, items)

    def update_shipment(self, pk, number: str, client_id, date: date,
                        items: Iterable[ItemLine] | None = None) -> ShipmentDocument:
        """
        Raises:
            DocumentError: NOT_FOUND, DUPLICATE_NUMBER, SIGNED_DOCUMENT_IMMUTABLE,
                REVOKED_DOCUMENT_IMMUTABLE, ARCHIVED_CLIENT, ARCHIVED_ENTITY_USED
        """
        return self.shipments.update(pk, number, client_id, date, items)

    def change_shipment_status(self, pk, status: str) -> ShipmentDocument:
        """
        Raises:
            DocumentError: NOT_FOUND, INVALID_TRANSITION
            StockError: INSUFFICIENT_STOCK
        """
        return self.shipments.change_status(pk, status)

    def sign_shipment(self, pk) -> ShipmentDocument:
        return self.change_shipment_status(pk, ShipmentStatus.SIGNED)

    def revoke_shipment(self, pk) -> ShipmentDocument:
        return self.change_shipment_status(pk, ShipmentStatus.REVOKED)

    def delete_shipment(self, pk) -> None:
        """Soft delete; a signed shipment is revoked first."""
        self.shipments.delete(pk)
