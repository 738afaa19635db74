"""
Warehouse services — the reconciliation engine and the document services built on it.

    from warehouseman.services import BalanceLedger, DocumentReconciler, ShipmentStatusMachine
"""

from warehouseman.services.catalog import Catalog, CatalogLookup
from warehouseman.services.documents import DocumentFilter
from warehouseman.services.ledger import Adjustment, BalanceLedger
from warehouseman.services.reconciler import DocumentReconciler, ItemLine, Reconciliation
from warehouseman.services.shipments import ShipmentDocuments
from warehouseman.services.status import ShipmentStatusMachine
from warehouseman.services.supplies import SupplyDocuments
from warehouseman.services.transactions import TransactionCoordinator

__all__ = [
    'Adjustment',
    'BalanceLedger',
    'Catalog',
    'CatalogLookup',
    'DocumentFilter',
    'DocumentReconciler',
    'ItemLine',
    'Reconciliation',
    'ShipmentDocuments',
    'ShipmentStatusMachine',
    'SupplyDocuments',
    'TransactionCoordinator',
]
