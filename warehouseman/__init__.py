"""
Django Warehouseman — warehouse balances driven by supply and shipment documents.

Usage:
    from warehouseman import warehouse, WarehouseError

    warehouse.create_supply('IN-001', today, [ItemLine(flour.pk, kg.pk, 25)])
    warehouse.sign_shipment(shipment.pk)
    warehouse.get_balances([flour.pk])
"""

_default_warehouse = None


def _get_warehouse():
    global _default_warehouse
    if _default_warehouse is None:
        from warehouseman.service import Warehouse
        _default_warehouse = Warehouse()
    return _default_warehouse


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'warehouse':
        return _get_warehouse()
    elif name == 'Warehouse':
        from warehouseman.service import Warehouse
        return Warehouse
    elif name == 'ItemLine':
        from warehouseman.services.reconciler import ItemLine
        return ItemLine
    elif name == 'DocumentFilter':
        from warehouseman.services.documents import DocumentFilter
        return DocumentFilter
    elif name in ('WarehouseError', 'StockError', 'DocumentError',
                  'CatalogError', 'TransactionError'):
        from warehouseman import exceptions
        return getattr(exceptions, name)
    elif name in ('Balance', 'Movement', 'Resource', 'UnitOfMeasure', 'Client',
                  'SupplyDocument', 'SupplyItem', 'ShipmentDocument',
                  'ShipmentItem', 'ShipmentStatus'):
        from warehouseman import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'warehouse',
    'Warehouse',
    'ItemLine',
    'DocumentFilter',
    'WarehouseError',
    'StockError',
    'DocumentError',
    'CatalogError',
    'TransactionError',
    'Balance',
    'Movement',
    'Resource',
    'UnitOfMeasure',
    'Client',
    'SupplyDocument',
    'SupplyItem',
    'ShipmentDocument',
    'ShipmentItem',
    'ShipmentStatus',
]

__version__ = '0.1.0'
