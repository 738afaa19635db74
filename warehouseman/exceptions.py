"""
Exceptions for Warehouseman.

All expected failures are WarehouseError subclasses with a structured code
for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class WarehouseError(Exception):
    """
    Base structured exception.

    Usage:
        try:
            warehouse.change_shipment_status(shipment.pk, ShipmentStatus.SIGNED)
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} left")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }


class StockError(WarehouseError):
    """Ledger errors: balances and quantities."""

    _default_messages = {
        'INSUFFICIENT_STOCK': 'Not enough stock for this operation',
        'BALANCE_NOT_FOUND': 'No balance to decrement',
        'INVALID_QUANTITY': 'Quantity must be positive',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def required(self) -> Decimal:
        """Shortcut for data['required']."""
        return self.data.get('required', Decimal('0'))


class DocumentError(WarehouseError):
    """Supply and shipment document errors."""

    _default_messages = {
        'NOT_FOUND': 'Document not found',
        'ITEM_NOT_FOUND': 'Line item does not belong to this document',
        'DUPLICATE_NUMBER': 'Document number already exists',
        'ARCHIVED_ENTITY_USED': 'Archived resource or unit cannot be used',
        'ARCHIVED_CLIENT': 'Archived client cannot be used',
        'EMPTY_DOCUMENT': 'Document has no line items',
        'SIGNED_DOCUMENT_IMMUTABLE': 'Items of a signed document cannot be edited',
        'REVOKED_DOCUMENT_IMMUTABLE': 'A revoked document cannot be edited',
        'INVALID_TRANSITION': 'Status transition not allowed',
    }


class CatalogError(WarehouseError):
    """Resource, unit and client errors."""

    _default_messages = {
        'NOT_FOUND': 'Entry not found',
        'DUPLICATE_NAME': 'Name already exists',
        'IN_USE': 'Entry is in use and cannot be deleted, archive it instead',
    }


class TransactionError(WarehouseError):
    """Transaction coordination errors."""

    _default_messages = {
        'NESTED_TRANSACTION': 'A transaction is already open for this operation',
    }
