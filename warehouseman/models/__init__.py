"""
Warehouseman Models.

Core models for warehouse inventory:
- Resource, UnitOfMeasure, Client: archivable catalog entries
- Balance: quantity cache per (resource, unit)
- Movement: immutable journal of balance changes
- SupplyDocument / SupplyItem: stock in
- ShipmentDocument / ShipmentItem: stock out, gated by status
"""

from warehouseman.models.balance import Balance
from warehouseman.models.catalog import Client, Resource, UnitOfMeasure
from warehouseman.models.documents import (
    ShipmentDocument,
    ShipmentItem,
    SupplyDocument,
    SupplyItem,
)
from warehouseman.models.enums import ShipmentStatus
from warehouseman.models.movement import Movement

__all__ = [
    'ShipmentStatus',
    'Resource',
    'UnitOfMeasure',
    'Client',
    'Balance',
    'Movement',
    'SupplyDocument',
    'SupplyItem',
    'ShipmentDocument',
    'ShipmentItem',
]
