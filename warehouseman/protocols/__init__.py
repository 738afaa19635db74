"""
Warehouseman Protocols.

Defines interfaces between the services and the persistence layer.
"""

from warehouseman.protocols.storage import EntityStore

__all__ = [
    "EntityStore",
]
