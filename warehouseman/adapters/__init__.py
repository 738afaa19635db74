"""
Warehouseman Adapters.

Implementations of protocols for external systems.
"""

from warehouseman.adapters.orm import OrmStore

__all__ = [
    "OrmStore",
]
