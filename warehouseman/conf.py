"""
Warehouseman configuration.

Usage in settings.py:
    WAREHOUSEMAN = {
        "LOGGER_NAME": "warehouseman",
        "LOCK_BALANCES": True,
        "SIGNED_HEADER_EDITABLE": True,
        "ALLOW_EMPTY_SUPPLY": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class WarehousemanSettings:
    """Warehouseman configuration settings."""

    # Logger handed to every component by the Warehouse facade
    LOGGER_NAME: str = "warehouseman"

    # Lock balance rows (select_for_update) while adjusting
    LOCK_BALANCES: bool = True

    # Number/date/client of a signed shipment may still change
    SIGNED_HEADER_EDITABLE: bool = True

    # Supplies may be saved without lines
    ALLOW_EMPTY_SUPPLY: bool = True


def get_warehouseman_settings() -> WarehousemanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "WAREHOUSEMAN", {})
    return WarehousemanSettings(**{
        k: v for k, v in user_settings.items()
        if k in WarehousemanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_warehouseman_settings(), name)


warehouseman_settings = _LazySettings()
