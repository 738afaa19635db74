"""Django app configuration for Warehouseman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class WarehousemanConfig(AppConfig):
    """Configuration for Warehouseman app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "warehouseman"
    verbose_name = _("Warehouse")
