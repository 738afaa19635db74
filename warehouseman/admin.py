"""
Warehouseman Admin.

Provides views for back-office work and production debugging:
- Resource / UnitOfMeasure / Client: editable, archive/unarchive actions
- Balance: read-only (resource, unit, quantity)
- Movement: read-only audit trail (timestamp, delta, reason)
- SupplyDocument: read-only with items
- ShipmentDocument: read-only with items, "sign" and "revoke" actions
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from warehouseman.exceptions import WarehouseError
from warehouseman.models import (
    Balance,
    Client,
    Movement,
    Resource,
    ShipmentDocument,
    ShipmentItem,
    ShipmentStatus,
    SupplyDocument,
    SupplyItem,
    UnitOfMeasure,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """Rows only change through the Warehouse service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CATALOG ADMIN
# =========================================================================

class CatalogAdmin(admin.ModelAdmin):
    """Catalog entry admin — editable, soft delete via the service."""

    catalog = ''

    list_display = ['name', 'is_archived', 'updated_at']
    list_filter = ['is_archived']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at']
    exclude = ['is_deleted', 'deleted_at']
    actions = ['archive_entries', 'unarchive_entries']

    def get_queryset(self, request):
        return super().get_queryset(request).alive()

    def has_delete_permission(self, request, obj=None):
        return False

    def _run(self, request, queryset, method, done_message):
        from warehouseman import warehouse

        service = getattr(warehouse, self.catalog)
        count = 0
        for entry in queryset:
            try:
                getattr(service, method)(entry.pk)
                count += 1
            except WarehouseError as exc:
                logger.warning("%s: failed for %s: %s", method, entry.pk, exc.code)
                self.message_user(request, f"{entry}: {exc.message}", level=messages.ERROR)

        self.message_user(request, done_message.format(count=count))

    @admin.action(description=_('Archive selected entries'))
    def archive_entries(self, request, queryset):
        self._run(request, queryset, 'archive', _('{count} entry(ies) archived.'))

    @admin.action(description=_('Unarchive selected entries'))
    def unarchive_entries(self, request, queryset):
        self._run(request, queryset, 'unarchive', _('{count} entry(ies) unarchived.'))


@admin.register(Resource)
class ResourceAdmin(CatalogAdmin):
    catalog = 'resources'


@admin.register(UnitOfMeasure)
class UnitOfMeasureAdmin(CatalogAdmin):
    catalog = 'units'


@admin.register(Client)
class ClientAdmin(CatalogAdmin):
    catalog = 'clients'

    list_display = ['name', 'address', 'is_archived', 'updated_at']
    search_fields = ['name', 'address']


# =========================================================================
# BALANCE ADMIN (read-only)
# =========================================================================

@admin.register(Balance)
class BalanceAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Balance admin — read-only. Quantities only change via the ledger."""

    list_display = ['resource', 'unit', 'quantity', 'updated_at']
    list_filter = ['unit']
    search_fields = ['resource__name']
    list_select_related = ['resource', 'unit']


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Movement)
class MovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Movement admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'balance', 'delta', 'reason']
    list_filter = ['timestamp', 'reason']
    search_fields = ['reason']
    date_hierarchy = 'timestamp'


# =========================================================================
# DOCUMENT ADMIN (read-only)
# =========================================================================

class SupplyItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = SupplyItem
    fields = ['resource', 'unit', 'quantity']
    extra = 0


class ShipmentItemInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = ShipmentItem
    fields = ['resource', 'unit', 'quantity']
    extra = 0


@admin.register(SupplyDocument)
class SupplyDocumentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['number', 'date', 'created_at']
    search_fields = ['number']
    date_hierarchy = 'date'
    inlines = [SupplyItemInline]

    def get_queryset(self, request):
        return super().get_queryset(request).alive()


@admin.register(ShipmentDocument)
class ShipmentDocumentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Shipment admin — read-only with sign/revoke actions."""

    list_display = ['number', 'date', 'client', 'status']
    list_filter = ['status']
    search_fields = ['number', 'client__name']
    date_hierarchy = 'date'
    inlines = [ShipmentItemInline]
    actions = ['sign_shipments', 'revoke_shipments']

    def get_queryset(self, request):
        return super().get_queryset(request).alive().select_related('client')

    def _change_status(self, request, queryset, status):
        from warehouseman import warehouse

        count = 0
        for shipment in queryset:
            try:
                warehouse.change_shipment_status(shipment.pk, status)
                count += 1
            except WarehouseError as exc:
                logger.warning("change_status: failed for %s: %s", shipment.number, exc.code)
                self.message_user(request, f"{shipment.number}: {exc.message}", level=messages.ERROR)
        return count

    @admin.action(description=_('Sign selected shipments'))
    def sign_shipments(self, request, queryset):
        count = self._change_status(request, queryset, ShipmentStatus.SIGNED)
        self.message_user(request, _('{count} shipment(s) signed.').format(count=count))

    @admin.action(description=_('Revoke selected shipments'))
    def revoke_shipments(self, request, queryset):
        count = self._change_status(request, queryset, ShipmentStatus.REVOKED)
        self.message_user(request, _('{count} shipment(s) revoked.').format(count=count))
