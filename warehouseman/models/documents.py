"""
Document models — supplies (stock in) and shipments (stock out).
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from warehouseman.models.base import SoftDeleteModel
from warehouseman.models.enums import ShipmentStatus


class Document(SoftDeleteModel):
    """Header shared by supply and shipment documents."""

    number = models.CharField(
        max_length=50,
        verbose_name=_('Number'),
    )
    date = models.DateField(
        db_index=True,
        verbose_name=_('Date'),
    )

    class Meta:
        abstract = True
        ordering = ['-date', 'number']
        constraints = [
            models.UniqueConstraint(
                fields=['number'],
                condition=Q(is_deleted=False),
                name='%(app_label)s_%(class)s_unique_number',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.number} ({self.date})"


class DocumentItem(models.Model):
    """
    One line of a document.

    The line id tells an existing line (being edited) from a new one
    during reconciliation.
    """

    resource = models.ForeignKey(
        'warehouseman.Resource',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Resource'),
    )
    unit = models.ForeignKey(
        'warehouseman.UnitOfMeasure',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Unit'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
    )

    class Meta:
        abstract = True
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='%(app_label)s_%(class)s_quantity_positive',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} {self.unit} {self.resource}"


class SupplyDocument(Document):
    """Incoming stock."""

    class Meta(Document.Meta):
        verbose_name = _('Supply')
        verbose_name_plural = _('Supplies')


class SupplyItem(DocumentItem):
    document = models.ForeignKey(
        SupplyDocument,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Supply'),
    )

    class Meta(DocumentItem.Meta):
        verbose_name = _('Supply item')
        verbose_name_plural = _('Supply items')


class ShipmentDocument(Document):
    """
    Outgoing stock.

    LIFECYCLE:

        ┌───────┐   sign    ┌────────┐   revoke   ┌─────────┐
        │ DRAFT │ ────────► │ SIGNED │ ─────────► │ REVOKED │
        └───────┘           └────────┘            └─────────┘

    Only the transitions drawn above move stock.
    """

    client = models.ForeignKey(
        'warehouseman.Client',
        on_delete=models.PROTECT,
        related_name='shipments',
        verbose_name=_('Client'),
    )
    status = models.CharField(
        max_length=20,
        choices=ShipmentStatus.choices,
        default=ShipmentStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Shipment')
        verbose_name_plural = _('Shipments')

    @property
    def is_signed(self) -> bool:
        return self.status == ShipmentStatus.SIGNED

    @property
    def is_revoked(self) -> bool:
        return self.status == ShipmentStatus.REVOKED


class ShipmentItem(DocumentItem):
    document = models.ForeignKey(
        ShipmentDocument,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Shipment'),
    )

    class Meta(DocumentItem.Meta):
        verbose_name = _('Shipment item')
        verbose_name_plural = _('Shipment items')
