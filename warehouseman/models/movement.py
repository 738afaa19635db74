"""
Movement model — Immutable journal of balance changes.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Movement(models.Model):
    """
    Immutable record of one applied balance change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Movements with inverse delta
    - Updates Balance.quantity atomically on save()

    This is the ONLY model that changes quantity.
    """

    balance = models.ForeignKey(
        'warehouseman.Balance',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Balance'),
    )

    delta = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Delta'),
        help_text=_('Positive = in, negative = out'),
    )

    # Triggering document (supply, shipment)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reference type'),
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference = GenericForeignKey('reference_type', 'reference_id')

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Reason'),
        help_text=_('Required. E.g. "supply.created", "shipment.signed"'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))

    class Meta:
        verbose_name = _('Movement')
        verbose_name_plural = _('Movements')
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['balance', 'timestamp'], name='wm_movement_balance_ts_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='wm_movement_reference_idx'),
        ]

    def save(self, *args, **kwargs):
        """Save movement and update the balance cache atomically."""
        if self.pk:
            raise ValueError(
                "Movements are immutable. "
                "Create a new Movement with the inverse delta instead."
            )

        if not self.reason:
            raise ValueError("Reason is required")

        with transaction.atomic():
            super().save(*args, **kwargs)

            from warehouseman.models.balance import Balance

            Balance.objects.filter(pk=self.balance_id).update(
                quantity=F('quantity') + self.delta,
                updated_at=timezone.now()
            )

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movements are immutable. "
            "To reverse, create a new Movement with the inverse delta."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.reason}"
