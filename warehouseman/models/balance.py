"""
Balance model — quantity on hand per (resource, unit).
"""

import logging
from decimal import Decimal

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _


class BalanceQuerySet(models.QuerySet):
    """QuerySet with helper filters for balances."""

    def for_key(self, resource_id, unit_id):
        return self.filter(resource_id=resource_id, unit_id=unit_id)


class Balance(models.Model):
    """
    Quantity of one resource, counted in one unit.

    Rules:
    - One row per (resource, unit)
    - quantity is a cache of the sum of its Movements
    - quantity never goes below zero (engine check + DB constraint)
    - Only the ledger changes quantity
    """

    resource = models.ForeignKey(
        'warehouseman.Resource',
        on_delete=models.PROTECT,
        related_name='balances',
        verbose_name=_('Resource'),
    )
    unit = models.ForeignKey(
        'warehouseman.UnitOfMeasure',
        on_delete=models.PROTECT,
        related_name='balances',
        verbose_name=_('Unit'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BalanceQuerySet.as_manager()

    class Meta:
        verbose_name = _('Balance')
        verbose_name_plural = _('Balances')
        ordering = ['resource__name', 'unit__name']
        constraints = [
            models.UniqueConstraint(
                fields=['resource', 'unit'],
                name='unique_balance_key',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='balance_quantity_non_negative',
            ),
        ]

    def recalculate(self, logger=None) -> Decimal:
        """
        Recalculate quantity from Movements.

        Use for integrity audits and correction after a detected
        inconsistency.

        Returns:
            New calculated quantity
        """
        total = self.movements.aggregate(
            t=Coalesce(Sum('delta'), Decimal('0'))
        )['t']

        if total != self.quantity:
            old = self.quantity
            self.quantity = total
            self.save(update_fields=['quantity', 'updated_at'])

            (logger or logging.getLogger('warehouseman')).warning(
                "ledger.recalculated",
                extra={
                    "balance_id": self.pk,
                    "old": str(old),
                    "new": str(total),
                    "diff": str(total - old),
                },
            )

        return total

    def __str__(self) -> str:
        return f"{self.resource} [{self.unit}]: {self.quantity}"
