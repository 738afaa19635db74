"""
Balance ledger — read, validate and apply batches of adjustments.

Every change goes through adjust_batch(), which journals a Movement per
key. Movement.save() keeps Balance.quantity in sync.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from django.contrib.contenttypes.models import ContentType
from django.db import transaction

from warehouseman.conf import warehouseman_settings
from warehouseman.exceptions import StockError
from warehouseman.models.balance import Balance
from warehouseman.models.movement import Movement


# Balance, Movement and item columns: DecimalField(max_digits=12, decimal_places=3)
QUANTITY_STEP = Decimal('0.001')
QUANTITY_LIMIT = Decimal('1000000000')


def fits_quantity(value) -> bool:
    """Can the value be stored in a quantity column without rounding?"""
    value = Decimal(value)
    return (
        value.is_finite()
        and abs(value) < QUANTITY_LIMIT
        and value == value.quantize(QUANTITY_STEP)
    )


@dataclass(frozen=True)
class Adjustment:
    """Signed quantity change for one (resource, unit) key."""

    resource_id: int
    unit_id: int
    delta: Decimal

    @property
    def key(self) -> tuple[int, int]:
        return (self.resource_id, self.unit_id)


def net_adjustments(adjustments: Iterable[Adjustment]) -> list[Adjustment]:
    """
    Sum deltas per key.

    Keys keep the order of their first appearance. Keys netting to zero
    are dropped, so the result is the same whatever the input order.
    """
    totals: dict[tuple[int, int], Decimal] = {}
    for adj in adjustments:
        totals[adj.key] = totals.get(adj.key, Decimal('0')) + Decimal(adj.delta)
    return [
        Adjustment(resource_id, unit_id, delta)
        for (resource_id, unit_id), delta in totals.items()
        if delta != 0
    ]


class BalanceLedger:
    """
    Authoritative quantity per (resource, unit).

    Concurrency:
        - adjust_batch() runs under transaction.atomic()
        - Balance rows are locked with select_for_update() (LOCK_BALANCES)
          and re-checked after the lock, so validate_batch() is only an
          early, friendlier rejection
    """

    def __init__(self, logger=None, lock_rows: bool | None = None):
        self.logger = logger or logging.getLogger('warehouseman')
        self._lock_rows = lock_rows

    @property
    def lock_rows(self) -> bool:
        if self._lock_rows is None:
            return warehouseman_settings.LOCK_BALANCES
        return self._lock_rows

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    def get_balance(self, resource_id, unit_id) -> Decimal | None:
        """Current quantity, None when the key has no balance row (zero)."""
        return (
            Balance.objects.for_key(resource_id, unit_id)
            .values_list('quantity', flat=True)
            .first()
        )

    def list_balances(self, resource_ids: Iterable = (), unit_ids: Iterable = ()):
        """Balances filtered by resources and/or units (empty = all)."""
        qs = Balance.objects.select_related('resource', 'unit')
        resource_ids = list(resource_ids)
        unit_ids = list(unit_ids)
        if resource_ids:
            qs = qs.filter(resource_id__in=resource_ids)
        if unit_ids:
            qs = qs.filter(unit_id__in=unit_ids)
        return qs

    # ══════════════════════════════════════════════════════════════
    # VALIDATION
    # ══════════════════════════════════════════════════════════════

    def validate_batch(self, adjustments: Iterable[Adjustment]) -> None:
        """
        Check every negative adjustment has cover.

        Each adjustment is checked on its own against the persisted
        balance, ignoring the other adjustments of the batch.

        Raises:
            StockError('INSUFFICIENT_STOCK'): available + delta < 0
        """
        for adj in adjustments:
            if adj.delta >= 0:
                continue

            available = self.get_balance(adj.resource_id, adj.unit_id) or Decimal('0')
            if available + adj.delta < 0:
                self.logger.warning(
                    "ledger.insufficient",
                    extra={
                        "resource_id": adj.resource_id,
                        "unit_id": adj.unit_id,
                        "available": str(available),
                        "required": str(-adj.delta),
                    },
                )
                raise StockError(
                    'INSUFFICIENT_STOCK',
                    resource_id=adj.resource_id,
                    unit_id=adj.unit_id,
                    available=available,
                    required=-adj.delta,
                )

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS
    # ══════════════════════════════════════════════════════════════

    def adjust_batch(self, adjustments: Iterable[Adjustment], reason: str,
                     reference=None, **metadata) -> list[Balance]:
        """
        Apply adjustments, one Movement per key.

        Deltas of the same key are summed first. A missing balance is
        created for a positive delta only.

        Returns:
            Touched balances, refreshed

        Raises:
            StockError('BALANCE_NOT_FOUND'): negative delta on a missing key
            StockError('INSUFFICIENT_STOCK'): key would drop below zero
            StockError('INVALID_QUANTITY'): delta finer than 0.001 or too large

        Runs in its own savepoint: a failing key undoes the keys
        applied before it.
        """
        net = net_adjustments(adjustments)
        if not net:
            return []

        for adj in net:
            if not fits_quantity(adj.delta):
                raise StockError(
                    'INVALID_QUANTITY',
                    resource_id=adj.resource_id,
                    unit_id=adj.unit_id,
                    requested=adj.delta,
                )

        reference_type = None
        reference_id = None
        if reference is not None:
            reference_type = ContentType.objects.get_for_model(reference)
            reference_id = reference.pk

        touched = []
        with transaction.atomic():
            for adj in net:
                qs = Balance.objects.for_key(adj.resource_id, adj.unit_id)
                if self.lock_rows:
                    qs = qs.select_for_update()
                balance = qs.order_by().first()

                if balance is None:
                    if adj.delta < 0:
                        raise StockError(
                            'BALANCE_NOT_FOUND',
                            resource_id=adj.resource_id,
                            unit_id=adj.unit_id,
                            available=Decimal('0'),
                            required=-adj.delta,
                        )
                    balance = Balance.objects.create(
                        resource_id=adj.resource_id,
                        unit_id=adj.unit_id,
                    )
                elif balance.quantity + adj.delta < 0:
                    raise StockError(
                        'INSUFFICIENT_STOCK',
                        resource_id=adj.resource_id,
                        unit_id=adj.unit_id,
                        available=balance.quantity,
                        required=-adj.delta,
                    )

                Movement.objects.create(
                    balance=balance,
                    delta=adj.delta,
                    reason=reason,
                    reference_type=reference_type,
                    reference_id=reference_id,
                    metadata=metadata,
                )
                balance.refresh_from_db()
                touched.append(balance)

            self.logger.info(
                "ledger.adjusted",
                extra={
                    "reason": reason,
                    "reference_id": reference_id,
                    "keys": len(net),
                },
            )
        return touched
