"""
Shipment status machine — which transitions exist and what they do to stock.

    DRAFT ──sign──► SIGNED ──revoke──► REVOKED

Same-status requests are no-ops. Everything else is INVALID_TRANSITION.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from warehouseman.conf import warehouseman_settings
from warehouseman.exceptions import DocumentError
from warehouseman.models.enums import ShipmentStatus
from warehouseman.services.ledger import Adjustment


@dataclass(frozen=True)
class Transition:
    """One allowed status change."""

    source: str
    target: str
    direction: int  # -1 stock leaves, +1 stock returns
    validate: bool
    event: str


TRANSITIONS = {
    (ShipmentStatus.DRAFT, ShipmentStatus.SIGNED): Transition(
        ShipmentStatus.DRAFT, ShipmentStatus.SIGNED,
        direction=-1, validate=True, event='shipment.signed',
    ),
    (ShipmentStatus.SIGNED, ShipmentStatus.REVOKED): Transition(
        ShipmentStatus.SIGNED, ShipmentStatus.REVOKED,
        direction=1, validate=False, event='shipment.revoked',
    ),
}


class ShipmentStatusMachine:
    """Gates ledger adjustments behind shipment status transitions."""

    def __init__(self, ledger, logger=None):
        self.ledger = ledger
        self.logger = logger or logging.getLogger('warehouseman')

    def plan(self, current: str, requested: str) -> Transition | None:
        """
        Resolve a requested status change.

        Returns:
            Transition to perform, None for a same-status no-op

        Raises:
            DocumentError('INVALID_TRANSITION')
        """
        if requested not in ShipmentStatus.values:
            raise DocumentError('INVALID_TRANSITION', current=current, requested=requested)

        if current == requested:
            return None

        transition = TRANSITIONS.get((current, requested))
        if transition is None:
            raise DocumentError('INVALID_TRANSITION', current=current, requested=requested)
        return transition

    @staticmethod
    def adjustments(transition: Transition, items: Iterable) -> list[Adjustment]:
        return [
            Adjustment(item.resource_id, item.unit_id, transition.direction * item.quantity)
            for item in items
        ]

    def apply(self, shipment, requested: str) -> Transition | None:
        """
        Move stock for the transition and set shipment.status.

        Runs inside the caller's transaction on a locked shipment; the
        caller persists the status.

        Raises:
            DocumentError('INVALID_TRANSITION')
            StockError('INSUFFICIENT_STOCK'): signing without cover
        """
        transition = self.plan(shipment.status, requested)
        if transition is None:
            self.logger.debug(
                "shipment.status_unchanged",
                extra={"shipment_id": shipment.pk, "status": shipment.status},
            )
            return None

        adjustments = self.adjustments(transition, shipment.items.all())
        if transition.validate:
            self.ledger.validate_batch(adjustments)
        self.ledger.adjust_batch(
            adjustments,
            reason=transition.event,
            reference=shipment,
            number=shipment.number,
        )

        shipment.status = transition.target
        self.logger.info(
            transition.event,
            extra={"shipment_id": shipment.pk, "from": transition.source, "to": transition.target},
        )
        return transition

    def ensure_editable(self, shipment, *, items_changed: bool, header_changed: bool) -> None:
        """
        Raises:
            DocumentError('REVOKED_DOCUMENT_IMMUTABLE'): any edit once revoked
            DocumentError('SIGNED_DOCUMENT_IMMUTABLE'): item edit while signed,
                or header edit while signed with SIGNED_HEADER_EDITABLE off
        """
        if shipment.is_revoked and (items_changed or header_changed):
            raise DocumentError('REVOKED_DOCUMENT_IMMUTABLE', shipment_id=shipment.pk)

        if not shipment.is_signed:
            return

        if items_changed:
            raise DocumentError('SIGNED_DOCUMENT_IMMUTABLE', shipment_id=shipment.pk)
        if header_changed and not warehouseman_settings.SIGNED_HEADER_EDITABLE:
            raise DocumentError('SIGNED_DOCUMENT_IMMUTABLE', shipment_id=shipment.pk)
