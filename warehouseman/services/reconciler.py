"""
Document reconciler — diff a document's lines into ledger deltas.

Pure computation over two line collections keyed by line id. The only
outside call is the injected lookup that tells whether resources and
units can still be picked.

Sign convention:
    sign=+1 (supply):   lines add stock
    sign=-1 (shipment): lines take stock
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable

from warehouseman.exceptions import DocumentError, StockError
from warehouseman.services.ledger import Adjustment, fits_quantity, net_adjustments


SUPPLY = 1
SHIPMENT = -1


@dataclass(frozen=True)
class ItemLine:
    """
    Desired state of one document line.

    id=None means a new line; otherwise it must be the id of a line the
    document already has.
    """

    resource_id: int
    unit_id: int
    quantity: Decimal
    id: int | None = None

    def __post_init__(self):
        if not isinstance(self.quantity, Decimal):
            object.__setattr__(self, 'quantity', Decimal(str(self.quantity)))

    @classmethod
    def from_item(cls, item) -> 'ItemLine':
        return cls(item.resource_id, item.unit_id, item.quantity, item.pk)

    @property
    def key(self) -> tuple[int, int]:
        return (self.resource_id, self.unit_id)


@dataclass
class Reconciliation:
    """Outcome of a diff: what to write and what the ledger must absorb."""

    inserts: list[ItemLine] = field(default_factory=list)
    updates: list[tuple[Any, ItemLine]] = field(default_factory=list)
    removals: list[Any] = field(default_factory=list)
    unchanged: list[Any] = field(default_factory=list)
    adjustments: list[Adjustment] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.inserts or self.updates or self.removals)


class DocumentReconciler:
    """Turns current lines + desired lines into inserts/updates/removals."""

    def __init__(self, lookup=None):
        if lookup is None:
            from warehouseman.services.catalog import CatalogLookup
            lookup = CatalogLookup()
        self.lookup = lookup

    def reconcile(self, current: Iterable, desired: Iterable[ItemLine],
                  sign: int = SUPPLY, check_selectable: bool = True) -> Reconciliation:
        """
        Diff current lines (items with id, resource_id, unit_id, quantity)
        against desired ItemLines.

        With check_selectable=False the caller runs ensure_selectable()
        itself, e.g. after deciding the document may be edited at all.

        Raises:
            StockError('INVALID_QUANTITY'): desired quantity <= 0, finer
                than 0.001 or too large to store
            DocumentError('ITEM_NOT_FOUND'): desired id unknown or repeated
            DocumentError('ARCHIVED_ENTITY_USED'): new/changed line uses an
                archived resource or unit
        """
        if sign not in (SUPPLY, SHIPMENT):
            raise ValueError(f"sign must be +1 or -1, got {sign!r}")

        current_by_id = {item.id: item for item in current}
        result = Reconciliation()
        seen = set()

        for line in desired:
            if not fits_quantity(line.quantity) or line.quantity <= 0:
                raise StockError(
                    'INVALID_QUANTITY',
                    resource_id=line.resource_id,
                    unit_id=line.unit_id,
                    requested=line.quantity,
                )

            if line.id is None:
                result.inserts.append(line)
                continue

            old = current_by_id.get(line.id)
            if old is None or line.id in seen:
                raise DocumentError('ITEM_NOT_FOUND', item_id=line.id)
            seen.add(line.id)

            if (old.resource_id, old.unit_id, old.quantity) == (
                    line.resource_id, line.unit_id, line.quantity):
                result.unchanged.append(old)
            else:
                result.updates.append((old, line))

        result.removals = [
            item for item_id, item in current_by_id.items() if item_id not in seen
        ]

        if check_selectable:
            self.ensure_selectable(result)

        result.adjustments = net_adjustments(self._deltas(result, sign))
        return result

    def ensure_selectable(self, result: Reconciliation) -> None:
        """Lines that introduce a resource/unit must not use archived ones."""
        introduced = result.inserts + [
            line for old, line in result.updates
            if (old.resource_id, old.unit_id) != line.key
        ]
        if introduced:
            self.lookup.ensure_selectable(
                {line.resource_id for line in introduced},
                {line.unit_id for line in introduced},
            )

    @staticmethod
    def _deltas(result: Reconciliation, sign: int) -> list[Adjustment]:
        deltas = []
        for item in result.removals:
            deltas.append(Adjustment(item.resource_id, item.unit_id, -sign * item.quantity))

        for line in result.inserts:
            deltas.append(Adjustment(line.resource_id, line.unit_id, sign * line.quantity))

        for old, line in result.updates:
            if (old.resource_id, old.unit_id) == line.key:
                deltas.append(Adjustment(
                    line.resource_id, line.unit_id, sign * (line.quantity - old.quantity)
                ))
            else:
                # Key change: old key loses the old line, new key gets the new one
                deltas.append(Adjustment(old.resource_id, old.unit_id, -sign * old.quantity))
                deltas.append(Adjustment(line.resource_id, line.unit_id, sign * line.quantity))
        return deltas
