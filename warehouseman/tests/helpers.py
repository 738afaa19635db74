"""
Small helpers shared by the test modules.
"""

from decimal import Decimal

from warehouseman.services.reconciler import ItemLine


def balance_of(wh, resource, unit) -> Decimal:
    """Balance as a number, missing row = 0."""
    return wh.ledger.get_balance(resource.pk, unit.pk) or Decimal('0')


def lines_of(document) -> list[ItemLine]:
    """Current lines of a document as editable ItemLines."""
    return [ItemLine.from_item(item) for item in document.items.all()]
