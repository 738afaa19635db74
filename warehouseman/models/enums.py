"""
Enums for Warehouseman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ShipmentStatus(models.TextChoices):
    """
    Shipment lifecycle status.

    DRAFT:   Initial. Items editable, stock untouched.
    SIGNED:  Stock consumed. Items frozen.
    REVOKED: Stock returned. Terminal.
    """
    DRAFT = 'draft', _('Draft')
    SIGNED = 'signed', _('Signed')
    REVOKED = 'revoked', _('Revoked')
