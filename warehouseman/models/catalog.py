"""
Catalog models — Resource, UnitOfMeasure, Client.
"""

from django.db import models
from django.db.models import Q
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _

from warehouseman.models.base import SoftDeleteModel


class CatalogEntry(SoftDeleteModel):
    """
    Named, archivable reference entity.

    Archived entries stay valid for historical documents but cannot be
    picked for new lines or new client references.
    """

    name = models.CharField(
        max_length=200,
        verbose_name=_('Name'),
    )
    is_archived = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name=_('Archived'),
    )

    class Meta:
        abstract = True
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                Lower('name'),
                condition=Q(is_deleted=False),
                name='%(app_label)s_%(class)s_unique_name',
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Resource(CatalogEntry):
    """Anything the warehouse stores."""

    class Meta(CatalogEntry.Meta):
        verbose_name = _('Resource')
        verbose_name_plural = _('Resources')


class UnitOfMeasure(CatalogEntry):
    """Unit a resource is counted in (kg, pcs, l...)."""

    class Meta(CatalogEntry.Meta):
        verbose_name = _('Unit of measure')
        verbose_name_plural = _('Units of measure')


class Client(CatalogEntry):
    """Recipient of shipments."""

    address = models.CharField(
        max_length=255,
        blank=True,
        default='',
        verbose_name=_('Address'),
    )

    class Meta(CatalogEntry.Meta):
        verbose_name = _('Client')
        verbose_name_plural = _('Clients')
