"""
Soft-delete base for catalog entries and documents.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class SoftDeleteQuerySet(models.QuerySet):
    """QuerySet with soft-delete aware filters."""

    def alive(self):
        """Rows not soft-deleted."""
        return self.filter(is_deleted=False)

    def deleted(self):
        return self.filter(is_deleted=True)


class SoftDeleteModel(models.Model):
    """
    Abstract model with soft delete.

    Soft-deleted rows stay in the table for history but are invisible
    to every lookup that goes through alive().
    """

    is_deleted = models.BooleanField(
        default=False,
        db_index=True,
        verbose_name=_('Deleted'),
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Deleted at'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    def mark_deleted(self) -> None:
        """Flag as deleted. Caller saves."""
        if self.is_deleted:
            raise ValueError("Cannot delete a deleted entity.")
        self.is_deleted = True
        self.deleted_at = timezone.now()
