"""
Core models - shared base classes and utilities.
"""

from django.db import models
from django.utils import timezone


class TimestampedModel(models.Model):
    """
    Abstract base model with created_at/updated_at timestamps.

    All ledger entities should inherit from this or TenantScopedModel.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):
    """QuerySet whose bulk delete() flags rows instead of removing them."""

    def delete(self) -> tuple[int, dict[str, int]]:  # type: ignore[override]
        """Soft delete every row in the queryset."""
        now = timezone.now()
        count = self.update(deleted_at=now, updated_at=now)
        return count, {self.model._meta.label: count}


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):  # type: ignore[misc]
    """Default manager - hides soft-deleted rows."""

    def get_queryset(self) -> SoftDeleteQuerySet:
        return super().get_queryset().filter(deleted_at__isnull=True)


class SoftDeleteAllManager(models.Manager.from_queryset(SoftDeleteQuerySet)):  # type: ignore[misc]
    """Manager that sees every row, deleted or not."""


class SoftDeleteMixin(models.Model):
    """
    Soft delete support.

    Rows are never physically removed by the ledger; deleted_at marks them.
    `objects` excludes flagged rows, `all_objects` includes them.

    Requires an `updated_at` field on the concrete model (see TimestampedModel).
    """

    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = SoftDeleteManager()
    all_objects = SoftDeleteAllManager()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Flag the row as deleted. Default managers stop returning it."""
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])


class LedgerModel(SoftDeleteMixin, TimestampedModel):
    """Base for every ledger entity: timestamps plus soft delete."""

    class Meta:
        abstract = True


class TenantScopedModel(LedgerModel):
    """
    Abstract base model for all organization-scoped entities.

    Provides:
    - Organization FK (the tenant scoping root)
    - Timestamps and soft delete from LedgerModel

    Usage:
        class SubscriptionPlan(TenantScopedModel):
            name = models.CharField(max_length=255)
    """

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.PROTECT,
        related_name="%(class)s_set",
    )

    class Meta:
        abstract = True
