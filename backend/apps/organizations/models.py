"""
Organizations models - multi-tenancy foundation.
"""

from django.db import models

from apps.core.models import LedgerModel


class Organization(LedgerModel):
    """
    Tenant root.

    Every user, plan, subscription and invoice carries this organization's id,
    and every scoped operation compares it with the caller's organization.
    """

    name = models.CharField(
        max_length=255,
        unique=True,
        help_text="Globally unique organization name",
    )
    billing_email = models.EmailField(help_text="Billing contact address")

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name
