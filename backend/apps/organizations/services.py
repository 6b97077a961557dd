"""
Organization directory services.

Creates tenants and builds the read-only organization billing summary.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import Sum

from apps.core.auth import CallerScope, ensure_same_organization
from apps.core.exceptions import BadRequestError, ConflictError, NotFoundError
from apps.core.logging import get_logger
from apps.events.services import publish_event
from apps.organizations.models import Organization

logger = get_logger(__name__)

SUMMARY_RECENT_LIMIT = 5


@dataclass
class OrgSummary:
    """Aggregate billing view of one organization."""

    organization: Organization
    total_users: int
    total_invoices: int
    gross_billed: Decimal
    latest_invoices: list
    recent_payments: list


def create_organization(name: str, billing_email: str) -> Organization:
    """
    Create a new organization.

    Raises:
        BadRequestError: name or billing email missing
        ConflictError: an organization with this name already exists
    """
    name = (name or "").strip()
    billing_email = (billing_email or "").strip()
    if not name:
        raise BadRequestError("Organization name is required")
    if not billing_email:
        raise BadRequestError("Billing email is required")

    if Organization.all_objects.filter(name=name).exists():
        raise ConflictError("Organization with this name already exists")

    try:
        with transaction.atomic():
            org = Organization.objects.create(name=name, billing_email=billing_email)
            publish_event(
                event_type="organization.created",
                aggregate=org,
                data={"name": org.name},
            )
    except IntegrityError:
        # Concurrent insert won the race
        raise ConflictError("Organization with this name already exists") from None

    logger.info("organization_created", **{"organization.id": str(org.id)})
    return org


def get_organization(organization_id: int) -> Organization:
    """Load an organization or raise NotFoundError."""
    try:
        return Organization.objects.get(pk=organization_id)
    except Organization.DoesNotExist:
        raise NotFoundError("Organization not found") from None


def get_org_summary(scope: CallerScope, organization_id: int) -> OrgSummary:
    """
    Build the billing summary for an organization.

    gross_billed sums every invoice regardless of paid status - it is billed
    revenue, not collected revenue.

    Raises:
        ForbiddenError: caller belongs to a different organization
        NotFoundError: organization does not exist
    """
    from apps.accounts.models import User
    from apps.billing.models import Invoice, Payment

    ensure_same_organization(scope, organization_id)
    org = get_organization(organization_id)

    invoices = Invoice.objects.filter(organization=org)
    totals = invoices.aggregate(gross=Sum("amount"))

    latest_invoices = list(invoices.order_by("-issue_date", "-id")[:SUMMARY_RECENT_LIMIT])
    recent_payments = list(
        Payment.objects.filter(invoice__organization=org)
        .select_related("invoice")
        .order_by("-payment_date", "-id")[:SUMMARY_RECENT_LIMIT]
    )

    return OrgSummary(
        organization=org,
        total_users=User.objects.filter(organization=org).count(),
        total_invoices=invoices.count(),
        gross_billed=totals["gross"] or Decimal("0.00"),
        latest_invoices=latest_invoices,
        recent_payments=recent_payments,
    )
