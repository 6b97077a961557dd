"""
Billing models - plans, subscriptions, invoices, payments and refunds.
"""

from django.db import models
from django.db.models import Q

from apps.core.models import LedgerModel, TenantScopedModel

MONEY_DIGITS = 12
MONEY_PLACES = 2


def money_field(**kwargs) -> models.DecimalField:
    """Two-decimal money column."""
    return models.DecimalField(max_digits=MONEY_DIGITS, decimal_places=MONEY_PLACES, **kwargs)


class SubscriptionPlan(TenantScopedModel):
    """
    A priced plan offered by one organization.

    (name, organization) is unique. Plans are never edited in place once
    referenced - a price change means a new plan.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = money_field(help_text="Non-negative price per interval")
    currency = models.CharField(max_length=3, default="USD")
    interval = models.CharField(
        max_length=32,
        default="monthly",
        help_text="Billing interval label, e.g. 'monthly' or 'yearly'",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"],
                name="uniq_plan_name_per_org",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="plan_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.price} {self.currency}/{self.interval})"


class Subscription(TenantScopedModel):
    """
    An organization's enrolment in a plan.

    State machine: active -> inactive (terminal). Switching plans retires the
    current row and inserts a new one; a row never reactivates. At most one
    active row per organization, enforced by a partial unique constraint and
    by the lifecycle services locking the organization row.
    """

    plan = models.ForeignKey(
        SubscriptionPlan,
        on_delete=models.PROTECT,
        related_name="subscriptions",
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ["-start_date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization"],
                condition=Q(is_active=True),
                name="uniq_active_subscription_per_org",
            ),
        ]

    def __str__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"{self.organization_id} - plan {self.plan_id} ({state})"


class Invoice(TenantScopedModel):
    """
    Amount billed to an organization for a subscription event.

    is_paid flips from False to True exactly once. The amount may be negative
    when a plan change credits more than the new plan costs.
    """

    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.PROTECT,
        related_name="invoices",
        help_text="User who triggered the invoice",
    )
    subscription = models.ForeignKey(
        Subscription,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="invoices",
    )
    amount = money_field()
    currency = models.CharField(max_length=3, default="USD")
    issue_date = models.DateTimeField()
    due_date = models.DateTimeField()
    is_paid = models.BooleanField(default=False, db_index=True)

    class Meta:
        ordering = ["-issue_date", "-id"]

    def __str__(self) -> str:
        state = "paid" if self.is_paid else "open"
        return f"Invoice {self.pk}: {self.amount} {self.currency} ({state})"


class Payment(LedgerModel):
    """Settlement of an invoice. transaction_id is globally unique."""

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.PROTECT,
        related_name="payments",
        help_text="User who made the payment",
    )
    amount = money_field()
    currency = models.CharField(max_length=3, default="USD")
    payment_date = models.DateTimeField()
    transaction_id = models.CharField(max_length=255, unique=True)
    payment_method = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ["-payment_date", "-id"]

    def __str__(self) -> str:
        return f"Payment {self.transaction_id}: {self.amount} {self.currency}"


class Refund(LedgerModel):
    """
    Money returned against a payment.

    (payment, transaction_id) is unique so a retried client request cannot
    refund twice.
    """

    payment = models.ForeignKey(
        Payment,
        on_delete=models.PROTECT,
        related_name="refunds",
    )
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.PROTECT,
        related_name="refunds",
    )
    user = models.ForeignKey(
        "accounts.User",
        on_delete=models.PROTECT,
        related_name="refunds",
        help_text="User who requested the refund",
    )
    amount = money_field()
    currency = models.CharField(max_length=3, default="USD")
    refund_date = models.DateTimeField()
    transaction_id = models.CharField(max_length=255)
    reason = models.TextField()

    class Meta:
        ordering = ["-refund_date", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["payment", "transaction_id"],
                name="uniq_refund_transaction_per_payment",
            ),
        ]

    def __str__(self) -> str:
        return f"Refund {self.transaction_id}: {self.amount} {self.currency}"
