"""
Billing services - plan catalog, subscription lifecycle, invoice/payment and
refund ledgers.

Every multi-write operation runs in one transaction.atomic() block, so a
failure in a later step rolls back the earlier ones. Lifecycle operations lock
the organization row and payment/refund operations lock the invoice row with
select_for_update(), serializing concurrent requests against the same tenant
or invoice.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.accounts.services import get_user_in_organization
from apps.billing.models import Invoice, Payment, Refund, Subscription, SubscriptionPlan
from apps.billing.proration import Proration, add_one_month, calculate_proration, to_cents
from apps.core.auth import CallerScope, ensure_same_organization
from apps.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from apps.core.logging import get_logger
from apps.events.services import publish_event
from apps.organizations.models import Organization

logger = get_logger(__name__)

INVOICE_SCOPE_MESSAGE = "Invoice does not belong to the caller's organization"
USER_SCOPE_MESSAGE = "User not found or does not belong to the organization"
DUPLICATE_REFUND_MESSAGE = "A refund with this transaction ID already exists for this payment"
DUPLICATE_PLAN_MESSAGE = "Subscription plan with this name already exists for this organization"


@dataclass
class SubscribeResult:
    """Outcome of subscribing an organization to a plan."""

    subscription: Subscription
    invoice: Invoice


@dataclass
class UpgradeResult:
    """Outcome of switching an organization to another plan."""

    old_subscription: Subscription
    new_subscription: Subscription
    invoice: Invoice
    proration: Proration


# =============================================================================
# Input helpers
# =============================================================================


def _money(value: Decimal | int | str, field: str) -> Decimal:
    """Coerce a caller-supplied amount to a two-decimal Decimal."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise BadRequestError(f"Invalid {field}") from None
    if not amount.is_finite():
        raise BadRequestError(f"Invalid {field}")
    return to_cents(amount)


def _positive_money(value: Decimal | int | str, field: str) -> Decimal:
    amount = _money(value, field)
    if amount <= 0:
        raise BadRequestError(f"{field.capitalize()} must be greater than zero")
    return amount


def _required(value: str | None, field: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise BadRequestError(f"{field.capitalize()} is required")
    return cleaned


def _parse_id(value: int | str, field: str) -> int:
    """Accept a positive integer id, or its decimal string form."""
    if isinstance(value, bool):
        raise BadRequestError(f"Invalid {field}")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and value.strip().isdigit():
        parsed = int(value.strip())
    else:
        raise BadRequestError(f"Invalid {field}")
    if parsed <= 0:
        raise BadRequestError(f"Invalid {field}")
    return parsed


def _lock_organization(organization_id: int) -> Organization:
    """Lock the tenant row for the rest of the transaction."""
    try:
        return Organization.objects.select_for_update().get(pk=organization_id)
    except Organization.DoesNotExist:
        raise NotFoundError("Organization not found") from None


def _lock_invoice(invoice_id: int) -> Invoice:
    try:
        return Invoice.objects.select_for_update().get(pk=invoice_id)
    except Invoice.DoesNotExist:
        raise NotFoundError("Invoice not found") from None


# =============================================================================
# Plan catalog
# =============================================================================


def create_subscription_plan(
    scope: CallerScope,
    organization_id: int,
    name: str,
    price: Decimal | int | str,
    currency: str,
    interval: str,
    description: str = "",
) -> SubscriptionPlan:
    """
    Add a plan to an organization's catalog.

    Raises:
        BadRequestError: missing name/currency/interval or negative price
        ForbiddenError: caller belongs to a different organization
        NotFoundError: organization does not exist
        ConflictError: the organization already has a plan with this name
    """
    name = _required(name, "name")
    currency = _required(currency, "currency").upper()
    interval = _required(interval, "interval")
    price = _money(price, "price")
    if price < 0:
        raise BadRequestError("Price must not be negative")

    ensure_same_organization(scope, organization_id)
    try:
        org = Organization.objects.get(pk=organization_id)
    except Organization.DoesNotExist:
        raise NotFoundError("Organization not found") from None

    if SubscriptionPlan.all_objects.filter(organization=org, name=name).exists():
        raise ConflictError(DUPLICATE_PLAN_MESSAGE)

    try:
        with transaction.atomic():
            plan = SubscriptionPlan.objects.create(
                organization=org,
                name=name,
                description=description or "",
                price=price,
                currency=currency,
                interval=interval,
            )
            publish_event(
                event_type="plan.created",
                aggregate=plan,
                data={"name": plan.name, "price": str(plan.price), "currency": plan.currency},
            )
    except IntegrityError:
        raise ConflictError(DUPLICATE_PLAN_MESSAGE) from None

    logger.info("plan_created", plan_id=plan.id, **{"organization.id": str(org.id)})
    return plan


# =============================================================================
# Subscription lifecycle
# =============================================================================


def _issue_invoice(
    org: Organization,
    user: User,
    subscription: Subscription,
    amount: Decimal,
    currency: str,
    issued_at: datetime,
) -> Invoice:
    invoice = Invoice.objects.create(
        organization=org,
        user=user,
        subscription=subscription,
        amount=amount,
        currency=currency,
        issue_date=issued_at,
        due_date=add_one_month(issued_at),
        is_paid=False,
    )
    publish_event(
        event_type="invoice.issued",
        aggregate=invoice,
        data={
            "subscription_id": subscription.id,
            "amount": str(invoice.amount),
            "currency": invoice.currency,
            "due_date": invoice.due_date.isoformat(),
        },
        actor=user,
    )
    return invoice


def subscribe(
    scope: CallerScope,
    organization_id: int,
    plan_id: int,
    user_id: int,
    now: datetime | None = None,
) -> SubscribeResult:
    """
    Subscribe an organization to one of its plans.

    Creates an active subscription starting now and an invoice for the plan's
    full price due one month later, atomically.

    Raises:
        ForbiddenError: caller belongs to a different organization
        NotFoundError: organization, plan (in this organization) or user
            (in this organization) missing
        ConflictError: the organization already has an active subscription
    """
    ensure_same_organization(scope, organization_id)
    now = now or timezone.now()

    with transaction.atomic():
        org = _lock_organization(organization_id)

        try:
            plan = SubscriptionPlan.objects.get(pk=plan_id, organization=org)
        except SubscriptionPlan.DoesNotExist:
            raise NotFoundError("Subscription plan not found for this organization") from None

        user = get_user_in_organization(user_id, org.id, USER_SCOPE_MESSAGE)

        if Subscription.objects.filter(organization=org, is_active=True).exists():
            raise ConflictError(
                "Organization already has an active subscription; change plans instead"
            )

        subscription = Subscription.objects.create(
            organization=org,
            plan=plan,
            start_date=now,
            is_active=True,
        )
        publish_event(
            event_type="subscription.created",
            aggregate=subscription,
            data={"plan_id": plan.id, "start_date": now.isoformat()},
            actor=user,
        )
        invoice = _issue_invoice(org, user, subscription, plan.price, plan.currency, now)

    logger.info(
        "subscription_created",
        subscription_id=subscription.id,
        invoice_id=invoice.id,
        plan_id=plan.id,
        **{"organization.id": str(org.id)},
    )
    return SubscribeResult(subscription=subscription, invoice=invoice)


def upgrade_plan(
    scope: CallerScope,
    organization_id: int,
    new_plan_id: int,
    user_id: int,
    now: datetime | None = None,
) -> UpgradeResult:
    """
    Move an organization from its active plan to another plan.

    The unused part of the current month on the current plan is credited
    against the new plan's price (see calculate_proration). The old
    subscription is retired (end_date = now, inactive), a new active one is
    created, and an invoice for the prorated amount is issued - all in one
    transaction.

    Raises:
        ForbiddenError: caller belongs to a different organization
        NotFoundError: organization, new plan or user missing in this organization
        BadRequestError: no active subscription, or new plan equals current plan
    """
    ensure_same_organization(scope, organization_id)
    now = now or timezone.now()
    today = timezone.localdate(now)

    with transaction.atomic():
        org = _lock_organization(organization_id)

        try:
            new_plan = SubscriptionPlan.objects.get(pk=new_plan_id, organization=org)
        except SubscriptionPlan.DoesNotExist:
            raise NotFoundError("New subscription plan not found for this organization") from None

        user = get_user_in_organization(user_id, org.id, USER_SCOPE_MESSAGE)

        current = (
            Subscription.objects.select_for_update()
            .filter(organization=org, is_active=True)
            .first()
        )
        if current is None:
            raise BadRequestError("No active subscription found for this organization")
        if current.plan_id == new_plan.id:
            raise BadRequestError("Cannot upgrade to the same plan")

        current_plan = SubscriptionPlan.all_objects.get(pk=current.plan_id)
        proration = calculate_proration(current_plan.price, new_plan.price, today)

        current.end_date = now
        current.is_active = False
        current.save(update_fields=["end_date", "is_active", "updated_at"])

        new_subscription = Subscription.objects.create(
            organization=org,
            plan=new_plan,
            start_date=now,
            is_active=True,
        )
        publish_event(
            event_type="subscription.plan_changed",
            aggregate=new_subscription,
            data={
                "old_subscription_id": current.id,
                "old_plan_id": current_plan.id,
                "new_plan_id": new_plan.id,
                "prorated_credit": str(proration.prorated_credit),
            },
            actor=user,
        )
        invoice = _issue_invoice(
            org,
            user,
            new_subscription,
            proration.new_invoice_amount,
            new_plan.currency,
            now,
        )

    logger.info(
        "subscription_plan_changed",
        old_subscription_id=current.id,
        new_subscription_id=new_subscription.id,
        invoice_id=invoice.id,
        prorated_credit=str(proration.prorated_credit),
        **{"organization.id": str(org.id)},
    )
    return UpgradeResult(
        old_subscription=current,
        new_subscription=new_subscription,
        invoice=invoice,
        proration=proration,
    )


def list_user_subscriptions(scope: CallerScope, user_id: int) -> QuerySet[Subscription]:
    """
    All subscriptions (active and retired) of the caller's organization.

    Raises:
        ForbiddenError: user_id is not the caller, or the user belongs elsewhere
        NotFoundError: user does not exist
    """
    if int(user_id) != int(scope.user_id):
        raise ForbiddenError("You can only view your own subscriptions")

    try:
        user = User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise NotFoundError("User not found") from None

    ensure_same_organization(
        scope, user.organization_id, "User does not belong to the calling organization"
    )
    return Subscription.objects.filter(organization_id=user.organization_id).select_related("plan")


# =============================================================================
# Invoice & payment ledger
# =============================================================================


def get_invoice(scope: CallerScope, invoice_id: int | str) -> Invoice:
    """
    Read one invoice with its organization and user.

    Raises:
        BadRequestError: malformed invoice id
        NotFoundError: invoice does not exist
        ForbiddenError: invoice belongs to another organization
    """
    parsed_id = _parse_id(invoice_id, "invoice ID")
    try:
        invoice = Invoice.objects.select_related("organization", "user").get(pk=parsed_id)
    except Invoice.DoesNotExist:
        raise NotFoundError("Invoice not found") from None

    ensure_same_organization(scope, invoice.organization_id, INVOICE_SCOPE_MESSAGE)
    return invoice


def pay_invoice(
    scope: CallerScope,
    invoice_id: int,
    user_id: int,
    amount: Decimal | int | str,
    currency: str,
    transaction_id: str,
    payment_method: str,
    now: datetime | None = None,
) -> Payment:
    """
    Settle an invoice in full.

    Partial payments are rejected; overpayment is accepted and the excess is
    neither returned nor credited.

    Raises:
        BadRequestError: bad input, invoice already paid, or amount below invoice amount
        NotFoundError: invoice missing, or user not in the invoice's organization
        ForbiddenError: invoice belongs to another organization
        ConflictError: transaction_id already used by another payment
    """
    amount = _positive_money(amount, "amount")
    currency = _required(currency, "currency").upper()
    transaction_id = _required(transaction_id, "transaction ID")
    payment_method = _required(payment_method, "payment method")
    now = now or timezone.now()

    try:
        with transaction.atomic():
            invoice = _lock_invoice(invoice_id)
            ensure_same_organization(scope, invoice.organization_id, INVOICE_SCOPE_MESSAGE)

            if invoice.is_paid:
                raise BadRequestError("Invoice is already paid")
            if amount < invoice.amount:
                raise BadRequestError(
                    "Payment amount is less than invoice amount. "
                    "Partial payments are not supported."
                )

            user = get_user_in_organization(user_id, invoice.organization_id, USER_SCOPE_MESSAGE)

            if Payment.all_objects.filter(transaction_id=transaction_id).exists():
                raise ConflictError("A payment with this transaction ID already exists")

            payment = Payment.objects.create(
                invoice=invoice,
                user=user,
                amount=amount,
                currency=currency,
                payment_date=now,
                transaction_id=transaction_id,
                payment_method=payment_method,
            )

            invoice.is_paid = True
            invoice.save(update_fields=["is_paid", "updated_at"])

            publish_event(
                event_type="invoice.paid",
                aggregate=invoice,
                data={
                    "payment_id": payment.id,
                    "amount": str(payment.amount),
                    "currency": payment.currency,
                    "transaction_id": payment.transaction_id,
                },
                actor=user,
            )
    except IntegrityError:
        # Concurrent payment with the same transaction id won the race
        raise ConflictError("A payment with this transaction ID already exists") from None

    logger.info(
        "invoice_paid",
        invoice_id=invoice.id,
        payment_id=payment.id,
        overpaid=str(amount - invoice.amount) if amount > invoice.amount else None,
        **{"organization.id": str(invoice.organization_id)},
    )
    return payment


# =============================================================================
# Refund ledger
# =============================================================================


def refund_payment(
    scope: CallerScope,
    invoice_id: int,
    payment_id: int,
    user_id: int,
    amount: Decimal | int | str,
    currency: str,
    transaction_id: str,
    reason: str,
    now: datetime | None = None,
) -> Refund:
    """
    Record a refund against a payment.

    The (payment, transaction_id) pair is the idempotency key: a repeated
    request is a Conflict. Each refund is capped by the original payment
    amount only - earlier refunds on the same payment are not subtracted.

    Raises:
        BadRequestError: bad input, or amount above the payment amount
        NotFoundError: invoice missing, payment not on this invoice, or user not
            in the invoice's organization
        ForbiddenError: invoice belongs to another organization
        ConflictError: a refund with this transaction ID exists for the payment
    """
    amount = _positive_money(amount, "amount")
    currency = _required(currency, "currency").upper()
    transaction_id = _required(transaction_id, "transaction ID")
    reason = _required(reason, "reason")
    now = now or timezone.now()

    try:
        with transaction.atomic():
            invoice = _lock_invoice(invoice_id)
            ensure_same_organization(scope, invoice.organization_id, INVOICE_SCOPE_MESSAGE)

            try:
                payment = Payment.objects.get(pk=payment_id, invoice=invoice)
            except Payment.DoesNotExist:
                raise NotFoundError(
                    "Payment not found or does not belong to the specified invoice"
                ) from None

            user = get_user_in_organization(user_id, invoice.organization_id, USER_SCOPE_MESSAGE)

            if Refund.all_objects.filter(payment=payment, transaction_id=transaction_id).exists():
                raise ConflictError(DUPLICATE_REFUND_MESSAGE)

            if amount > payment.amount:
                raise BadRequestError("Refund amount cannot exceed original payment amount")

            refund = Refund.objects.create(
                payment=payment,
                invoice=invoice,
                user=user,
                amount=amount,
                currency=currency,
                refund_date=now,
                transaction_id=transaction_id,
                reason=reason,
            )
            publish_event(
                event_type="refund.created",
                aggregate=refund,
                data={
                    "invoice_id": invoice.id,
                    "payment_id": payment.id,
                    "amount": str(refund.amount),
                    "currency": refund.currency,
                    "transaction_id": refund.transaction_id,
                },
                actor=user,
            )
    except IntegrityError:
        raise ConflictError(DUPLICATE_REFUND_MESSAGE) from None

    logger.info(
        "refund_created",
        refund_id=refund.id,
        payment_id=payment.id,
        invoice_id=invoice.id,
        **{"organization.id": str(invoice.organization_id)},
    )
    return refund
