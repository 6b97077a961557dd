"""
Billing API endpoints.

Handles the plan catalog, subscription lifecycle, invoice payment and refunds.
All routes require a caller scope.
"""

from django.http import HttpRequest
from ninja import Router

from apps.billing.schemas import (
    CreatePlanRequest,
    InvoiceDetailResponse,
    PayInvoiceRequest,
    PaymentResponse,
    PlanResponse,
    RefundRequest,
    RefundResponse,
    SubscribeRequest,
    SubscribeResponse,
    UpgradeRequest,
    UpgradeResponse,
)
from apps.billing.services import (
    create_subscription_plan,
    get_invoice,
    pay_invoice,
    refund_payment,
    subscribe,
    upgrade_plan,
)
from apps.core.schemas import ErrorResponse
from apps.core.security import CallerScopeAuth, get_caller_scope

router = Router(tags=["billing"])
scope_auth = CallerScopeAuth()

WRITE_ERRORS = {
    400: ErrorResponse,
    401: ErrorResponse,
    403: ErrorResponse,
    404: ErrorResponse,
    409: ErrorResponse,
}


@router.post(
    "/plans",
    response={201: PlanResponse, **WRITE_ERRORS},
    auth=scope_auth,
    operation_id="createSubscriptionPlan",
    summary="Create subscription plan",
)
def create_plan(request: HttpRequest, payload: CreatePlanRequest) -> tuple[int, PlanResponse]:
    """Add a plan to the caller organization's catalog. Names are unique per organization."""
    scope = get_caller_scope(request)
    plan = create_subscription_plan(
        scope,
        organization_id=payload.organization_id,
        name=payload.name,
        description=payload.description,
        price=payload.price,
        currency=payload.currency,
        interval=payload.interval,
    )
    return 201, PlanResponse.model_validate(plan)


@router.post(
    "/subscribe",
    response={201: SubscribeResponse, **WRITE_ERRORS},
    auth=scope_auth,
    operation_id="subscribe",
    summary="Subscribe organization to a plan",
)
def subscribe_endpoint(
    request: HttpRequest, payload: SubscribeRequest
) -> tuple[int, SubscribeResponse]:
    """
    Start a subscription and issue its first invoice.

    The invoice is for the plan's full price and falls due one month later.
    """
    scope = get_caller_scope(request)
    result = subscribe(
        scope,
        organization_id=payload.organization_id,
        plan_id=payload.plan_id,
        user_id=payload.user_id,
    )
    return 201, SubscribeResponse(
        subscription_id=result.subscription.id,
        invoice_id=result.invoice.id,
        amount=result.invoice.amount,
        due_date=result.invoice.due_date,
    )


@router.post(
    "/upgrade",
    response={200: UpgradeResponse, **WRITE_ERRORS},
    auth=scope_auth,
    operation_id="upgradePlan",
    summary="Change the organization's plan",
)
def upgrade_endpoint(request: HttpRequest, payload: UpgradeRequest) -> UpgradeResponse:
    """Retire the active subscription and invoice the new plan minus the unused credit."""
    scope = get_caller_scope(request)
    result = upgrade_plan(
        scope,
        organization_id=payload.organization_id,
        new_plan_id=payload.new_plan_id,
        user_id=payload.user_id,
    )
    return UpgradeResponse(
        old_subscription_id=result.old_subscription.id,
        new_subscription_id=result.new_subscription.id,
        invoice_id=result.invoice.id,
        prorated_credit=result.proration.prorated_credit,
        invoice_amount=result.invoice.amount,
    )


@router.post(
    "/invoices/pay",
    response={201: PaymentResponse, **WRITE_ERRORS},
    auth=scope_auth,
    operation_id="payInvoice",
    summary="Pay an invoice",
)
def pay_invoice_endpoint(
    request: HttpRequest, payload: PayInvoiceRequest
) -> tuple[int, PaymentResponse]:
    """Pay an invoice in full. Partial payments are rejected."""
    scope = get_caller_scope(request)
    payment = pay_invoice(
        scope,
        invoice_id=payload.invoice_id,
        user_id=payload.user_id,
        amount=payload.amount,
        currency=payload.currency,
        transaction_id=payload.transaction_id,
        payment_method=payload.payment_method,
    )
    return 201, PaymentResponse.model_validate(payment)


@router.get(
    "/invoices/{invoice_id}",
    response={
        200: InvoiceDetailResponse,
        400: ErrorResponse,
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=scope_auth,
    operation_id="getInvoice",
    summary="Get invoice",
)
def get_invoice_endpoint(request: HttpRequest, invoice_id: str) -> InvoiceDetailResponse:
    """Get an invoice with its organization and user."""
    scope = get_caller_scope(request)
    invoice = get_invoice(scope, invoice_id)
    return InvoiceDetailResponse.model_validate(invoice)


@router.post(
    "/refunds",
    response={201: RefundResponse, **WRITE_ERRORS},
    auth=scope_auth,
    operation_id="refundPayment",
    summary="Refund a payment",
)
def refund_endpoint(request: HttpRequest, payload: RefundRequest) -> tuple[int, RefundResponse]:
    """Refund up to the original payment amount. Repeating a transaction ID is a conflict."""
    scope = get_caller_scope(request)
    refund = refund_payment(
        scope,
        invoice_id=payload.invoice_id,
        payment_id=payload.payment_id,
        user_id=payload.user_id,
        amount=payload.amount,
        currency=payload.currency,
        transaction_id=payload.transaction_id,
        reason=payload.reason,
    )
    return 201, RefundResponse.model_validate(refund)
