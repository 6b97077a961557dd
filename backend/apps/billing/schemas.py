"""
Billing API schemas - request/response types for billing endpoints.
"""

from datetime import datetime
from decimal import Decimal

from ninja import Schema
from pydantic import Field

from apps.core.schemas import CurrencyCode, NonNegativeAmount, PositiveAmount, RequiredStr

# --- Request Schemas ---


class CreatePlanRequest(Schema):
    """Request to add a plan to an organization's catalog."""

    organization_id: int = Field(..., gt=0)
    name: RequiredStr = Field(..., examples=["Pro"])
    description: str = ""
    price: NonNegativeAmount = Field(..., examples=["30.00"])
    currency: CurrencyCode = "USD"
    interval: RequiredStr = "monthly"


class SubscribeRequest(Schema):
    """Request to subscribe an organization to a plan."""

    organization_id: int = Field(..., gt=0)
    plan_id: int = Field(..., gt=0)
    user_id: int = Field(..., gt=0, description="User the first invoice is issued to")


class UpgradeRequest(Schema):
    """Request to move an organization to another plan."""

    organization_id: int = Field(..., gt=0)
    new_plan_id: int = Field(..., gt=0)
    user_id: int = Field(..., gt=0)


class PayInvoiceRequest(Schema):
    """Request to settle an invoice in full."""

    invoice_id: int = Field(..., gt=0)
    user_id: int = Field(..., gt=0)
    amount: PositiveAmount
    currency: CurrencyCode
    transaction_id: RequiredStr
    payment_method: RequiredStr = Field(..., examples=["card"])


class RefundRequest(Schema):
    """Request to refund part or all of a payment."""

    invoice_id: int = Field(..., gt=0)
    payment_id: int = Field(..., gt=0)
    user_id: int = Field(..., gt=0)
    amount: PositiveAmount
    currency: CurrencyCode
    transaction_id: RequiredStr
    reason: RequiredStr


# --- Response Schemas ---


class PlanResponse(Schema):
    """Subscription plan."""

    id: int
    organization_id: int
    name: str
    description: str
    price: Decimal
    currency: str
    interval: str
    created_at: datetime


class SubscriptionResponse(Schema):
    """Subscription with its plan."""

    id: int
    organization_id: int
    plan_id: int
    start_date: datetime
    end_date: datetime | None
    is_active: bool
    plan: PlanResponse


class InvoiceResponse(Schema):
    """Invoice without expanded relations."""

    id: int
    organization_id: int
    user_id: int
    subscription_id: int | None
    amount: Decimal
    currency: str
    issue_date: datetime
    due_date: datetime
    is_paid: bool


class SubscribeResponse(Schema):
    """New subscription and its first invoice."""

    subscription_id: int
    invoice_id: int
    amount: Decimal
    due_date: datetime


class UpgradeResponse(Schema):
    """Outcome of a plan change."""

    old_subscription_id: int
    new_subscription_id: int
    invoice_id: int
    prorated_credit: Decimal
    invoice_amount: Decimal = Field(..., description="New plan price minus credit; may be negative")


class InvoiceOrganization(Schema):
    id: int
    name: str
    billing_email: str


class InvoiceUser(Schema):
    id: int
    username: str
    email: str


class InvoiceDetailResponse(InvoiceResponse):
    """Invoice with organization and user expanded."""

    organization: InvoiceOrganization
    user: InvoiceUser


class PaymentResponse(Schema):
    """Recorded payment."""

    id: int
    invoice_id: int
    user_id: int
    amount: Decimal
    currency: str
    payment_date: datetime
    transaction_id: str
    payment_method: str


class RefundResponse(Schema):
    """Recorded refund."""

    id: int
    payment_id: int
    invoice_id: int
    user_id: int
    amount: Decimal
    currency: str
    refund_date: datetime
    transaction_id: str
    reason: str
