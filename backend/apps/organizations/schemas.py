"""
Organization API schemas - request/response types for directory endpoints.
"""

from datetime import datetime
from decimal import Decimal

from ninja import Schema
from pydantic import EmailStr, Field

from apps.core.schemas import RequiredStr


class CreateOrganizationRequest(Schema):
    """Request to create an organization."""

    name: RequiredStr = Field(..., examples=["Acme Corp"])
    billing_email: EmailStr = Field(..., examples=["billing@acme.com"])


class OrganizationResponse(Schema):
    """Organization details."""

    id: int
    name: str
    billing_email: str
    created_at: datetime


class SummaryInvoice(Schema):
    """Invoice row in the organization summary."""

    id: int
    amount: Decimal
    currency: str
    issue_date: datetime
    due_date: datetime
    is_paid: bool


class SummaryPayment(Schema):
    """Payment row in the organization summary."""

    id: int
    invoice_id: int
    amount: Decimal
    currency: str
    payment_date: datetime
    transaction_id: str
    payment_method: str


class OrgSummaryResponse(Schema):
    """Organization billing summary."""

    organization_name: str
    billing_email: str
    total_users: int
    total_invoices: int
    gross_billed: Decimal = Field(..., description="Sum of all invoice amounts, paid or not")
    latest_invoices: list[SummaryInvoice]
    recent_payments: list[SummaryPayment]
