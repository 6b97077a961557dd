"""
Organization API endpoints.

Organization bootstrap is public; the summary is scoped to the caller's organization.
"""

from django.http import HttpRequest
from ninja import Router

from apps.core.schemas import ErrorResponse
from apps.core.security import CallerScopeAuth, get_caller_scope
from apps.organizations.schemas import (
    CreateOrganizationRequest,
    OrganizationResponse,
    OrgSummaryResponse,
    SummaryInvoice,
    SummaryPayment,
)
from apps.organizations.services import create_organization, get_org_summary

router = Router(tags=["organizations"])
scope_auth = CallerScopeAuth()


@router.post(
    "",
    response={201: OrganizationResponse, 400: ErrorResponse, 409: ErrorResponse},
    operation_id="createOrganization",
    summary="Create organization",
)
def create_organization_endpoint(
    request: HttpRequest, payload: CreateOrganizationRequest
) -> tuple[int, OrganizationResponse]:
    """Create a new organization. Names are globally unique."""
    org = create_organization(name=payload.name, billing_email=payload.billing_email)
    return 201, OrganizationResponse.model_validate(org)


@router.get(
    "/{organization_id}/summary",
    response={200: OrgSummaryResponse, 401: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse},
    auth=scope_auth,
    operation_id="getOrganizationSummary",
    summary="Organization billing summary",
)
def get_summary(request: HttpRequest, organization_id: int) -> OrgSummaryResponse:
    """
    User count, invoice count, gross billed amount, and the five most recent
    invoices and payments for the caller's organization.
    """
    scope = get_caller_scope(request)
    summary = get_org_summary(scope, organization_id)

    return OrgSummaryResponse(
        organization_name=summary.organization.name,
        billing_email=summary.organization.billing_email,
        total_users=summary.total_users,
        total_invoices=summary.total_invoices,
        gross_billed=summary.gross_billed,
        latest_invoices=[SummaryInvoice.model_validate(inv) for inv in summary.latest_invoices],
        recent_payments=[SummaryPayment.model_validate(p) for p in summary.recent_payments],
    )
