"""
Django Ninja API configuration.
"""

from django.http import HttpRequest, HttpResponse
from ninja import NinjaAPI
from ninja.errors import ValidationError

from apps.accounts.api import router as users_router
from apps.billing.api import router as billing_router
from apps.core.exceptions import LedgerError
from apps.core.logging import get_logger
from apps.organizations.api import router as organizations_router

logger = get_logger(__name__)

api = NinjaAPI(
    title="Ledgerline Billing API",
    version="1.0.0",
    description="Multi-tenant billing ledger for plans, subscriptions, invoices and refunds.",
    openapi_extra={
        "info": {
            "contact": {"name": "API Support"},
        },
        "tags": [
            {"name": "organizations", "description": "Organization directory and billing summary"},
            {"name": "users", "description": "Organization users"},
            {"name": "billing", "description": "Plans, subscriptions, invoices and refunds"},
            {"name": "health", "description": "Service health checks"},
        ],
    },
)

# Register routers
api.add_router("/organizations", organizations_router)
api.add_router("/users", users_router)
api.add_router("/billing", billing_router)


@api.exception_handler(LedgerError)
def ledger_error_handler(request: HttpRequest, exc: LedgerError) -> HttpResponse:
    """Business rejections carry their own status code."""
    return api.create_response(request, {"detail": exc.message}, status=exc.status_code)


@api.exception_handler(ValidationError)
def validation_error_handler(request: HttpRequest, exc: ValidationError) -> HttpResponse:
    """Request schema failures are reported as 400 with the first problem."""
    detail = "Invalid request"
    if exc.errors:
        first = exc.errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", detail)
        detail = f"{location}: {message}" if location else message
    return api.create_response(request, {"detail": detail}, status=400)


@api.exception_handler(Exception)
def internal_error_handler(request: HttpRequest, exc: Exception) -> HttpResponse:
    """Anything unexpected is logged with its stack and answered opaquely."""
    logger.exception("unhandled_error", error_type=type(exc).__name__)
    return api.create_response(request, {"detail": "Internal server error"}, status=500)


@api.get("/health", tags=["health"], operation_id="healthCheck", summary="Health check")
def health_check(request: HttpRequest) -> dict:
    """Health check endpoint for load balancer."""
    return {"status": "ok"}
