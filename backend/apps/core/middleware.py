"""
Core middleware.

CorrelationIdMiddleware tags every request with a trace id; CallerScopeMiddleware
resolves the acting user and organization from the request.
"""

import time
from collections.abc import Callable
from uuid import UUID, uuid4

from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.core.auth import CallerScope
from apps.core.logging import bind_contextvars, clear_contextvars, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "HTTP_X_CORRELATION_ID"

# Paths that never carry a caller scope.
PUBLIC_PATH_PREFIXES = (
    "/admin/",
    "/api/v1/health",
    "/api/v1/docs",
    "/api/v1/openapi.json",
)

# Directory bootstrap endpoints are reachable before any user exists.
PUBLIC_ROUTES = frozenset(
    {
        ("POST", "/api/v1/organizations"),
        ("POST", "/api/v1/users"),
    }
)


class CorrelationIdMiddleware:
    """
    Assigns a correlation ID to each request.

    Reuses a valid X-Correlation-ID header or generates a new UUID, exposes it
    as request.correlation_id, binds it to the log context and to outbox
    events, and echoes it in the response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        from apps.events.services import set_correlation_id

        correlation_id = self._parse_header(request.META.get(CORRELATION_HEADER))
        request.correlation_id = correlation_id  # type: ignore[attr-defined]

        set_correlation_id(correlation_id)
        bind_contextvars(
            correlation_id=str(correlation_id),
            **{
                "http.method": request.method,
                "http.url_details.path": request.path,
                "request.ip_address": _client_ip(request),
                "request.user_agent": request.META.get("HTTP_USER_AGENT", ""),
            },
        )
        started = time.monotonic()
        try:
            response = self.get_response(request)
            logger.info(
                "request_finished",
                duration_ms=(time.monotonic() - started) * 1000,
                **{"http.status_code": response.status_code},
            )
            response["X-Correlation-ID"] = str(correlation_id)
            return response
        finally:
            set_correlation_id(None)
            clear_contextvars()

    @staticmethod
    def _parse_header(value: str | None) -> UUID:
        if value:
            try:
                return UUID(value)
            except ValueError:
                pass
        return uuid4()


class CallerScopeMiddleware:
    """
    Resolves the caller scope from `caller_user_id` / `caller_organization_id`.

    - Public paths are skipped.
    - Missing parameters leave request.auth_scope = None (endpoints answer 401).
    - Malformed ids are rejected with 400.
    - A user that does not exist in the claimed organization is rejected with 403.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.auth_scope = None  # type: ignore[attr-defined]

        if self._is_public(request):
            return self.get_response(request)

        raw_user_id = request.GET.get("caller_user_id")
        raw_org_id = request.GET.get("caller_organization_id")
        if raw_user_id is None and raw_org_id is None:
            return self.get_response(request)

        user_id = _parse_id(raw_user_id)
        if user_id is None:
            return JsonResponse({"detail": "Invalid caller user ID"}, status=400)
        organization_id = _parse_id(raw_org_id)
        if organization_id is None:
            return JsonResponse({"detail": "Invalid caller organization ID"}, status=400)

        if not self._user_in_organization(user_id, organization_id):
            logger.warning(
                "caller_scope_rejected",
                **{"usr.id": str(user_id), "organization.id": str(organization_id)},
            )
            return JsonResponse(
                {"detail": "Caller user not found or does not belong to the calling organization"},
                status=403,
            )

        request.auth_scope = CallerScope(  # type: ignore[attr-defined]
            user_id=user_id, organization_id=organization_id
        )
        bind_contextvars(**{"usr.id": str(user_id), "organization.id": str(organization_id)})
        return self.get_response(request)

    @staticmethod
    def _is_public(request: HttpRequest) -> bool:
        path = request.path.rstrip("/") or "/"
        if (request.method, path) in PUBLIC_ROUTES:
            return True
        return request.path.startswith(PUBLIC_PATH_PREFIXES)

    @staticmethod
    def _user_in_organization(user_id: int, organization_id: int) -> bool:
        from apps.accounts.models import User

        return User.objects.filter(pk=user_id, organization_id=organization_id).exists()


def _parse_id(value: str | None) -> int | None:
    """Parse a positive integer id, returning None when malformed."""
    if value is None or not value.isdigit():
        return None
    parsed = int(value)
    return parsed if parsed > 0 else None


def _client_ip(request: HttpRequest) -> str | None:
    """First hop of X-Forwarded-For, else REMOTE_ADDR."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")
