"""
Tests for core middleware.
"""

import json
from uuid import UUID

import pytest
from django.http import HttpRequest, HttpResponse
from django.test import RequestFactory

from apps.core.auth import CallerScope
from apps.core.middleware import CallerScopeMiddleware, CorrelationIdMiddleware
from apps.events.services import get_correlation_id
from tests.accounts.factories import OrganizationFactory, UserFactory


class _Recorder:
    """get_response stand-in that remembers the request it saw."""

    def __init__(self) -> None:
        self.request: HttpRequest | None = None
        self.correlation_id = None

    def __call__(self, request: HttpRequest) -> HttpResponse:
        self.request = request
        self.correlation_id = get_correlation_id()
        return HttpResponse("ok")


class TestCorrelationIdMiddleware:
    def test_generates_id_and_echoes_header(self, request_factory: RequestFactory) -> None:
        recorder = _Recorder()
        middleware = CorrelationIdMiddleware(recorder)

        response = middleware(request_factory.get("/api/v1/health"))

        header = response["X-Correlation-ID"]
        assert UUID(header) == recorder.request.correlation_id
        assert recorder.correlation_id == UUID(header)
        assert get_correlation_id() is None

    def test_reuses_valid_incoming_header(self, request_factory: RequestFactory) -> None:
        incoming = "2f1b7f8e-6a3c-4d53-9d4e-1b2c3d4e5f60"
        middleware = CorrelationIdMiddleware(_Recorder())

        response = middleware(
            request_factory.get("/api/v1/health", HTTP_X_CORRELATION_ID=incoming)
        )

        assert response["X-Correlation-ID"] == incoming

    def test_replaces_malformed_header(self, request_factory: RequestFactory) -> None:
        middleware = CorrelationIdMiddleware(_Recorder())

        response = middleware(
            request_factory.get("/api/v1/health", HTTP_X_CORRELATION_ID="not-a-uuid")
        )

        assert response["X-Correlation-ID"] != "not-a-uuid"
        UUID(response["X-Correlation-ID"])


@pytest.mark.django_db
class TestCallerScopeMiddleware:
    def _call(self, request):
        recorder = _Recorder()
        response = CallerScopeMiddleware(recorder)(request)
        return response, recorder

    def test_resolves_scope(self, request_factory: RequestFactory) -> None:
        user = UserFactory()
        request = request_factory.get(
            "/api/v1/billing/invoices/1",
            {"caller_user_id": str(user.id), "caller_organization_id": str(user.organization_id)},
        )

        response, recorder = self._call(request)

        assert response.status_code == 200
        assert recorder.request.auth_scope == CallerScope(
            user_id=user.id, organization_id=user.organization_id
        )

    def test_missing_params_leave_scope_empty(self, request_factory: RequestFactory) -> None:
        response, recorder = self._call(request_factory.get("/api/v1/billing/invoices/1"))

        assert response.status_code == 200
        assert recorder.request.auth_scope is None

    @pytest.mark.parametrize(
        ("params", "detail"),
        [
            ({"caller_user_id": "abc", "caller_organization_id": "1"}, "Invalid caller user ID"),
            ({"caller_user_id": "1", "caller_organization_id": "-3"}, "Invalid caller organization ID"),
            ({"caller_user_id": "1"}, "Invalid caller organization ID"),
        ],
    )
    def test_malformed_ids_return_400(
        self, request_factory: RequestFactory, params: dict, detail: str
    ) -> None:
        response, recorder = self._call(request_factory.get("/api/v1/billing/plans", params))

        assert response.status_code == 400
        assert json.loads(response.content) == {"detail": detail}
        assert recorder.request is None

    def test_user_outside_claimed_org_returns_403(self, request_factory: RequestFactory) -> None:
        user = UserFactory()
        other = OrganizationFactory()
        request = request_factory.get(
            "/api/v1/billing/plans",
            {"caller_user_id": str(user.id), "caller_organization_id": str(other.id)},
        )

        response, recorder = self._call(request)

        assert response.status_code == 403
        assert recorder.request is None

    def test_public_routes_skip_resolution(self, request_factory: RequestFactory) -> None:
        request = request_factory.post(
            "/api/v1/organizations?caller_user_id=abc&caller_organization_id=abc"
        )

        response, recorder = self._call(request)

        assert response.status_code == 200
        assert recorder.request.auth_scope is None
