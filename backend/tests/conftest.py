"""
Shared pytest fixtures for all tests.

Factories
---------
Import factories directly from their modules:

    from tests.accounts.factories import OrganizationFactory, UserFactory
    from tests.billing.factories import InvoiceFactory, SubscriptionPlanFactory

Example usage:

    @pytest.mark.django_db
    def test_something():
        user = UserFactory.create()
        scope = scope_for(user)
"""

from collections.abc import Callable
from typing import Any, cast

import pytest
from django.test import Client, RequestFactory
from django.test.client import WSGIRequest  # type: ignore[attr-defined]

from apps.core.auth import CallerScope
from apps.core.types import ScopedHttpRequest


def scope_for(user: Any) -> CallerScope:
    """Caller scope acting as `user` inside the user's organization."""
    return CallerScope(user_id=user.pk, organization_id=user.organization_id)


def make_scoped_request(request: "WSGIRequest", scope: CallerScope | None) -> ScopedHttpRequest:
    """
    Attach a caller scope to a RequestFactory request.

    RequestFactory skips middleware, so this stands in for CallerScopeMiddleware.
    """
    request.auth_scope = scope  # type: ignore[attr-defined]
    return cast(ScopedHttpRequest, request)


@pytest.fixture
def request_factory() -> RequestFactory:
    """
    Django request factory for unit testing views.

    Use this to call Django Ninja endpoint functions directly without the
    full HTTP stack.
    """
    return RequestFactory()


@pytest.fixture
def api_client() -> Client:
    """
    Django test client for full HTTP request/response cycle tests.

    Goes through middleware, routing and exception handlers.

    Example:
        def test_api_returns_200(api_client):
            response = api_client.get("/api/v1/health")
            assert response.status_code == 200
    """
    return Client()


@pytest.fixture
def scoped_request(
    request_factory: RequestFactory,
) -> Callable[..., ScopedHttpRequest]:
    """
    Factory fixture for requests carrying a caller scope.

    Example:
        def test_endpoint(scoped_request):
            user = UserFactory.create()
            request = scoped_request(user, method="get", path="/api/v1/billing/invoices/1")
            result = get_invoice_endpoint(request, "1")
    """

    def _make_request(
        user: Any = None,
        method: str = "get",
        path: str = "/",
    ) -> ScopedHttpRequest:
        method_func = getattr(request_factory, method.lower())
        request = method_func(path)
        scope = scope_for(user) if user is not None else None
        return make_scoped_request(request, scope)

    return _make_request
