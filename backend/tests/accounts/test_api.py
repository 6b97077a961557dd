"""
Tests for accounts API endpoints.
"""

import pytest
from django.test import Client
from ninja.errors import HttpError

from apps.accounts.api import create_user_endpoint, list_subscriptions
from apps.accounts.schemas import CreateUserRequest
from apps.core.exceptions import ForbiddenError
from tests.accounts.factories import OrganizationFactory, UserFactory
from tests.billing.factories import SubscriptionFactory


@pytest.mark.django_db
class TestCreateUserEndpoint:
    def test_returns_201_without_password(self, request_factory) -> None:
        org = OrganizationFactory()
        request = request_factory.post("/api/v1/users")
        payload = CreateUserRequest(
            username="alice", email="alice@example.com", password="hunter22", organization_id=org.id
        )

        status, result = create_user_endpoint(request, payload)

        assert status == 201
        assert result.username == "alice"
        assert "password" not in result.model_dump()

    def test_short_password_over_http_returns_400(self, api_client: Client) -> None:
        org = OrganizationFactory()

        response = api_client.post(
            "/api/v1/users",
            {
                "username": "alice",
                "email": "alice@example.com",
                "password": "123",
                "organization_id": org.id,
            },
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_missing_org_over_http_returns_404(self, api_client: Client) -> None:
        response = api_client.post(
            "/api/v1/users",
            {
                "username": "alice",
                "email": "alice@example.com",
                "password": "hunter22",
                "organization_id": 999999,
            },
            content_type="application/json",
        )

        assert response.status_code == 404


@pytest.mark.django_db
class TestListSubscriptionsEndpoint:
    def test_lists_org_subscriptions_with_plan(self, scoped_request) -> None:
        user = UserFactory()
        sub = SubscriptionFactory(organization=user.organization)
        request = scoped_request(user, path=f"/api/v1/users/{user.id}/subscriptions")

        result = list_subscriptions(request, user.id)

        assert len(result) == 1
        assert result[0].id == sub.id
        assert result[0].plan.name == sub.plan.name

    def test_other_user_is_forbidden(self, scoped_request) -> None:
        user = UserFactory()
        colleague = UserFactory(organization=user.organization)
        request = scoped_request(user, path=f"/api/v1/users/{colleague.id}/subscriptions")

        with pytest.raises(ForbiddenError):
            list_subscriptions(request, colleague.id)

    def test_unauthenticated_returns_401(self, scoped_request) -> None:
        request = scoped_request(None, path="/api/v1/users/1/subscriptions")

        with pytest.raises(HttpError) as exc_info:
            list_subscriptions(request, 1)

        assert exc_info.value.status_code == 401
