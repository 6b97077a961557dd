"""
Tests for account services.
"""

import pytest

from apps.accounts.models import User
from apps.accounts.services import create_user, get_user_in_organization
from apps.core.exceptions import BadRequestError, ConflictError, NotFoundError
from apps.events.models import OutboxEvent
from tests.accounts.factories import OrganizationFactory, UserFactory


@pytest.mark.django_db
class TestCreateUser:
    """Tests for create_user."""

    def test_creates_user_with_hashed_password(self) -> None:
        org = OrganizationFactory()

        user = create_user("alice", "alice@example.com", "hunter22", org.id)

        user.refresh_from_db()
        assert user.organization_id == org.id
        assert user.password != "hunter22"
        assert user.check_password("hunter22") is True
        assert OutboxEvent.objects.filter(event_type="user.created").count() == 1

    def test_event_payload_has_no_password(self) -> None:
        org = OrganizationFactory()

        create_user("alice", "alice@example.com", "hunter22", org.id)

        event = OutboxEvent.objects.get(event_type="user.created")
        assert "hunter22" not in str(event.payload)
        assert "password" not in event.payload["data"]

    def test_missing_org_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            create_user("alice", "alice@example.com", "hunter22", 999_999)

    def test_short_password_is_bad_request(self) -> None:
        org = OrganizationFactory()

        with pytest.raises(BadRequestError):
            create_user("alice", "alice@example.com", "12345", org.id)

        assert not User.objects.exists()

    def test_duplicate_username_in_org_conflicts(self) -> None:
        existing = UserFactory(username="alice")

        with pytest.raises(ConflictError):
            create_user("alice", "new@example.com", "hunter22", existing.organization_id)

    def test_same_username_in_other_org_is_allowed(self) -> None:
        UserFactory(username="alice")
        org = OrganizationFactory()

        user = create_user("alice", "alice2@example.com", "hunter22", org.id)

        assert User.objects.filter(username="alice").count() == 2
        assert user.organization_id == org.id

    def test_email_is_globally_unique(self) -> None:
        UserFactory(email="alice@example.com")
        org = OrganizationFactory()

        with pytest.raises(ConflictError):
            create_user("alice", "alice@EXAMPLE.com", "hunter22", org.id)


@pytest.mark.django_db
class TestGetUserInOrganization:
    def test_returns_member(self) -> None:
        user = UserFactory()

        assert get_user_in_organization(user.id, user.organization_id, "nope") == user

    def test_user_of_other_org_looks_missing(self) -> None:
        user = UserFactory()
        other = OrganizationFactory()

        with pytest.raises(NotFoundError, match="nope"):
            get_user_in_organization(user.id, other.id, "nope")
