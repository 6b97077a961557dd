"""
Account services - organization user management.
"""

from django.contrib.auth.base_user import BaseUserManager
from django.db import IntegrityError, transaction

from apps.accounts.models import User
from apps.core.exceptions import BadRequestError, ConflictError, NotFoundError
from apps.core.logging import get_logger
from apps.events.services import publish_event
from apps.organizations.models import Organization

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def create_user(
    username: str,
    email: str,
    password: str,
    organization_id: int,
) -> User:
    """
    Create a user inside an organization.

    The password is hashed before the row is written.

    Raises:
        BadRequestError: missing username/email or password too short
        NotFoundError: target organization does not exist
        ConflictError: username taken in this organization, or email taken anywhere
    """
    username = (username or "").strip()
    email = BaseUserManager.normalize_email((email or "").strip())
    if not username:
        raise BadRequestError("Username is required")
    if not email:
        raise BadRequestError("Email is required")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise BadRequestError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    try:
        org = Organization.objects.get(pk=organization_id)
    except Organization.DoesNotExist:
        raise NotFoundError("Target organization not found") from None

    if User.all_objects.filter(organization=org, username=username).exists():
        raise ConflictError("Username already exists for this organization")
    if User.all_objects.filter(email__iexact=email).exists():
        raise ConflictError("Email address already in use")

    user = User(username=username, email=email, organization=org)
    user.set_password(password)

    try:
        with transaction.atomic():
            user.save()
            publish_event(
                event_type="user.created",
                aggregate=user,
                data={"username": user.username},
                actor=user,
            )
    except IntegrityError:
        # Concurrent insert won the race
        raise ConflictError("Username or email already in use") from None

    logger.info(
        "user_created",
        **{"usr.id": str(user.id), "organization.id": str(org.id)},
    )
    return user


def get_user_in_organization(user_id: int, organization_id: int, message: str) -> User:
    """
    Load a user that belongs to organization_id.

    A user from another organization is reported exactly like a missing one.
    """
    try:
        return User.objects.get(pk=user_id, organization_id=organization_id)
    except User.DoesNotExist:
        raise NotFoundError(message) from None
