"""
Caller scope for the request lifecycle.

The request layer has already authenticated the caller; the ledger only
consumes the resolved (user, organization) pair and checks it against the
organization that owns each target resource.
"""

from dataclasses import dataclass

from apps.core.exceptions import ForbiddenError

SCOPE_MISMATCH_MESSAGE = "Caller organization does not match target organization"


@dataclass(frozen=True)
class CallerScope:
    """
    Authenticated caller identity attached to requests by CallerScopeMiddleware.

    Attributes:
        user_id: The acting User's id
        organization_id: The Organization the caller acts within
    """

    user_id: int
    organization_id: int


def is_same_organization(scope: CallerScope, organization_id: int) -> bool:
    """Pure scope guard: allow only when caller and resource organizations match."""
    return int(scope.organization_id) == int(organization_id)


def ensure_same_organization(
    scope: CallerScope,
    organization_id: int,
    message: str = SCOPE_MISMATCH_MESSAGE,
) -> None:
    """
    Raise ForbiddenError unless the caller belongs to organization_id.

    Evaluated before any mutation of an organization-scoped resource.
    """
    if not is_same_organization(scope, organization_id):
        raise ForbiddenError(message)
