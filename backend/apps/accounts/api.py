"""
Accounts API endpoints.

User creation is public (directory bootstrap); listing subscriptions is scoped
to the caller.
"""

from django.http import HttpRequest
from ninja import Router

from apps.accounts.schemas import CreateUserRequest, UserResponse
from apps.accounts.services import create_user
from apps.billing.schemas import SubscriptionResponse
from apps.billing.services import list_user_subscriptions
from apps.core.schemas import ErrorResponse
from apps.core.security import CallerScopeAuth, get_caller_scope

router = Router(tags=["users"])
scope_auth = CallerScopeAuth()


@router.post(
    "",
    response={201: UserResponse, 400: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
    operation_id="createUser",
    summary="Create user",
)
def create_user_endpoint(
    request: HttpRequest, payload: CreateUserRequest
) -> tuple[int, UserResponse]:
    """Create a user in an existing organization."""
    user = create_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        organization_id=payload.organization_id,
    )
    return 201, UserResponse.model_validate(user)


@router.get(
    "/{user_id}/subscriptions",
    response={
        200: list[SubscriptionResponse],
        401: ErrorResponse,
        403: ErrorResponse,
        404: ErrorResponse,
    },
    auth=scope_auth,
    operation_id="listUserSubscriptions",
    summary="List subscriptions of the caller's organization",
)
def list_subscriptions(request: HttpRequest, user_id: int) -> list[SubscriptionResponse]:
    """
    List every subscription (active and retired) of the user's organization.

    Callers may only query their own user id.
    """
    scope = get_caller_scope(request)
    subscriptions = list_user_subscriptions(scope, user_id)
    return [SubscriptionResponse.model_validate(sub) for sub in subscriptions]
