"""
Core security - authentication classes for API.
"""

from django.http import HttpRequest
from ninja.errors import HttpError
from ninja.security import APIKeyQuery

from apps.core.auth import CallerScope


class CallerScopeAuth(APIKeyQuery):
    """
    Caller scope authentication for API endpoints.

    The caller is identified by `caller_user_id` and `caller_organization_id`
    query parameters. CallerScopeMiddleware validates them and attaches a
    CallerScope; this class only documents the scheme in OpenAPI and turns a
    missing scope into a 401.
    """

    param_name = "caller_user_id"

    def authenticate(self, request: HttpRequest, key: str | None) -> CallerScope | None:
        return getattr(request, "auth_scope", None)


def get_caller_scope(request: HttpRequest) -> CallerScope:
    """
    Get the caller scope or raise 401.

    Use this in endpoints to get a properly type-narrowed scope.
    """
    scope = getattr(request, "auth_scope", None)
    if scope is None:
        raise HttpError(401, "Not authenticated")
    return scope
