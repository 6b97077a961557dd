"""
Custom type definitions for the application.

These types help mypy understand custom attributes added by middleware.
"""

from typing import TYPE_CHECKING
from uuid import UUID

from django.http import HttpRequest

if TYPE_CHECKING:
    from apps.core.auth import CallerScope


class ScopedHttpRequest(HttpRequest):
    """
    HttpRequest with the caller scope added by CallerScopeMiddleware.

    Use this type for endpoints that act on organization-scoped resources.
    """

    auth_scope: "CallerScope | None"
    correlation_id: UUID
