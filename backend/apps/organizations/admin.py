"""Admin configuration for organizations app."""

from django.contrib import admin

from apps.organizations.models import Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin for Organization model."""

    list_display = ["name", "billing_email", "created_at", "deleted_at"]
    search_fields = ["name", "billing_email"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]

    def get_queryset(self, request):
        """Include soft-deleted organizations in admin."""
        return Organization.all_objects.all()
