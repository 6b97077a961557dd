"""Admin configuration for accounts app."""

from django.contrib import admin

from apps.accounts.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin for ledger users. The password hash is never shown."""

    list_display = ["username", "email", "organization", "created_at", "deleted_at"]
    list_filter = ["organization"]
    search_fields = ["username", "email", "organization__name"]
    exclude = ["password"]
    readonly_fields = ["last_login", "created_at", "updated_at"]

    def get_queryset(self, request):
        return User.all_objects.select_related("organization")
