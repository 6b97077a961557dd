"""Admin configuration for events app."""

from django.contrib import admin

from apps.events.models import OutboxEvent


@admin.register(OutboxEvent)
class OutboxEventAdmin(admin.ModelAdmin):
    """Read-only view of the outbox."""

    list_display = [
        "event_type",
        "aggregate_type",
        "aggregate_id",
        "organization_id",
        "status",
        "created_at",
    ]
    list_filter = ["status", "event_type"]
    search_fields = ["event_id", "aggregate_id", "organization_id"]
    readonly_fields = [f.name for f in OutboxEvent._meta.fields]

    def has_add_permission(self, request):
        return False
