"""Admin configuration for billing app."""

from django.contrib import admin

from apps.billing.models import Invoice, Payment, Refund, Subscription, SubscriptionPlan


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    """Admin for SubscriptionPlan model."""

    list_display = ["name", "organization", "price", "currency", "interval", "deleted_at"]
    list_filter = ["currency", "interval"]
    search_fields = ["name", "organization__name"]
    readonly_fields = ["created_at", "updated_at"]

    def get_queryset(self, request):
        """Include soft-deleted plans in admin."""
        return SubscriptionPlan.all_objects.select_related("organization")


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    """Admin for Subscription model."""

    list_display = ["id", "organization", "plan", "start_date", "end_date", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["organization__name", "plan__name"]
    readonly_fields = ["start_date", "end_date", "is_active", "created_at", "updated_at"]

    def get_queryset(self, request):
        return Subscription.all_objects.select_related("organization", "plan")


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin for Invoice model. Ledger rows are read-only here."""

    list_display = ["id", "organization", "user", "amount", "currency", "due_date", "is_paid"]
    list_filter = ["is_paid", "currency"]
    search_fields = ["organization__name", "user__email"]
    readonly_fields = [
        "organization",
        "user",
        "subscription",
        "amount",
        "currency",
        "issue_date",
        "due_date",
        "is_paid",
        "created_at",
        "updated_at",
    ]

    def get_queryset(self, request):
        return Invoice.all_objects.select_related("organization", "user")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin for Payment model."""

    list_display = ["transaction_id", "invoice", "user", "amount", "currency", "payment_date"]
    list_filter = ["payment_method", "currency"]
    search_fields = ["transaction_id", "user__email"]
    readonly_fields = ["invoice", "user", "amount", "currency", "payment_date", "transaction_id"]

    def get_queryset(self, request):
        return Payment.all_objects.select_related("invoice", "user")


@admin.register(Refund)
class RefundAdmin(admin.ModelAdmin):
    """Admin for Refund model."""

    list_display = ["transaction_id", "payment", "invoice", "amount", "currency", "refund_date"]
    search_fields = ["transaction_id", "reason"]
    readonly_fields = [
        "payment",
        "invoice",
        "user",
        "amount",
        "currency",
        "refund_date",
        "transaction_id",
    ]

    def get_queryset(self, request):
        return Refund.all_objects.select_related("payment", "invoice")
