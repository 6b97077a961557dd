import django.db.models.deletion
from django.db import migrations, models


def ledger_fields():
    return [
        ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("deleted_at", models.DateTimeField(blank=True, db_index=True, null=True)),
    ]


def organization_fk(related_name):
    return (
        "organization",
        models.ForeignKey(
            on_delete=django.db.models.deletion.PROTECT,
            related_name=related_name,
            to="organizations.organization",
        ),
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("organizations", "0001_initial"),
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SubscriptionPlan",
            fields=[
                *ledger_fields(),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, help_text="Non-negative price per interval", max_digits=12)),
                ("currency", models.CharField(default="USD", max_length=3)),
                (
                    "interval",
                    models.CharField(
                        default="monthly",
                        help_text="Billing interval label, e.g. 'monthly' or 'yearly'",
                        max_length=32,
                    ),
                ),
                organization_fk("subscriptionplan_set"),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("organization", "name"), name="uniq_plan_name_per_org"),
                    models.CheckConstraint(condition=models.Q(("price__gte", 0)), name="plan_price_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Subscription",
            fields=[
                *ledger_fields(),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                organization_fk("subscription_set"),
                (
                    "plan",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="subscriptions",
                        to="billing.subscriptionplan",
                    ),
                ),
            ],
            options={
                "ordering": ["-start_date", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_active", True)),
                        fields=("organization",),
                        name="uniq_active_subscription_per_org",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=[
                *ledger_fields(),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("issue_date", models.DateTimeField()),
                ("due_date", models.DateTimeField()),
                ("is_paid", models.BooleanField(db_index=True, default=False)),
                organization_fk("invoice_set"),
                (
                    "subscription",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="billing.subscription",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who triggered the invoice",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="invoices",
                        to="accounts.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-issue_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=[
                *ledger_fields(),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("payment_date", models.DateTimeField()),
                ("transaction_id", models.CharField(max_length=255, unique=True)),
                ("payment_method", models.CharField(blank=True, max_length=64)),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="billing.invoice",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who made the payment",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payments",
                        to="accounts.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-payment_date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Refund",
            fields=[
                *ledger_fields(),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("refund_date", models.DateTimeField()),
                ("transaction_id", models.CharField(max_length=255)),
                ("reason", models.TextField()),
                (
                    "invoice",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refunds",
                        to="billing.invoice",
                    ),
                ),
                (
                    "payment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refunds",
                        to="billing.payment",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        help_text="User who requested the refund",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="refunds",
                        to="accounts.user",
                    ),
                ),
            ],
            options={
                "ordering": ["-refund_date", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("payment", "transaction_id"),
                        name="uniq_refund_transaction_per_payment",
                    ),
                ],
            },
        ),
    ]
