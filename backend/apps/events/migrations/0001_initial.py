import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="OutboxEvent",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "event_id",
                    models.UUIDField(
                        db_index=True,
                        default=uuid.uuid4,
                        help_text="Unique event identifier for consumer idempotency",
                        unique=True,
                    ),
                ),
                ("event_type", models.CharField(db_index=True, help_text="Event type, e.g. 'invoice.paid'", max_length=100)),
                ("aggregate_type", models.CharField(help_text="Entity type, e.g. 'invoice'", max_length=50)),
                ("aggregate_id", models.CharField(max_length=100)),
                ("organization_id", models.CharField(db_index=True, help_text="Tenant organization ID", max_length=100)),
                ("schema_version", models.PositiveIntegerField(default=1)),
                (
                    "payload",
                    models.JSONField(help_text="Complete event envelope including actor, data and correlation_id"),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("published", "Published"), ("failed", "Failed")],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["aggregate_type", "aggregate_id"], name="outbox_aggregate_idx"),
                ],
            },
        ),
    ]
