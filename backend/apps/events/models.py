"""
Events models - transactional outbox for ledger domain events.
"""

import uuid

from django.db import models


class OutboxEvent(models.Model):
    """
    Domain event persisted atomically with the ledger write that caused it.

    Rows start as PENDING; relaying them to a message bus is left to a
    separate consumer.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PUBLISHED = "published", "Published"
        FAILED = "failed", "Failed"

    id = models.BigAutoField(primary_key=True)

    # Idempotency key for consumers
    event_id = models.UUIDField(
        unique=True,
        default=uuid.uuid4,
        db_index=True,
        help_text="Unique event identifier for consumer idempotency",
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Event type, e.g. 'invoice.paid'",
    )
    aggregate_type = models.CharField(
        max_length=50,
        help_text="Entity type, e.g. 'invoice'",
    )
    aggregate_id = models.CharField(max_length=100)
    organization_id = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Tenant organization ID",
    )
    schema_version = models.PositiveIntegerField(default=1)

    payload = models.JSONField(
        help_text="Complete event envelope including actor, data and correlation_id",
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["aggregate_type", "aggregate_id"], name="outbox_aggregate_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.event_type} ({self.status})"
