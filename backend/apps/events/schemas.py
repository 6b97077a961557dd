"""
Event schemas - Pydantic models for the outbox event envelope.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class ActorSchema(BaseModel):
    """Who caused the event."""

    type: str = Field(description="Actor type: 'user' or 'system'")
    id: str = Field(description="Actor identifier")
    email: str | None = Field(default=None, description="Actor email if user")


class EventEnvelope(BaseModel):
    """
    Standard event envelope.

    Every ledger event carries the same identity, tenant and tracing fields;
    event-specific values live in `data`.
    """

    event_id: UUID = Field(description="Unique event ID for idempotency")
    event_type: str = Field(description="Event type, e.g. 'invoice.paid'")
    schema_version: int = Field(default=1, description="Payload schema version")

    occurred_at: datetime = Field(description="When the event happened (UTC)")

    aggregate_id: str = Field(description="Entity primary key")
    aggregate_type: str = Field(description="Entity type, e.g. 'invoice'")

    organization_id: str = Field(description="Organization ID for tenant scoping")

    correlation_id: UUID | None = Field(
        default=None, description="Request trace ID for correlation"
    )

    actor: ActorSchema = Field(description="Who caused the event")

    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


# Upper bound for a single serialized envelope
MAX_PAYLOAD_SIZE_BYTES = 256 * 1024
