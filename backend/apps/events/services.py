"""
Event services - ledger events written through the transactional outbox.

Every billing write records its event in the same transaction, so an
outbox row exists exactly when the write it describes committed.
"""

from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

import structlog
from django.db import models

from apps.core.logging import get_logger
from apps.events.models import OutboxEvent
from apps.events.schemas import MAX_PAYLOAD_SIZE_BYTES, ActorSchema, EventEnvelope

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

SYSTEM_ACTOR = ActorSchema(type="system", id="system")

_correlation_id: ContextVar[UUID | None] = ContextVar("outbox_correlation_id", default=None)


def set_correlation_id(correlation_id: UUID | None) -> None:
    """Tag events published from the current context with a request trace id."""
    _correlation_id.set(correlation_id)


def get_correlation_id() -> UUID | None:
    return _correlation_id.get()


def _aggregate_type(aggregate: models.Model) -> str:
    return aggregate._meta.model_name


def _resolve_organization_id(aggregate: models.Model) -> str:
    """
    Find the tenant that owns an aggregate.

    Organizations own themselves. Tenant-scoped rows carry organization_id.
    Payments and refunds hang off an invoice and inherit its organization.
    """
    if isinstance(aggregate, _organization_model()):
        return str(aggregate.pk)

    organization_id = getattr(aggregate, "organization_id", None)
    if organization_id is None and getattr(aggregate, "invoice_id", None) is not None:
        organization_id = aggregate.invoice.organization_id

    if organization_id is None:
        raise ValueError(
            f"Cannot determine organization_id for {_aggregate_type(aggregate)}. "
            "Pass organization_id explicitly."
        )
    return str(organization_id)


def _organization_model() -> type[models.Model]:
    from apps.organizations.models import Organization

    return Organization


def _actor(user: "User | None") -> ActorSchema:
    if user is None:
        return SYSTEM_ACTOR
    return ActorSchema(type="user", id=str(user.pk), email=user.email)


def _request_context() -> dict[str, Any]:
    """Client details bound to the log context by CallerScopeMiddleware."""
    bound = structlog.contextvars.get_contextvars()
    return {
        "ip_address": bound.get("request.ip_address"),
        "user_agent": bound.get("request.user_agent", ""),
    }


def publish_event(
    event_type: str,
    aggregate: models.Model,
    data: dict[str, Any],
    actor: "User | None" = None,
    organization_id: str | None = None,
    schema_version: int = 1,
) -> OutboxEvent:
    """
    Record a ledger event in the outbox.

    Must run inside the transaction.atomic() block of the write it describes;
    if that block rolls back, so does the event.

    Args:
        event_type: Dotted event name, e.g. 'invoice.paid'
        aggregate: Ledger row the event is about
        data: Event values; request context keys are filled in unless given
        actor: Acting user, or None for system events
        organization_id: Owning tenant; resolved from the aggregate when omitted
        schema_version: Version of the `data` layout

    Raises:
        ValueError: The tenant cannot be resolved, or the serialized envelope
            exceeds MAX_PAYLOAD_SIZE_BYTES
    """
    envelope = EventEnvelope(
        event_id=uuid4(),
        event_type=event_type,
        schema_version=schema_version,
        occurred_at=datetime.now(UTC),
        aggregate_id=str(aggregate.pk),
        aggregate_type=_aggregate_type(aggregate),
        organization_id=organization_id or _resolve_organization_id(aggregate),
        correlation_id=get_correlation_id(),
        actor=_actor(actor),
        data={**_request_context(), **data},
    )

    size = len(envelope.model_dump_json().encode("utf-8"))
    if size > MAX_PAYLOAD_SIZE_BYTES:
        raise ValueError(
            f"Event payload of {size} bytes exceeds {MAX_PAYLOAD_SIZE_BYTES} bytes limit. "
            "Reference large data instead of embedding it."
        )

    outbox_event = OutboxEvent.objects.create(
        event_id=envelope.event_id,
        event_type=envelope.event_type,
        aggregate_type=envelope.aggregate_type,
        aggregate_id=envelope.aggregate_id,
        organization_id=envelope.organization_id,
        schema_version=envelope.schema_version,
        payload=envelope.model_dump(mode="json"),
    )

    logger.debug(
        "outbox_event_created",
        event_type=event_type,
        event_id=str(envelope.event_id),
        organization_id=envelope.organization_id,
    )
    return outbox_event
