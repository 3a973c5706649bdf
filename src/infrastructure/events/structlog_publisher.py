"""Event publisher that writes domain events to the structured log."""

import dataclasses
from enum import Enum
from typing import Any
from uuid import UUID

import structlog

from domain.entities.audit import DomainEvent

logger = structlog.get_logger("events")


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return value


class StructlogEventPublisher:
    """IEventPublisher that emits one log record per event.

    Fields declared with ``repr=False`` (secrets such as verification codes)
    are left out of the record.
    """

    async def publish(self, event: DomainEvent) -> None:
        fields = {
            f.name: _jsonable(getattr(event, f.name))
            for f in dataclasses.fields(event)
            if f.repr
        }
        logger.info("domain_event", event_name=event.name, **fields)
