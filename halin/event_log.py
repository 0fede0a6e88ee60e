"""
Bounded audit log of cluster-wide administrative events.
"""
import attr
from attr.validators import instance_of
import copy
from datetime import datetime, timezone
import logging
from pyrsistent import PVector, freeze, thaw, v
from typing import Any, Callable, Mapping, Optional
import uuid

from halin.config import MAX_EVENTS
from halin.errors import ValidationError

logger = logging.getLogger(__name__)


def _required(instance, attribute, value):
    if not isinstance(value, str) or not value:
        raise ValidationError(
            f"Events must have a non-empty `{attribute.name}`, got {value!r}"
        )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@attr.s(frozen=True)
class EventLogEntry:
    """
    An immutable audit record.

    Container payloads are stored frozen, so a dict comes back as a
    ``PMap`` and a list as a ``PVector``; use ``as_dict()`` for plain
    Python data.
    """

    type: str = attr.ib(validator=_required)
    message: str = attr.ib(validator=_required)
    date: str = attr.ib(validator=instance_of(str))
    id: uuid.UUID = attr.ib(validator=instance_of(uuid.UUID))
    payload: Any = attr.ib(default=None)

    def as_dict(self) -> dict:
        return {
            "id": str(self.id),
            "type": self.type,
            "message": self.message,
            "date": self.date,
            "payload": thaw(self.payload),
        }


class EventLog:
    """
    Fixed-capacity FIFO ring of ``EventLogEntry``.

    Once ``capacity`` entries are held, every append evicts the oldest
    entry. Appends are expected to happen on the event loop thread; a
    threaded caller must serialise calls to ``append``.
    """

    def __init__(
        self,
        capacity: int = MAX_EVENTS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self.capacity = capacity
        self.clock = clock
        self._entries: PVector = v()

    def append(self, type: str, message: str, payload: Any = None) -> EventLogEntry:
        """
        Raises:
            ValidationError: if ``type`` or ``message`` is missing or empty.
        """
        entry = EventLogEntry(
            type=type,
            message=message,
            date=self.clock().isoformat(),
            id=uuid.uuid4(),
            # Detach from the caller's payload so later mutation
            # cannot reach the stored entry.
            payload=freeze(copy.deepcopy(payload)),
        )
        entries = self._entries.append(entry)
        if len(entries) > self.capacity:
            entries = entries[len(entries) - self.capacity :]
        self._entries = entries
        logger.debug("Event appended: [%s] %s", entry.type, entry.message)
        return entry

    def append_event(self, event: Mapping[str, Any]) -> EventLogEntry:
        return self.append(
            type=event.get("type"),
            message=event.get("message"),
            payload=event.get("payload"),
        )

    def snapshot(self) -> PVector:
        """
        Entries oldest first.
        """
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)
