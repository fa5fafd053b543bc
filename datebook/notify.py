"""Local notification planning and delivery backends.

Planning is pure: ``timer_requests`` and ``note_requests`` turn records into
``NotificationRequest`` values. A ``Notifier`` backend holds the pending
requests; identifiers start with the record id so everything belonging to
one record can be cleared by prefix.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import override

from datebook.records import Note, Timer

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class NotificationRequest:
    identifier: str
    title: str
    body: str
    fire_at: datetime


class Notifier(ABC):
    @abstractmethod
    def add(self, request: NotificationRequest) -> None:
        pass

    @abstractmethod
    def pending(self) -> list[NotificationRequest]:
        pass

    @abstractmethod
    def remove(self, identifiers: Iterable[str]) -> None:
        pass

    def remove_prefix(self, prefix: str) -> None:
        """Remove every pending request whose identifier starts with ``prefix``."""
        related = [r.identifier for r in self.pending() if r.identifier.startswith(prefix)]
        if related:
            self.remove(related)


class MemoryNotifier(Notifier):
    """Keeps pending requests in a dict, ordered by insertion."""

    def __init__(self) -> None:
        self._pending: dict[str, NotificationRequest] = {}

    @override
    def add(self, request: NotificationRequest) -> None:
        self._pending[request.identifier] = request
        logger.debug("Scheduled %s at %s", request.identifier, request.fire_at)

    @override
    def pending(self) -> list[NotificationRequest]:
        return list(self._pending.values())

    @override
    def remove(self, identifiers: Iterable[str]) -> None:
        for identifier in identifiers:
            if self._pending.pop(identifier, None) is not None:
                logger.debug("Cancelled %s", identifier)


def timer_requests(timer: Timer) -> list[NotificationRequest]:
    """One "finished" alert for a countdown; from-date timers get none."""
    if not timer.is_countdown:
        return []
    return [
        NotificationRequest(
            identifier=str(timer.id),
            title="Timer Finished",
            body=f"{timer.title} has arrived.",
            fire_at=timer.date,
        )
    ]


def note_requests(note: Note, now: datetime) -> list[NotificationRequest]:
    """Alerts for a note's calendar date and each of its repeat dates.

    Instants already in the past are skipped. Repeat identifiers keep the
    index of the date in ``note.repeat_dates``.
    """
    requests: list[NotificationRequest] = []
    if note.add_to_calendar and note.date >= now:
        requests.append(
            NotificationRequest(
                identifier=f"{note.id}_main",
                title=note.title,
                body="Calendar reminder",
                fire_at=note.date,
            )
        )
    for index, when in enumerate(note.repeat_dates):
        if when < now:
            continue
        requests.append(
            NotificationRequest(
                identifier=f"{note.id}_repeat_{index}",
                title=note.title,
                body="Reminder repeat",
                fire_at=when,
            )
        )
    return requests
