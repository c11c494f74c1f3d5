from __future__ import annotations

from typing import Protocol

from teams_presence.domain.models import PresenceRecord


class PresenceSourcePort:
    """Looks up the current presence of a single identifier."""

    def fetch(self, identifier: str) -> PresenceRecord:
        raise NotImplementedError


class PresenceSinkPort(Protocol):
    """Output port receiving every successfully decoded record, in processing order."""

    def write(self, record: PresenceRecord) -> None:
        ...
