from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from teams_presence.domain.errors import PresenceError, PresenceFetchError
from teams_presence.domain.models import PresenceRecord
from teams_presence.ports.presence import PresenceSinkPort, PresenceSourcePort


@dataclass
class LookupSummary:
    processed: int = 0
    succeeded: int = 0

    @property
    def failed(self) -> int:
        return self.processed - self.succeeded


class PresenceLookupService:
    """Drives identifiers one at a time through the presence source and into every sink."""

    def __init__(self, source: PresenceSourcePort, sinks: Sequence[PresenceSinkPort] = ()) -> None:
        self.source = source
        self.sinks: List[PresenceSinkPort] = list(sinks)
        self.logger = logging.getLogger(__name__)

    def process(self, identifier: str) -> Optional[PresenceRecord]:
        try:
            record = self.source.fetch(identifier)
        except PresenceFetchError as e:
            self.logger.error("Could not fetch presence for object ID %s: %s", identifier, e)
            return None
        except PresenceError as e:
            self.logger.error("Skipping object ID %s: %s", identifier, e)
            return None

        for sink in self.sinks:
            sink.write(record)
        return record

    def process_all(self, identifiers: Iterable[str]) -> LookupSummary:
        summary = LookupSummary()
        for identifier in identifiers:
            summary.processed += 1
            if self.process(identifier) is not None:
                summary.succeeded += 1
        return summary
