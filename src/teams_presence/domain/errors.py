from __future__ import annotations

from typing import Optional


class PresenceError(Exception):
    """Base class for failures while looking up a single identifier."""

    def __init__(self, identifier: str, message: str) -> None:
        super().__init__(f"{message} (object ID {identifier})")
        self.identifier = identifier


class RequestConstructionError(PresenceError):
    pass


class PresenceFetchError(PresenceError):
    """Raised once every attempt allowed by the retry policy has failed."""

    def __init__(self, identifier: str, message: str, attempts: int) -> None:
        super().__init__(identifier, f"{message} after {attempts} attempt(s)")
        self.attempts = attempts


class PresenceTransportError(PresenceFetchError):
    pass


class PresenceStatusError(PresenceFetchError):
    def __init__(self, identifier: str, status_code: int, attempts: int) -> None:
        super().__init__(identifier, f"Unexpected HTTP status {status_code}", attempts)
        self.status_code = status_code


class BodyReadError(PresenceError):
    pass


class PresenceDecodeError(PresenceError):
    pass


class ExportSetupError(Exception):
    """The export file could not be created or its header written."""


class InputReadError(Exception):
    """The identifier file could not be opened or read."""

    def __init__(self, path: str, message: str, line_number: Optional[int] = None) -> None:
        location = f"{path}:{line_number}" if line_number is not None else path
        super().__init__(f"{message}: {location}")
        self.path = path
        self.line_number = line_number
