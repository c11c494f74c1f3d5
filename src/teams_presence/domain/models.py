from __future__ import annotations

from typing import Any, Iterator, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, ValidationError, field_validator

from teams_presence.domain.errors import PresenceDecodeError


def _null_as_default(value: Any, default: Any) -> Any:
    return default if value is None else value


class OutOfOfficeSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_out_of_office: StrictBool = Field(default=False, alias="isOutOfOffice")

    @field_validator("is_out_of_office", mode="before")
    @classmethod
    def _null_flag(cls, value: Any) -> Any:
        return _null_as_default(value, False)


class PresenceRecord(BaseModel):
    """Presence of a single user as returned by the Graph presence endpoint.

    Unknown fields are ignored and missing ones fall back to empty values, but a
    field of the wrong JSON type is rejected.
    """

    model_config = ConfigDict(frozen=True)

    identifier: StrictStr = Field(default="", alias="id")
    availability: StrictStr = ""
    activity: StrictStr = ""
    out_of_office_settings: OutOfOfficeSettings = Field(
        default_factory=OutOfOfficeSettings, alias="outOfOfficeSettings"
    )

    @field_validator("identifier", "availability", "activity", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return _null_as_default(value, "")

    @field_validator("out_of_office_settings", mode="before")
    @classmethod
    def _null_settings(cls, value: Any) -> Any:
        return _null_as_default(value, {})

    @property
    def out_of_office(self) -> bool:
        return self.out_of_office_settings.is_out_of_office

    @classmethod
    def from_json(cls, body: Union[bytes, str], identifier: str = "") -> "PresenceRecord":
        if isinstance(body, bytes):
            body = body.decode("utf-8", errors="replace")
        try:
            return cls.model_validate_json(body)
        except ValidationError as exc:
            raise PresenceDecodeError(identifier, f"Could not decode presence response: {exc}") from exc


class RetryPolicy(BaseModel):
    """Exponential backoff without jitter: delay = base * 2 ** attempt."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0)
    base_delay_ms: int = Field(default=500, ge=0)

    @property
    def total_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the failed attempt with zero-based index ``attempt``."""
        return self.base_delay_ms * (2 ** attempt) / 1000

    def delays(self) -> Iterator[float]:
        for attempt in range(self.max_retries):
            yield self.delay_for(attempt)
