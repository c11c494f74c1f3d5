from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from pydantic import ValidationError

from teams_presence.adapters.graph.request import PLACEHOLDER_TOKEN
from teams_presence.domain.models import RetryPolicy

ENV_PREFIX = "TEAMS_PRESENCE_"


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    """Runtime configuration loaded from ``TEAMS_PRESENCE_*`` environment variables."""

    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: Optional[float] = None
    auth_token: str = PLACEHOLDER_TOKEN
    log_level: str = "INFO"


def _parse_number(env: Mapping[str, str], name: str, kind: type) -> Optional[float]:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw.strip())
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build ``Settings`` from the environment.

    Recognised variables:
    - TEAMS_PRESENCE_MAX_RETRIES   (default: 3)
    - TEAMS_PRESENCE_BASE_DELAY_MS (default: 500)
    - TEAMS_PRESENCE_TIMEOUT       seconds per request (default: no timeout)
    - TEAMS_PRESENCE_TOKEN         bearer token (default: proxy placeholder)
    - TEAMS_PRESENCE_LOG_LEVEL     (default: INFO)
    """
    env = os.environ if env is None else env

    policy_values = {}
    max_retries = _parse_number(env, "MAX_RETRIES", int)
    if max_retries is not None:
        policy_values["max_retries"] = max_retries
    base_delay_ms = _parse_number(env, "BASE_DELAY_MS", int)
    if base_delay_ms is not None:
        policy_values["base_delay_ms"] = base_delay_ms
    try:
        retry_policy = RetryPolicy(**policy_values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid retry policy: {e}") from e

    timeout = _parse_number(env, "TIMEOUT", float)
    if timeout is not None and timeout <= 0:
        raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT must be positive, got {timeout}")

    log_level = env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").strip().upper() or "INFO"

    return Settings(
        retry_policy=retry_policy,
        timeout=timeout,
        auth_token=env.get(ENV_PREFIX + "TOKEN") or PLACEHOLDER_TOKEN,
        log_level=log_level,
    )
