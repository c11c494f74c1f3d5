from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx

from teams_presence.adapters.graph.request import PLACEHOLDER_TOKEN, build_presence_request
from teams_presence.domain.errors import BodyReadError, PresenceStatusError, PresenceTransportError
from teams_presence.domain.models import PresenceRecord, RetryPolicy
from teams_presence.ports.presence import PresenceSourcePort

logger = logging.getLogger(__name__)


class GraphPresenceClient(PresenceSourcePort):
    """Fetches presence through the Graph Explorer proxy, retrying with exponential backoff."""

    def __init__(
        self,
        client: httpx.Client,
        retry_policy: Optional[RetryPolicy] = None,
        auth_token: str = PLACEHOLDER_TOKEN,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self.auth_token = auth_token
        self._sleep = sleep

    def fetch(self, identifier: str) -> PresenceRecord:
        request = build_presence_request(identifier, auth_token=self.auth_token, timeout=self.client.timeout)
        response = self.send_with_retry(identifier, request)
        try:
            body = response.read()
        except (httpx.StreamError, httpx.RequestError) as e:
            raise BodyReadError(identifier, f"Error reading response: {e}") from e
        finally:
            response.close()
        return PresenceRecord.from_json(body, identifier=identifier)

    def send_with_retry(self, identifier: str, request: httpx.Request) -> httpx.Response:
        """Send ``request`` until it returns 200 or the retry policy is exhausted.

        The returned response is streamed and must be closed by the caller.
        """
        policy = self.retry_policy
        for attempt in range(policy.total_attempts):
            transport_error: Optional[httpx.TransportError] = None
            status_code: Optional[int] = None
            try:
                response = self.client.send(request, stream=True)
            except httpx.TransportError as e:
                transport_error = e
                logger.warning(
                    "Attempt %d/%d for object ID %s failed: %s",
                    attempt + 1,
                    policy.total_attempts,
                    identifier,
                    e,
                )
            else:
                if response.status_code == httpx.codes.OK:
                    return response
                status_code = response.status_code
                response.close()
                logger.warning(
                    "Attempt %d/%d for object ID %s returned HTTP %d",
                    attempt + 1,
                    policy.total_attempts,
                    identifier,
                    status_code,
                )

            if attempt < policy.max_retries:
                self._sleep(policy.delay_for(attempt))

        if transport_error is not None:
            raise PresenceTransportError(
                identifier, f"Error making request: {transport_error}", policy.total_attempts
            ) from transport_error
        raise PresenceStatusError(identifier, status_code, policy.total_attempts)
