from typing import List, Optional

import httpx
import pytest

from teams_presence.adapters.graph.client import GraphPresenceClient
from teams_presence.application.services import PresenceLookupService
from teams_presence.domain.errors import (
    BodyReadError,
    PresenceDecodeError,
    PresenceFetchError,
    PresenceStatusError,
    PresenceTransportError,
)
from teams_presence.domain.models import RetryPolicy

PAYLOAD = {
    "id": "u1",
    "availability": "Busy",
    "activity": "InAMeeting",
    "outOfOfficeSettings": {"isOutOfOffice": True},
}


class FlakyGraph:
    """Fails every attempt before ``succeed_on`` (1-based) and then returns the payload."""

    def __init__(self, succeed_on: Optional[int], failure: str = "status") -> None:
        self.succeed_on = succeed_on
        self.failure = failure
        self.attempts = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.attempts += 1
        if self.succeed_on is not None and self.attempts >= self.succeed_on:
            return httpx.Response(200, json=PAYLOAD)
        if self.failure == "transport":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(503, text="unavailable")


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _client(handler, sleep: RecordingSleep, policy: Optional[RetryPolicy] = None) -> GraphPresenceClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return GraphPresenceClient(http, retry_policy=policy, sleep=sleep)


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_succeeds_after_k_attempts_with_k_minus_one_delays(k):
    graph = FlakyGraph(succeed_on=k)
    sleep = RecordingSleep()

    record = _client(graph, sleep).fetch("u1")

    assert record.availability == "Busy"
    assert record.out_of_office is True
    assert graph.attempts == k
    assert sleep.calls == [0.5, 1.0, 2.0][: k - 1]


def test_non_200_exhausts_every_attempt():
    graph = FlakyGraph(succeed_on=None)
    sleep = RecordingSleep()

    with pytest.raises(PresenceStatusError) as excinfo:
        _client(graph, sleep).fetch("u1")

    assert graph.attempts == 4
    assert excinfo.value.status_code == 503
    assert excinfo.value.attempts == 4
    assert sum(sleep.calls) == pytest.approx(3.5)


def test_transport_errors_exhaust_every_attempt():
    graph = FlakyGraph(succeed_on=None, failure="transport")
    sleep = RecordingSleep()

    with pytest.raises(PresenceTransportError) as excinfo:
        _client(graph, sleep).fetch("u1")

    assert graph.attempts == 4
    assert sleep.calls == [0.5, 1.0, 2.0]
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)
    assert isinstance(excinfo.value, PresenceFetchError)


def test_final_status_failure_after_earlier_transport_errors():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] < 4:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(404)

    with pytest.raises(PresenceStatusError) as excinfo:
        _client(handler, RecordingSleep()).fetch("u1")
    assert excinfo.value.status_code == 404


def test_custom_retry_policy():
    graph = FlakyGraph(succeed_on=None)
    sleep = RecordingSleep()

    with pytest.raises(PresenceStatusError):
        _client(graph, sleep, RetryPolicy(max_retries=1, base_delay_ms=100)).fetch("u1")

    assert graph.attempts == 2
    assert sleep.calls == [0.1]


def test_request_targets_proxy_for_identifier():
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=PAYLOAD)

    _client(handler, RecordingSleep()).fetch("someone@example.com")

    assert seen[0].url.params["url"] == "https://graph.microsoft.com/beta/users/someone@example.com/presence"


def test_body_read_failure():
    class BrokenStream(httpx.SyncByteStream):
        def __iter__(self):
            raise httpx.ReadError("connection reset")
            yield b""  # pragma: no cover

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=BrokenStream())

    with pytest.raises(BodyReadError):
        _client(handler, RecordingSleep()).fetch("u1")


def test_corrupt_content_encoding_is_a_body_read_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")

    with pytest.raises(BodyReadError) as excinfo:
        _client(handler, RecordingSleep()).fetch("u1")
    assert isinstance(excinfo.value.__cause__, httpx.DecodingError)


def test_corrupt_body_does_not_stop_remaining_identifiers():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["url"].endswith("/u1/presence"):
            return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")
        return httpx.Response(200, json=PAYLOAD)

    service = PresenceLookupService(_client(handler, RecordingSleep()))
    summary = service.process_all(["u1", "u2"])

    assert (summary.processed, summary.succeeded) == (2, 1)


def test_decode_failure_is_not_retried():
    graph_calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        graph_calls["count"] += 1
        return httpx.Response(200, text="<html>sign in</html>")

    sleep = RecordingSleep()
    with pytest.raises(PresenceDecodeError):
        _client(handler, sleep).fetch("u1")
    assert graph_calls["count"] == 1
    assert sleep.calls == []
