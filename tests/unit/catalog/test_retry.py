from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from snakepit import FetchError, RateLimitError, UpstreamDecodeError, UpstreamError
from snakepit._retry import Outcome, classify, fetch_with_retry

REQUEST = httpx.Request("GET", "https://api.github.com/repos/astral-sh/python-build-standalone/releases")


def _status(code: int) -> httpx.HTTPStatusError:
    return httpx.HTTPStatusError(f"HTTP {code}", request=REQUEST, response=httpx.Response(code, request=REQUEST))


class Script:
    """Replay failures, then succeed with ``result``."""

    def __init__(self, *failures: Exception, result: object = "listing") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0
        self.sleeps: list[float] = []

    async def fetch(self) -> object:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)

    def run(self, **kwargs: object) -> object:
        return asyncio.run(fetch_with_retry(self.fetch, sleep=self.sleep, **kwargs))


def test_success_first_try():
    script = Script()

    assert script.run() == "listing"
    assert script.calls == 1
    assert script.sleeps == []


def test_server_errors_then_success(caplog):
    caplog.set_level(logging.WARNING)
    script = Script(_status(500), _status(502), _status(503))

    assert script.run() == "listing"
    assert script.calls == 4
    assert script.sleeps == [0.5, 1.0, 2.0]
    assert sum("retrying" in record.message for record in caplog.records) == 3


@pytest.mark.parametrize("code", [429, 403])
def test_rate_limit_aborts_immediately(code):
    script = Script(_status(code))

    with pytest.raises(RateLimitError) as context:
        script.run()
    assert context.value.status == code
    assert isinstance(context.value.__cause__, httpx.HTTPStatusError)
    assert script.calls == 1
    assert script.sleeps == []


def test_other_status_aborts_without_retry():
    script = Script(_status(404))

    with pytest.raises(FetchError) as context:
        script.run()
    assert not isinstance(context.value, RateLimitError)
    assert script.calls == 1
    assert script.sleeps == []


def test_transport_error_aborts_without_retry():
    script = Script(httpx.ConnectError("connection refused", request=REQUEST))

    with pytest.raises(FetchError, match="connection refused"):
        script.run()
    assert script.calls == 1


def test_retries_exhausted():
    script = Script(*(UpstreamDecodeError("truncated body") for _ in range(6)))

    with pytest.raises(UpstreamError) as context:
        script.run()
    assert isinstance(context.value.__cause__, UpstreamDecodeError)
    assert script.calls == 6
    assert script.sleeps == [0.5, 1.0, 2.0, 4.0, 8.0]


def test_without_retries_single_attempt():
    script = Script(_status(503))

    with pytest.raises(UpstreamError, match="after 0 retries"):
        script.run(retries=0)
    assert script.calls == 1
    assert script.sleeps == []


def test_rate_limit_on_final_attempt():
    script = Script(*(_status(500) for _ in range(5)), _status(429))

    with pytest.raises(RateLimitError):
        script.run()
    assert script.calls == 6
    assert len(script.sleeps) == 5


def test_unrelated_errors_propagate():
    script = Script(KeyError("bug"))

    with pytest.raises(KeyError):
        script.run()
    assert script.calls == 1


@pytest.mark.parametrize(
    ("error", "outcome", "raised"),
    [
        (_status(500), Outcome.RETRY, httpx.HTTPStatusError),
        (_status(504), Outcome.RETRY, httpx.HTTPStatusError),
        (UpstreamDecodeError("bad json"), Outcome.RETRY, UpstreamDecodeError),
        (_status(429), Outcome.ABORT, RateLimitError),
        (_status(403), Outcome.ABORT, RateLimitError),
        (_status(401), Outcome.ABORT, FetchError),
        (httpx.ReadTimeout("slow", request=REQUEST), Outcome.ABORT, FetchError),
    ],
)
def test_classify(error, outcome, raised):
    result, exception = classify(error)

    assert result is outcome
    assert isinstance(exception, raised)
