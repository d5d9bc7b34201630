"""Retry upstream listings that fail transiently, give up straight away on everything else."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

import httpx

from ._errors import FetchError, RateLimitError, UpstreamDecodeError, UpstreamError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES = 5
BACKOFF = 0.5
# GitHub answers 403 rather than 429 once the anonymous quota is spent
RATE_LIMIT_STATUSES = frozenset({403, 429})


class Outcome(Enum):
    SUCCESS = "success"
    RETRY = "retry"
    ABORT = "abort"


def classify(error: Exception) -> tuple[Outcome, Exception]:
    """Decide what a failed attempt means.

    :returns: the outcome, and the exception to raise should the loop stop here

    """
    if isinstance(error, UpstreamDecodeError):
        return Outcome.RETRY, error
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status >= 500:
            return Outcome.RETRY, error
        if status in RATE_LIMIT_STATUSES:
            return Outcome.ABORT, _caused_by(RateLimitError(status), error)
        return Outcome.ABORT, _caused_by(FetchError(str(error)), error)
    if isinstance(error, httpx.HTTPError):
        return Outcome.ABORT, _caused_by(FetchError(str(error)), error)
    return Outcome.ABORT, error


def _caused_by(error: Exception, cause: Exception) -> Exception:
    error.__cause__ = cause
    return error


async def _attempt(fetch: Callable[[], Awaitable[T]]) -> tuple[Outcome, T | Exception]:
    try:
        return Outcome.SUCCESS, await fetch()
    except (httpx.HTTPError, UpstreamDecodeError) as exception:
        return classify(exception)


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[T]],
    *,
    retries: int = MAX_RETRIES,
    backoff: float = BACKOFF,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Await ``fetch`` until it succeeds, sleeping ``backoff`` seconds (doubled each time) between transient failures.

    At most ``retries`` sleeps happen, followed by one last attempt.

    """
    delay = backoff
    for attempt in range(retries + 1):
        outcome, result = await _attempt(fetch)
        if outcome is Outcome.SUCCESS:
            return result
        if outcome is Outcome.ABORT:
            raise result
        if attempt < retries:
            LOGGER.warning("upstream server error (%s), retrying in %.1fs", result, delay)
            await sleep(delay)
            delay *= 2
    msg = f"upstream still failing after {retries} retries: {result}"
    raise UpstreamError(msg) from result


__all__ = [
    "BACKOFF",
    "MAX_RETRIES",
    "Outcome",
    "classify",
    "fetch_with_retry",
]
