"""CPython builds, listed through the GitHub releases API of python-build-standalone."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import httpx

from ._catalog import USER_AGENT, Catalog, Release
from ._config import DEFAULT_TIMEOUT
from ._errors import UpstreamDecodeError
from ._retry import BACKOFF, MAX_RETRIES, fetch_with_retry
from ._version import parse_cpython_filename

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ._version import Version

LOGGER = logging.getLogger(__name__)

GITHUB_RELEASES_URL = "https://api.github.com/repos/astral-sh/python-build-standalone/releases"
# older releases use an asset naming scheme we cannot parse
CUTOFF = datetime(2022, 2, 26, tzinfo=timezone.utc)
PER_PAGE = 100


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _decode(response: httpx.Response) -> list[tuple[datetime, list[tuple[str, str]]]]:
    try:
        return [
            (
                _parse_timestamp(release["created_at"]),
                [(asset["name"], asset["browser_download_url"]) for asset in release["assets"]],
            )
            for release in response.json()
        ]
    except (ValueError, KeyError, TypeError, AttributeError) as exception:
        msg = f"unexpected release listing from {response.url}: {exception!r}"
        raise UpstreamDecodeError(msg) from exception


def installable(name: str, version: Version) -> bool:
    """Only one archive flavour per build is understood by the installer."""
    if version.debug or version.freethreaded:
        return name.endswith("-full.tar.zst")
    return name.endswith("-install_only.tar.gz")


async def fetch_cpython_releases(client: httpx.AsyncClient, target: str) -> list[Release]:
    """Walk the paginated release feed, newest first, until the cutoff is reached.

    Any asset that passes the platform filter must parse; a name we do not understand means upstream changed its
    naming and is raised as :class:`ParseAssetError` rather than skipped.

    """
    releases: list[Release] = []
    url: str | None = GITHUB_RELEASES_URL
    params: dict[str, int] | None = {"per_page": PER_PAGE}
    while url is not None:
        response = await client.get(url, params=params)
        response.raise_for_status()
        reached_cutoff = False
        for created_at, assets in _decode(response):
            if created_at <= CUTOFF:
                reached_cutoff = True
                continue
            for name, download_url in assets:
                if name.endswith(".sha256") or target not in name:
                    continue
                release_tag, version = parse_cpython_filename(name)
                if not installable(name, version):
                    LOGGER.debug("skip %s, not an installable flavour", name)
                    continue
                releases.append(Release(name, download_url, version, release_tag))
        url = None if reached_cutoff else response.links.get("next", {}).get("url")
        params = None
    LOGGER.info("found %d CPython releases for %s", len(releases), target)
    return releases


class CPythonCatalog(Catalog):
    def __init__(  # noqa: PLR0913
        self,
        target: str,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        retries: int = MAX_RETRIES,
        backoff: float = BACKOFF,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        super().__init__(target)
        self.token = token
        self.timeout = timeout
        self.transport = transport
        self.retries = retries
        self.backoff = backoff
        self.sleep = sleep

    def run(self) -> list[Release]:
        return asyncio.run(self._run())

    async def _run(self) -> list[Release]:
        headers = {"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        async with httpx.AsyncClient(
            headers=headers,
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            return await fetch_with_retry(
                lambda: fetch_cpython_releases(client, self.target),
                retries=self.retries,
                backoff=self.backoff,
                sleep=self.sleep,
            )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__} of {GITHUB_RELEASES_URL} for target={self.target!r}"


__all__ = [
    "CUTOFF",
    "GITHUB_RELEASES_URL",
    "CPythonCatalog",
    "fetch_cpython_releases",
    "installable",
]
