"""PyPy builds, scraped from the download table on pypy.org."""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from ._catalog import USER_AGENT, Catalog, Release
from ._compat import pypy_platform_tag
from ._config import DEFAULT_TIMEOUT
from ._errors import FetchError
from ._version import PYPY_DOWNLOAD_URL, parse_pypy_url

LOGGER = logging.getLogger(__name__)

PYPY_DOWNLOAD_PAGE = "https://www.pypy.org/download.html"
# html.parser does not insert the implicit <tbody>, so do not require it
LINK_SELECTOR = "table tr > td > p > a[href]"


def parse_download_page(html: str, target: str) -> list[Release]:
    tag = pypy_platform_tag(target)
    releases = []
    for link in BeautifulSoup(html, "html.parser").select(LINK_SELECTOR):
        href = link["href"]
        if not href.startswith(PYPY_DOWNLOAD_URL) or tag not in href:
            continue
        name, release_tag, version = parse_pypy_url(href)
        releases.append(Release(name, href, version, release_tag))
    LOGGER.info("found %d PyPy releases for %s", len(releases), target)
    return releases


def fetch_pypy_releases(client: httpx.Client, target: str) -> list[Release]:
    pypy_platform_tag(target)  # fail on an unknown platform before touching the network
    try:
        response = client.get(PYPY_DOWNLOAD_PAGE)
        response.raise_for_status()
    except httpx.HTTPError as exception:
        msg = f"could not fetch {PYPY_DOWNLOAD_PAGE}: {exception}"
        raise FetchError(msg) from exception
    return parse_download_page(response.text, target)


class PyPyCatalog(Catalog):
    def __init__(
        self,
        target: str,
        timeout: float = DEFAULT_TIMEOUT,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(target)
        self.timeout = timeout
        self.transport = transport

    def run(self) -> list[Release]:
        with httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            return fetch_pypy_releases(client, self.target)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__} of {PYPY_DOWNLOAD_PAGE} for target={self.target!r}"


__all__ = [
    "PYPY_DOWNLOAD_PAGE",
    "PyPyCatalog",
    "fetch_pypy_releases",
    "parse_download_page",
]
