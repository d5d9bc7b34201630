"""Pick the release that serves a requested version."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._errors import VersionNotFound

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._catalog import Release
    from ._version import Version

LOGGER = logging.getLogger(__name__)


def resolve(requested: Version, releases: Iterable[Release]) -> Release | None:
    """Pick the first release, in catalog order, that satisfies the request."""
    LOGGER.info("find release for %r", requested)
    for release in releases:
        LOGGER.debug("proposed %s", release)
        if release.version.satisfies(requested):
            LOGGER.info("accepted %s", release.name)
            return release
    return None


def require(requested: Version, releases: Iterable[Release]) -> Release:
    release = resolve(requested, releases)
    if release is None:
        raise VersionNotFound(str(requested))
    return release


__all__ = [
    "require",
    "resolve",
]
