"""Exceptions raised while resolving, fetching and installing interpreters."""

from __future__ import annotations


class SnakepitError(Exception):
    """Base class of every error raised by snakepit."""


class InvalidVersion(SnakepitError, ValueError):
    def __init__(self, version: str) -> None:
        super().__init__(f"{version} is not a valid Python version")
        self.version = version


class UpgradeError(InvalidVersion):
    def __init__(self, version: str) -> None:
        SnakepitError.__init__(self, f"only x.y Python versions can be upgraded, not {version}")
        self.version = version


class VersionNotFound(SnakepitError):
    def __init__(self, version: str) -> None:
        super().__init__(f"could not find {version} to download")
        self.version = version


class UnsupportedPlatform(SnakepitError):
    def __init__(self, platform: str) -> None:
        super().__init__(f"{platform} is not supported")
        self.platform = platform


class FetchError(SnakepitError):
    """Listing the releases of an upstream catalog failed."""


class ParseAssetError(FetchError):
    def __init__(self, asset: str) -> None:
        super().__init__(f"could not parse version and release tag from {asset}")
        self.asset = asset


class UpstreamDecodeError(FetchError):
    """The upstream answered, but the body is not the document we expect."""


class UpstreamError(FetchError):
    """The upstream kept failing after every retry."""


class RateLimitError(FetchError):
    def __init__(self, status: int) -> None:
        super().__init__(
            f"GitHub refused the release listing (HTTP {status}); the API rate limit is probably exhausted, "
            "wait for the quota to reset or export GITHUB_TOKEN to raise it",
        )
        self.status = status


class InstallError(SnakepitError):
    """The unpacked distribution does not have the layout we rely on."""


__all__ = [
    "FetchError",
    "InstallError",
    "InvalidVersion",
    "ParseAssetError",
    "RateLimitError",
    "SnakepitError",
    "UnsupportedPlatform",
    "UpgradeError",
    "UpstreamDecodeError",
    "UpstreamError",
    "VersionNotFound",
]
