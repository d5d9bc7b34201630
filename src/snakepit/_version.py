"""A version identifies one interpreter build, or a family of builds when the bugfix component is left out."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING

from ._errors import InvalidVersion, ParseAssetError

if TYPE_CHECKING:
    from re import Match

PYPY_DOWNLOAD_URL = "https://downloads.python.org/pypy/"
MAX_COMPONENT = 255

_GRAMMAR = r"""
    (?P<impl>pypy)?                             # implementation, CPython when absent
    (?P<major>[0-9]+)\.(?P<minor>[0-9]+)        # version family (e.g. 3.12)
    (?:\.(?P<bugfix>[0-9]+))?                   # bugfix release (e.g. 3.12.1)
    (?:(?P<pre>a|b|rc)(?P<serial>[0-9]+))?      # pre-release qualifier (e.g. rc2)
    (?P<threaded>t)?                            # free-threaded flag
    (?P<debug>-debug)?                          # debug build flag
"""
PATTERN = re.compile(_GRAMMAR, re.VERBOSE)
CPYTHON_ASSET_PATTERN = re.compile(
    r"""
    cpython-
    """
    + _GRAMMAR
    + r"""
    \+(?P<release_tag>[0-9]+)                   # build date of the release
    """,
    re.VERBOSE,
)


@total_ordering
class Interpreter(Enum):
    CPYTHON = "cpython"
    PYPY = "pypy"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Interpreter):
            return NotImplemented
        members = list(Interpreter)
        return members.index(self) < members.index(other)


class PreReleaseKind(Enum):
    ALPHA = "a"
    BETA = "b"
    RELEASE_CANDIDATE = "rc"


@dataclass(frozen=True)
class PreRelease:
    kind: PreReleaseKind
    number: int

    def __str__(self) -> str:
        return f"{self.kind.value}{self.number}"

    @property
    def rank(self) -> tuple[int, int]:
        return list(PreReleaseKind).index(self.kind), self.number


_FINAL_RANK = (len(PreReleaseKind), 0)


@total_ordering
@dataclass(frozen=True, eq=True)
class Version:
    """Contains the identity of an interpreter distribution."""

    interpreter: Interpreter
    major: int
    minor: int
    bugfix: int | None = None
    debug: bool = False
    freethreaded: bool = False
    prerelease: PreRelease | None = None

    def __post_init__(self) -> None:
        components = [self.major, self.minor, self.bugfix]
        if self.prerelease is not None:
            components.append(self.prerelease.number)
        for value in components:
            if value is not None and not 0 <= value <= MAX_COMPONENT:
                raise InvalidVersion(str(self))

    @classmethod
    def from_string(cls, text: str) -> Version:
        return parse_version(text)

    @property
    def is_concrete(self) -> bool:
        return self.bugfix is not None

    def _sort_key(self) -> tuple:
        return (
            list(Interpreter).index(self.interpreter),
            self.major,
            self.minor,
            -1 if self.bugfix is None else self.bugfix,
            self.debug,
            self.freethreaded,
            _FINAL_RANK if self.prerelease is None else self.prerelease.rank,
        )

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def satisfies(self, requested: Version) -> bool:
        """Called with a user request to see if this concrete release can serve it.

        A partial request (no bugfix) only ever matches final releases of the same family and build flavour.

        """
        if self == requested:
            return True
        return (
            self.interpreter == requested.interpreter
            and self.major == requested.major
            and self.minor == requested.minor
            and self.debug == requested.debug
            and self.freethreaded == requested.freethreaded
            and self.prerelease is None
            and requested.prerelease is None
            and self.bugfix is not None
            and requested.bugfix is None
        )

    def __str__(self) -> str:
        prefix = "pypy" if self.interpreter is Interpreter.PYPY else ""
        bugfix = "" if self.bugfix is None else f".{self.bugfix}"
        prerelease = "" if self.prerelease is None else str(self.prerelease)
        threaded = "t" if self.freethreaded else ""
        debug = "-debug" if self.debug else ""
        return f"{prefix}{self.major}.{self.minor}{bugfix}{prerelease}{threaded}{debug}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


def compatible(requested: Version, candidate: Version) -> bool:
    return candidate.satisfies(requested)


def _from_match(match: Match[str]) -> Version:
    groups = match.groupdict()
    prerelease = None
    if groups["pre"] is not None:
        prerelease = PreRelease(PreReleaseKind(groups["pre"]), int(groups["serial"]))
    return Version(
        Interpreter.PYPY if groups["impl"] else Interpreter.CPYTHON,
        int(groups["major"]),
        int(groups["minor"]),
        None if groups["bugfix"] is None else int(groups["bugfix"]),
        debug=bool(groups["debug"]),
        freethreaded=bool(groups["threaded"]),
        prerelease=prerelease,
    )


def parse_version(text: str) -> Version:
    """Parse a user supplied version, the whole string must follow the grammar."""
    match = PATTERN.fullmatch(text)
    if match is None:
        raise InvalidVersion(text)
    try:
        return _from_match(match)
    except InvalidVersion:
        raise InvalidVersion(text) from None


def parse_cpython_filename(filename: str) -> tuple[str, Version]:
    """Parse the release tag and version out of a python-build-standalone asset name.

    Anything after the release tag is only inspected for the ``freethreaded`` and ``debug`` build markers.

    """
    match = CPYTHON_ASSET_PATTERN.match(filename)
    if match is None:
        raise ParseAssetError(filename)
    try:
        version = _from_match(match)
    except InvalidVersion:
        raise ParseAssetError(filename) from None
    rest = filename[match.end() :]
    version = Version(
        version.interpreter,
        version.major,
        version.minor,
        version.bugfix,
        debug=version.debug or "debug" in rest,
        freethreaded=version.freethreaded or "freethreaded" in rest,
        prerelease=version.prerelease,
    )
    return match["release_tag"], version


def parse_pypy_url(url: str) -> tuple[str, str, Version]:
    """Parse a pypy.org download link into its file name, release tag and version."""
    if not url.startswith(PYPY_DOWNLOAD_URL):
        raise ParseAssetError(url)
    filename = url[len(PYPY_DOWNLOAD_URL) :]
    match = PATTERN.match(filename)
    if match is None:
        raise ParseAssetError(url)
    rest = filename[match.end() :]
    release_tag, sep, _ = rest[1:].partition("-")
    if not rest.startswith("-") or not sep:
        raise ParseAssetError(url)
    try:
        version = _from_match(match)
    except InvalidVersion:
        raise ParseAssetError(url) from None
    return filename, release_tag, version


__all__ = [
    "PYPY_DOWNLOAD_URL",
    "Interpreter",
    "PreRelease",
    "PreReleaseKind",
    "Version",
    "compatible",
    "parse_cpython_filename",
    "parse_pypy_url",
    "parse_version",
]
