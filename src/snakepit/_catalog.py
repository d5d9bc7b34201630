"""Abstract base class for upstream release catalogs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ._version import Interpreter, Version

USER_AGENT = "snakepit"


@dataclass(frozen=True)
class Release:
    """One downloadable interpreter archive."""

    name: str
    url: str
    version: Version
    release_tag: str

    @property
    def interpreter(self) -> Interpreter:
        return self.version.interpreter

    @property
    def debug(self) -> bool:
        return self.version.debug

    @property
    def freethreaded(self) -> bool:
        return self.version.freethreaded

    @property
    def relocated(self) -> bool:
        """Debug and free-threaded archives unpack under ``python/install`` instead of ``python``."""
        return self.debug or self.freethreaded

    def __str__(self) -> str:
        return f"{self.version} ({self.release_tag})"


class Catalog(ABC):
    """List the releases an upstream source offers for the running platform."""

    def __init__(self, target: str) -> None:
        self._has_run = False
        self._releases: list[Release] = []
        self.target = target

    @abstractmethod
    def run(self) -> list[Release]:
        """Fetch the catalog.

        :returns: the releases, in the order upstream lists them

        """
        raise NotImplementedError

    @property
    def releases(self) -> list[Release]:
        """:returns: the releases as returned by :meth:`run`, cached"""
        if self._has_run is False:
            self._releases = self.run()
            self._has_run = True
        return self._releases


__all__ = [
    "USER_AGENT",
    "Catalog",
    "Release",
]
