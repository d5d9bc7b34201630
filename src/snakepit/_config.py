"""Process wide settings, computed once at start-up and passed to every entry point."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from platformdirs import user_cache_path, user_data_path

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._version import Version

APP_NAME = "snakepit"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Config:
    """Where interpreters, downloads and virtualenvs live, and how to talk to upstream.

    Layout::

        <cache_dir>/downloads/<asset name>
        <data_dir>/pythons/<version>/
        <data_dir>/virtualenvs/<project>/<version>/

    """

    data_dir: Path
    cache_dir: Path
    github_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Config:
        env = os.environ if env is None else env
        if data_dir := env.get("SNAKEPIT_DATA_DIR"):
            data_path = Path(data_dir).expanduser()
        else:
            data_path = user_data_path(APP_NAME)
        if cache_dir := env.get("SNAKEPIT_CACHE_DIR"):
            cache_path = Path(cache_dir).expanduser()
        else:
            cache_path = user_cache_path(APP_NAME)
        return cls(data_path, cache_path, github_token=env.get("GITHUB_TOKEN") or None)

    @property
    def downloads_dir(self) -> Path:
        return self.cache_dir / "downloads"

    @property
    def pythons_dir(self) -> Path:
        return self.data_dir / "pythons"

    @property
    def virtualenvs_dir(self) -> Path:
        return self.data_dir / "virtualenvs"

    def python_dir(self, version: Version) -> Path:
        return self.pythons_dir / str(version)

    def lock_file(self, version: Version) -> Path:
        return self.pythons_dir / f".{version}.lock"

    def project_dir(self, project: str) -> Path:
        return self.virtualenvs_dir / project

    def virtualenv_dir(self, project: str, version: Version) -> Path:
        return self.project_dir(project) / str(version)

    def project_file(self, project: str) -> Path:
        return self.project_dir(project) / "directory"


__all__ = [
    "Config",
]
