"""Per-project virtual environments built on top of the installed interpreters."""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import TYPE_CHECKING

from ._compat import IS_WIN
from ._config import Config
from ._errors import InstallError
from ._manager import download_python, is_downloaded

if TYPE_CHECKING:
    from pathlib import Path

    from ._version import Version

LOGGER = logging.getLogger(__name__)


def _first_directory(path: Path) -> Path:
    try:
        return next(child for child in sorted(path.iterdir()) if child.is_dir())
    except (StopIteration, FileNotFoundError):
        msg = f"expected a subdirectory in {path}"
        raise InstallError(msg) from None


def python_executable(python_dir: Path) -> Path:
    top = _first_directory(python_dir)
    return top / "python.exe" if IS_WIN else top / "bin" / "python3"


def create_virtualenv(version: Version, project: str, config: Config | None = None) -> Path:
    config = Config.from_env() if config is None else config
    python_dir = config.python_dir(version)
    if not is_downloaded(python_dir):
        download_python(version, config=config)
    virtualenv = config.virtualenv_dir(project, version)
    cmd = [str(python_executable(python_dir)), "-m", "venv", str(virtualenv)]
    LOGGER.info("create virtualenv for %s (%s) via %s", project, version, " ".join(cmd))
    subprocess.run(cmd, check=True, capture_output=True)  # noqa: S603
    return virtualenv


def remove_virtualenv(project: str, version: Version, config: Config | None = None) -> None:
    config = Config.from_env() if config is None else config
    shutil.rmtree(config.virtualenv_dir(project, version))


def remove_project(project: str, config: Config | None = None) -> None:
    config = Config.from_env() if config is None else config
    shutil.rmtree(config.project_dir(project))


def set_project_directory(project: str, directory: str, config: Config | None = None) -> None:
    """Remember the directory a project's shell should start in."""
    config = Config.from_env() if config is None else config
    project_file = config.project_file(project)
    project_file.parent.mkdir(parents=True, exist_ok=True)
    project_file.write_text(directory, encoding="utf-8")


def unset_project_directory(project: str, config: Config | None = None) -> None:
    config = Config.from_env() if config is None else config
    config.project_file(project).unlink()


def project_directory(project: str, config: Config | None = None) -> str | None:
    config = Config.from_env() if config is None else config
    try:
        return config.project_file(project).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def list_virtualenvs(project: str | None = None, config: Config | None = None) -> dict[str, list[str]]:
    """:returns: the virtualenv versions of ``project``, or of every project when not given"""
    config = Config.from_env() if config is None else config
    if project is not None:
        projects = [project]
    elif config.virtualenvs_dir.is_dir():
        projects = sorted(p.name for p in config.virtualenvs_dir.iterdir() if p.is_dir())
    else:
        projects = []
    return {
        name: sorted(venv.name for venv in config.project_dir(name).iterdir() if venv.is_dir()) for name in projects
    }


def site_packages(project: str, version: Version, config: Config | None = None) -> Path:
    config = Config.from_env() if config is None else config
    virtualenv = config.virtualenv_dir(project, version)
    if IS_WIN:
        return virtualenv / "Lib" / "site-packages"
    return _first_directory(virtualenv / "lib") / "site-packages"


__all__ = [
    "create_virtualenv",
    "list_virtualenvs",
    "project_directory",
    "python_executable",
    "remove_project",
    "remove_virtualenv",
    "set_project_directory",
    "site_packages",
    "unset_project_directory",
]
