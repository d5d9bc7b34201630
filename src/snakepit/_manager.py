"""Entry points: make an interpreter available on disk, or tell what could be made available."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from filelock import FileLock

from ._compat import current_target
from ._config import Config
from ._cpython import CPythonCatalog
from ._errors import UpgradeError
from ._install import install
from ._pypy import PyPyCatalog
from ._resolve import require
from ._version import Interpreter

if TYPE_CHECKING:
    from pathlib import Path

    from ._catalog import Catalog
    from ._version import Version

LOGGER = logging.getLogger(__name__)


def catalog_for(interpreter: Interpreter, config: Config, target: str | None = None) -> Catalog:
    target = current_target() if target is None else target
    if interpreter is Interpreter.PYPY:
        return PyPyCatalog(target, config.timeout)
    return CPythonCatalog(target, config.github_token, config.timeout)


def is_downloaded(python_dir: Path) -> bool:
    return python_dir.is_dir() and next(python_dir.iterdir(), None) is not None


def download_python(
    version: Version,
    upgrade: bool = False,
    config: Config | None = None,
    catalog: Catalog | None = None,
) -> Path:
    """Make sure an interpreter matching ``version`` is installed.

    :param version: an exact version, or a family such as ``3.12`` which picks the first final release upstream lists
    :param upgrade: re-resolve and re-download even if the version is already installed
    :param config: the settings to use, read from the environment if not given
    :param catalog: the source of releases, picked from the interpreter family if not given
    :returns: the directory the interpreter lives in

    """
    config = Config.from_env() if config is None else config
    python_dir = config.python_dir(version)
    if not upgrade and is_downloaded(python_dir):
        LOGGER.debug("%s already installed at %s", version, python_dir)
        return python_dir

    config.pythons_dir.mkdir(parents=True, exist_ok=True)
    with FileLock(str(config.lock_file(version))):
        if not upgrade and is_downloaded(python_dir):
            LOGGER.debug("%s installed by a concurrent run at %s", version, python_dir)
            return python_dir
        catalog = catalog_for(version.interpreter, config) if catalog is None else catalog
        release = require(version, catalog.releases)
        install(release, python_dir, config.downloads_dir, upgrade=upgrade)
    return python_dir


def upgrade_python(version: Version, config: Config | None = None, catalog: Catalog | None = None) -> Path:
    """Move an ``x.y`` install onto the latest bugfix release upstream offers."""
    if version.is_concrete:
        raise UpgradeError(str(version))
    return download_python(version, upgrade=True, config=config, catalog=catalog)


def list_available_releases(
    config: Config | None = None,
    cpython: Catalog | None = None,
    pypy: Catalog | None = None,
) -> list[tuple[Version, str]]:
    """:returns: ``(version, release tag)`` of every CPython release in catalog order, then every PyPy one sorted"""
    config = Config.from_env() if config is None else config
    cpython = catalog_for(Interpreter.CPYTHON, config) if cpython is None else cpython
    pypy = catalog_for(Interpreter.PYPY, config) if pypy is None else pypy
    result = [(release.version, release.release_tag) for release in cpython.releases]
    result.extend(
        (release.version, release.release_tag) for release in sorted(pypy.releases, key=lambda r: r.version)
    )
    return result


__all__ = [
    "catalog_for",
    "download_python",
    "is_downloaded",
    "list_available_releases",
    "upgrade_python",
]
