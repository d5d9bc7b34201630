"""Standalone CPython and PyPy distributions for per-project virtual environments."""

from __future__ import annotations

from ._catalog import Catalog, Release
from ._config import Config
from ._cpython import CPythonCatalog
from ._errors import (
    FetchError,
    InstallError,
    InvalidVersion,
    ParseAssetError,
    RateLimitError,
    SnakepitError,
    UnsupportedPlatform,
    UpgradeError,
    UpstreamDecodeError,
    UpstreamError,
    VersionNotFound,
)
from ._install import install
from ._manager import download_python, is_downloaded, list_available_releases, upgrade_python
from ._pypy import PyPyCatalog
from ._resolve import require, resolve
from ._version import (
    Interpreter,
    PreRelease,
    PreReleaseKind,
    Version,
    compatible,
    parse_cpython_filename,
    parse_pypy_url,
    parse_version,
)
from ._virtualenvs import (
    create_virtualenv,
    list_virtualenvs,
    project_directory,
    python_executable,
    remove_project,
    remove_virtualenv,
    set_project_directory,
    site_packages,
    unset_project_directory,
)

__all__ = [
    "CPythonCatalog",
    "Catalog",
    "Config",
    "FetchError",
    "InstallError",
    "Interpreter",
    "InvalidVersion",
    "ParseAssetError",
    "PreRelease",
    "PreReleaseKind",
    "PyPyCatalog",
    "RateLimitError",
    "Release",
    "SnakepitError",
    "UnsupportedPlatform",
    "UpgradeError",
    "UpstreamDecodeError",
    "UpstreamError",
    "Version",
    "VersionNotFound",
    "compatible",
    "create_virtualenv",
    "download_python",
    "install",
    "is_downloaded",
    "list_available_releases",
    "list_virtualenvs",
    "parse_cpython_filename",
    "parse_pypy_url",
    "parse_version",
    "project_directory",
    "python_executable",
    "remove_project",
    "remove_virtualenv",
    "require",
    "resolve",
    "set_project_directory",
    "site_packages",
    "unset_project_directory",
    "upgrade_python",
]
