"""Download a release archive, unpack it and make the unpacked tree usable from where it landed."""

from __future__ import annotations

import contextlib
import logging
import shutil
import tarfile
from enum import Enum
from typing import TYPE_CHECKING

import httpx
import zstandard

from ._catalog import USER_AGENT
from ._compat import IS_WIN
from ._config import DEFAULT_TIMEOUT
from ._errors import InstallError
from ._version import Interpreter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from ._catalog import Release

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 16
# prefix python-build-standalone was configured with, baked into generated files
SENTINEL = "/install"
SYSCONFIG_CONTEXTS = ("'", " ", "=")
PKGCONFIG_CONTEXTS = ("=",)


class ArchiveFormat(Enum):
    GZIP = "gz"
    ZSTD = "zst"
    BZIP2 = "bz2"

    @classmethod
    def for_release(cls, release: Release) -> ArchiveFormat:
        if release.interpreter is Interpreter.PYPY:
            return cls.BZIP2
        if release.relocated:
            return cls.ZSTD
        return cls.GZIP


def download_file(
    url: str,
    target: Path,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Stream ``url`` into ``target``; the file only appears under its final name once complete."""
    partial = target.with_name(f"{target.name}.part")
    LOGGER.info("download %s", url)
    session = (
        httpx.Client(headers={"User-Agent": USER_AGENT}, timeout=timeout, follow_redirects=True)
        if client is None
        else contextlib.nullcontext(client)
    )
    try:
        with session as http, http.stream("GET", url) as response:
            response.raise_for_status()
            with partial.open("wb") as file:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    file.write(chunk)
        partial.replace(target)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise
    LOGGER.debug("saved %s", target)


def extract(archive: Path, target: Path, fmt: ArchiveFormat) -> None:
    LOGGER.debug("extract %s (%s) into %s", archive, fmt.name, target)
    target.mkdir(parents=True, exist_ok=True)
    if fmt is ArchiveFormat.ZSTD:
        with (
            archive.open("rb") as raw,
            zstandard.ZstdDecompressor().stream_reader(raw) as reader,
            tarfile.open(fileobj=reader, mode="r|") as tar,
        ):
            tar.extractall(target, filter="tar")
    else:
        with tarfile.open(archive, f"r:{fmt.value}") as tar:
            tar.extractall(target, filter="tar")


def move_install(python_dir: Path) -> None:
    """Lift ``python/install`` of a relocated build up to ``python``, the layout of the install-only builds."""
    temp = python_dir / "temp"
    root = python_dir / "python"
    nested = root / "install"
    if not nested.is_dir():
        msg = f"expected {nested} in the unpacked archive, the upstream layout changed"
        raise InstallError(msg)
    nested.rename(temp)
    shutil.rmtree(root)
    temp.rename(root)


def _first(directory: Path, accept: Callable[[Path], bool], what: str) -> Path:
    try:
        return next(path for path in sorted(directory.iterdir()) if accept(path))
    except (StopIteration, FileNotFoundError, NotADirectoryError):
        msg = f"no {what} in {directory}, the upstream layout changed"
        raise InstallError(msg) from None


def _rewrite(path: Path, install_dir: str, contexts: Iterable[str]) -> int:
    data = path.read_text(encoding="utf-8")
    found = 0
    for context in contexts:
        marker = f"{context}{SENTINEL}"
        found += data.count(marker)
        data = data.replace(marker, f"{context}{install_dir}")
    if found:
        path.write_text(data, encoding="utf-8")
    return found


def fixup_sysconfig_paths(python_dir: Path, install_root: Path | None = None) -> None:
    """Point the build configuration at ``install_root`` (by default ``python_dir / "python"``)."""
    root = python_dir / "python"
    install_dir = str(root if install_root is None else install_root)
    lib = root / "lib"
    stdlib = _first(lib, lambda p: p.is_dir() and p.name.startswith("python"), "python* directory")
    sysconfig = _first(stdlib, lambda p: p.is_file() and "_sysconfigdata_" in p.name, "_sysconfigdata_ file")
    if _rewrite(sysconfig, install_dir, SYSCONFIG_CONTEXTS) == 0:
        LOGGER.warning("no %s placeholder in %s, build paths left untouched", SENTINEL, sysconfig)
    pkgconfig = lib / "pkgconfig"
    if not pkgconfig.is_dir():
        msg = f"no pkgconfig directory at {pkgconfig}, the upstream layout changed"
        raise InstallError(msg)
    for path in sorted(pkgconfig.iterdir()):
        if path.is_symlink():
            continue
        _rewrite(path, install_dir, PKGCONFIG_CONTEXTS)


def install(
    release: Release,
    destination: Path,
    downloads: Path,
    *,
    upgrade: bool = False,
    client: httpx.Client | None = None,
) -> None:
    """Install ``release`` at ``destination``.

    The archive is cached under ``downloads`` and fetched again only when ``upgrade`` is set. Unpacking happens in a
    hidden sibling directory which replaces ``destination`` once every fixup succeeded, so a failed install never
    leaves a half written interpreter behind.

    """
    archive = downloads / release.name
    if upgrade or not archive.exists():
        downloads.mkdir(parents=True, exist_ok=True)
        download_file(release.url, archive, client=client)
    else:
        LOGGER.debug("reuse cached %s", archive)

    staging = destination.with_name(f".{destination.name}.partial")
    if staging.exists():
        shutil.rmtree(staging)
    try:
        extract(archive, staging, ArchiveFormat.for_release(release))
        if release.relocated:
            move_install(staging)
        if release.interpreter is Interpreter.CPYTHON and not IS_WIN:
            fixup_sysconfig_paths(staging, destination / "python")
        if destination.exists():
            shutil.rmtree(destination)
        staging.rename(destination)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise
    LOGGER.info("installed %s into %s", release, destination)


__all__ = [
    "ArchiveFormat",
    "download_file",
    "extract",
    "fixup_sysconfig_paths",
    "install",
    "move_install",
]
