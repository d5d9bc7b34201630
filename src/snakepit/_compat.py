"""Platform compatibility utilities for picking upstream builds."""

from __future__ import annotations

import functools
import logging
import platform
import sys

from ._errors import UnsupportedPlatform

IS_WIN = sys.platform == "win32"

LOGGER = logging.getLogger(__name__)

_MACHINES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "i386": "i686",
    "i686": "i686",
    "x86": "i686",
}
_SYSTEMS = {
    "linux": "unknown-linux-gnu",
    "darwin": "apple-darwin",
    "win32": "pc-windows-msvc",
}
_PYPY_TAGS = {
    "x86_64-unknown-linux-gnu": "linux64",
    "x86_64-apple-darwin": "macos_x86_64",
    "aarch64-unknown-linux-gnu": "aarch64",
    "aarch64-apple-darwin": "macos_arm64",
}


def target_triple(system: str, machine: str) -> str:
    arch = _MACHINES.get(machine.lower())
    vendor = _SYSTEMS.get(system)
    if arch is None or vendor is None:
        raise UnsupportedPlatform(f"{machine}-{system}")
    return f"{arch}-{vendor}"


@functools.lru_cache(maxsize=1)
def current_target() -> str:
    """:returns: the target triple python-build-standalone uses for the running platform"""
    result = target_triple(sys.platform, platform.machine())
    LOGGER.debug("running platform is %s", result)
    return result


def pypy_platform_tag(target: str) -> str:
    try:
        return _PYPY_TAGS[target]
    except KeyError:
        raise UnsupportedPlatform(target) from None


__all__ = [
    "IS_WIN",
    "current_target",
    "pypy_platform_tag",
    "target_triple",
]
