from __future__ import annotations

import pytest

from snakepit import Catalog, Config, Interpreter, Release, parse_version

TARGET = "x86_64-unknown-linux-gnu"


class StaticCatalog(Catalog):
    def __init__(self, releases: list[Release]) -> None:
        super().__init__(TARGET)
        self.static = list(releases)
        self.calls = 0

    def run(self) -> list[Release]:
        self.calls += 1
        return list(self.static)


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(tmp_path / "data", tmp_path / "cache")


@pytest.fixture
def make_catalog():
    return StaticCatalog


@pytest.fixture
def make_release():
    def _make(text: str, release_tag: str = "20240107") -> Release:
        version = parse_version(text)
        if version.interpreter is Interpreter.PYPY:
            name = f"pypy{version.major}.{version.minor}-{release_tag}-linux64.tar.bz2"
            return Release(name, f"https://downloads.python.org/pypy/{name}", version, release_tag)
        flavour = "debug-full.tar.zst" if version.debug or version.freethreaded else "install_only.tar.gz"
        name = f"cpython-{text}+{release_tag}-{TARGET}-{flavour}"
        return Release(name, f"https://github.com/astral-sh/python-build-standalone/releases/download/{name}", version, release_tag)

    return _make


@pytest.fixture(scope="session")
def target() -> str:
    return TARGET
