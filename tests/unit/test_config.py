from __future__ import annotations

from pathlib import Path

import pytest

from snakepit import Config, UnsupportedPlatform, parse_version
from snakepit._compat import pypy_platform_tag, target_triple
from snakepit._config import APP_NAME, DEFAULT_TIMEOUT


def test_from_env_overrides(tmp_path):
    env = {
        "SNAKEPIT_DATA_DIR": str(tmp_path / "data"),
        "SNAKEPIT_CACHE_DIR": str(tmp_path / "cache"),
        "GITHUB_TOKEN": "s3cret",
    }

    config = Config.from_env(env)

    assert config == Config(tmp_path / "data", tmp_path / "cache", github_token="s3cret")
    assert config.timeout == DEFAULT_TIMEOUT


def test_from_env_defaults(mocker):
    data = mocker.patch("snakepit._config.user_data_path", return_value=Path("/data/snakepit"))
    cache = mocker.patch("snakepit._config.user_cache_path", return_value=Path("/cache/snakepit"))

    config = Config.from_env({"GITHUB_TOKEN": ""})

    data.assert_called_once_with(APP_NAME)
    cache.assert_called_once_with(APP_NAME)
    assert config.data_dir == Path("/data/snakepit")
    assert config.cache_dir == Path("/cache/snakepit")
    assert config.github_token is None


def test_layout(config, tmp_path):
    version = parse_version("3.12.1")

    assert config.downloads_dir == tmp_path / "cache" / "downloads"
    assert config.python_dir(version) == tmp_path / "data" / "pythons" / "3.12.1"
    assert config.lock_file(version) == tmp_path / "data" / "pythons" / ".3.12.1.lock"
    assert config.virtualenv_dir("blog", version) == tmp_path / "data" / "virtualenvs" / "blog" / "3.12.1"
    assert config.project_file("blog") == tmp_path / "data" / "virtualenvs" / "blog" / "directory"


@pytest.mark.parametrize(
    ("system", "machine", "expected"),
    [
        ("linux", "x86_64", "x86_64-unknown-linux-gnu"),
        ("linux", "aarch64", "aarch64-unknown-linux-gnu"),
        ("darwin", "arm64", "aarch64-apple-darwin"),
        ("win32", "AMD64", "x86_64-pc-windows-msvc"),
    ],
)
def test_target_triple(system, machine, expected):
    assert target_triple(system, machine) == expected


def test_target_triple_unsupported():
    with pytest.raises(UnsupportedPlatform) as context:
        target_triple("sunos5", "sparc")

    assert context.value.platform == "sparc-sunos5"


@pytest.mark.parametrize(
    ("target", "tag"),
    [
        ("x86_64-unknown-linux-gnu", "linux64"),
        ("x86_64-apple-darwin", "macos_x86_64"),
        ("aarch64-unknown-linux-gnu", "aarch64"),
        ("aarch64-apple-darwin", "macos_arm64"),
    ],
)
def test_pypy_platform_tag(target, tag):
    assert pypy_platform_tag(target) == tag


def test_pypy_platform_tag_unsupported():
    with pytest.raises(UnsupportedPlatform, match="i686-pc-windows-msvc"):
        pypy_platform_tag("i686-pc-windows-msvc")
