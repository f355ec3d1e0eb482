from __future__ import annotations

from pathlib import Path

from pogo_cli.shared import paths


def test_get_config_dir_uses_env_override(tmp_path: Path) -> None:
    env = {paths.CONFIG_DIR_ENV: str(tmp_path / "config")}
    result = paths.get_config_dir(env=env)
    assert result == tmp_path / "config"
    assert not result.exists()


def test_default_config_path_prefers_explicit_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "pogo.yaml"
    env = {paths.CONFIG_FILE_ENV: str(target), paths.CONFIG_DIR_ENV: str(tmp_path / "ignored")}
    assert paths.default_config_path(env=env) == target


def test_default_config_path_lives_in_config_dir(tmp_path: Path) -> None:
    env = {paths.CONFIG_DIR_ENV: str(tmp_path)}
    assert paths.default_config_path(env=env) == tmp_path / "config.yaml"


def test_default_operations_path_follows_config_dir(tmp_path: Path) -> None:
    env = {paths.CONFIG_DIR_ENV: str(tmp_path)}
    assert paths.default_operations_path(env=env) == tmp_path / "operations"

    override = {paths.OPERATIONS_DIR_ENV: str(tmp_path / "elsewhere")}
    assert paths.default_operations_path(env=override) == tmp_path / "elsewhere"


def test_resolve_path_expands_user(tmp_path: Path, monkeypatch) -> None:
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    result = paths.resolve_path("~/file.txt")
    assert result == fake_home / "file.txt"
