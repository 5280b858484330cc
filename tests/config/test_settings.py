from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from evokit.config.settings import (
    Settings,
    get_settings,
    load_env_file,
    reset_settings_cache,
)


def test_load_env_file_skips_comments_and_blank_lines(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n\nEVOKIT_LOG_LEVEL=warning\nNOT_A_PAIR\nEVOKIT_LOGS_DIR=a=b\n"
    )

    entries = load_env_file(env_file)

    assert entries == {"EVOKIT_LOG_LEVEL": "warning", "EVOKIT_LOGS_DIR": "a=b"}


def test_load_env_file_missing_returns_empty(tmp_path: Path) -> None:
    assert load_env_file(tmp_path / "absent.env") == {}


def test_defaults(tmp_path: Path) -> None:
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})

    assert settings.project_root == tmp_path.resolve()
    assert settings.logs_dir == tmp_path.resolve() / "logs"
    assert settings.random_seed is None
    assert settings.structured_logging is False
    assert settings.log_level == "INFO"


def test_only_runtime_settings_are_exposed() -> None:
    names = [field.name for field in dataclasses.fields(Settings)]
    assert names == ["project_root", "logs_dir", "random_seed", "structured_logging", "log_level"]


def test_environment_variables_override_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("EVOKIT_RANDOM_SEED=11\nEVOKIT_LOG_LEVEL=debug\n")

    settings = Settings.from_env(
        overrides={"project_root": tmp_path},
        env_file=env_file,
        environ={"EVOKIT_RANDOM_SEED": "42", "EVOKIT_STRUCTURED_LOGGING": "yes", "OTHER": "x"},
    )

    assert settings.random_seed == 42
    assert settings.log_level == "DEBUG"
    assert settings.structured_logging is True


def test_default_env_file_in_project_root_is_read(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("EVOKIT_RANDOM_SEED=9\n")

    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})

    assert settings.random_seed == 9


def test_project_root_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path.parent)

    settings = Settings.from_env(environ={"EVOKIT_PROJECT_ROOT": str(tmp_path)})

    assert settings.project_root == tmp_path.resolve()


def test_overrides_take_precedence(tmp_path: Path) -> None:
    settings = Settings.from_env(
        overrides={"project_root": tmp_path, "RANDOM_SEED": 7, "logs_dir": "out/logs"},
        environ={"EVOKIT_RANDOM_SEED": "42"},
    )

    assert settings.random_seed == 7
    assert settings.logs_dir == tmp_path.resolve() / "out" / "logs"


@pytest.mark.parametrize("raw", ["", "none", "NULL"])
def test_random_seed_accepts_empty_markers(tmp_path: Path, raw: str) -> None:
    settings = Settings.from_env(
        overrides={"project_root": tmp_path}, environ={"EVOKIT_RANDOM_SEED": raw}
    )
    assert settings.random_seed is None


def test_invalid_boolean_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="boolean"):
        Settings.from_env(
            overrides={"project_root": tmp_path},
            environ={"EVOKIT_STRUCTURED_LOGGING": "maybe"},
        )


@pytest.mark.parametrize("key", ["POPULATION", "environment", "configs_dir"])
def test_unknown_override_raises(tmp_path: Path, key: str) -> None:
    with pytest.raises(KeyError, match=key.upper()):
        Settings.from_env(overrides={"project_root": tmp_path, key: 10}, environ={})


def test_settings_are_frozen(tmp_path: Path) -> None:
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})
    with pytest.raises(AttributeError):
        settings.log_level = "DEBUG"  # type: ignore[misc]


def test_to_dict_is_serialisable(tmp_path: Path) -> None:
    settings = Settings.from_env(overrides={"project_root": tmp_path}, environ={})
    data = settings.to_dict()
    assert data["project_root"] == str(tmp_path.resolve())
    assert data["random_seed"] is None


def test_get_settings_caches_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EVOKIT_RANDOM_SEED", "5")
    reset_settings_cache()
    first = get_settings()
    monkeypatch.setenv("EVOKIT_RANDOM_SEED", "6")
    assert get_settings() is first
    assert first.random_seed == 5

    reset_settings_cache()
    assert get_settings().random_seed == 6
