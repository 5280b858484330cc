"""Process-wide settings read from ``EVOKIT_*`` variables.

Values are merged in increasing precedence: built-in defaults, a ``.env``
file, the process environment and explicit overrides. The result is cached by
:func:`get_settings`; tests call :func:`reset_settings_cache` between runs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

__all__ = [
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "load_env_file",
    "reset_settings_cache",
]


ENV_PREFIX = "EVOKIT_"
"""Prefix shared by every environment variable read by the project."""

_KNOWN_KEYS = frozenset(
    {"PROJECT_ROOT", "LOGS_DIR", "RANDOM_SEED", "STRUCTURED_LOGGING", "LOG_LEVEL"}
)
_BOOL_TRUE = {"1", "true", "yes", "on"}
_BOOL_FALSE = {"0", "false", "no", "off"}
_NONE_VALUES = {"", "none", "null"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _BOOL_TRUE:
        return True
    if lowered in _BOOL_FALSE:
        return False
    raise ValueError(f"Cannot interpret '{value}' as boolean")


def _to_seed(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in _NONE_VALUES:
        return None
    return int(value)


def load_env_file(path: Path) -> dict[str, str]:
    """Parse ``KEY=value`` lines of a ``.env`` file.

    Blank lines, ``#`` comments and lines without ``=`` are skipped; only the
    first ``=`` separates key from value. A missing file yields ``{}``.
    """

    if not path.is_file():
        return {}
    entries: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.strip().partition("=")
        if not sep or key.startswith("#"):
            continue
        entries[key.strip()] = value.strip()
    return entries


@dataclass(slots=True, frozen=True)
class Settings:
    """Immutable set of global settings.

    ``random_seed`` seeds the generators created by
    :func:`evokit.utils.seed.rng_factory` when no explicit seed is given;
    ``None`` means fresh OS entropy. ``logs_dir``, ``structured_logging`` and
    ``log_level`` feed :func:`evokit.config.logging_conf.configure_logging`.
    """

    project_root: Path
    logs_dir: Path
    random_seed: int | None
    structured_logging: bool
    log_level: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_root": str(self.project_root),
            "logs_dir": str(self.logs_dir),
            "random_seed": self.random_seed,
            "structured_logging": self.structured_logging,
            "log_level": self.log_level,
        }

    @classmethod
    def from_env(
        cls,
        *,
        overrides: Mapping[str, Any] | None = None,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "Settings":
        """Build settings from ``env_file`` (or ``<project_root>/.env``), ``environ`` and ``overrides``.

        Override keys are the variable names without the prefix, in any case
        (``{"random_seed": 3}``). ``environ`` defaults to :data:`os.environ`.

        Raises
        ------
        KeyError
            If an override names an unknown setting.
        """

        overrides = {key.upper(): value for key, value in (overrides or {}).items()}
        unknown = sorted(set(overrides) - _KNOWN_KEYS)
        if unknown:
            raise KeyError(f"Unknown override(s): {', '.join(unknown)}")

        environ = os.environ if environ is None else environ
        file_values = load_env_file(Path(env_file).expanduser()) if env_file is not None else {}

        root_key = f"{ENV_PREFIX}PROJECT_ROOT"
        root = overrides.get("PROJECT_ROOT") or environ.get(root_key) or file_values.get(root_key)
        project_root = Path(str(root)).expanduser().resolve() if root else Path.cwd()
        if env_file is None:
            file_values = load_env_file(project_root / ".env")

        merged: dict[str, Any] = dict(file_values)
        merged.update((key, value) for key, value in environ.items() if key.startswith(ENV_PREFIX))
        merged.update((f"{ENV_PREFIX}{key}", value) for key, value in overrides.items())

        def raw(name: str, default: Any) -> Any:
            return merged.get(f"{ENV_PREFIX}{name}", default)

        logs_dir = Path(str(raw("LOGS_DIR", "logs"))).expanduser()
        if not logs_dir.is_absolute():
            logs_dir = project_root / logs_dir

        return cls(
            project_root=project_root,
            logs_dir=logs_dir,
            random_seed=_to_seed(raw("RANDOM_SEED", None)),
            structured_logging=_to_bool(raw("STRUCTURED_LOGGING", False)),
            log_level=str(raw("LOG_LEVEL", "INFO")).strip().upper(),
        )


_SETTINGS_CACHE: Settings | None = None


def get_settings(**kwargs: Any) -> Settings:
    """Return cached settings, building them on the first call.

    Keyword arguments bypass the cache and are forwarded to
    :meth:`Settings.from_env`.
    """

    global _SETTINGS_CACHE
    if kwargs:
        return Settings.from_env(**kwargs)
    if _SETTINGS_CACHE is None:
        _SETTINGS_CACHE = Settings.from_env()
    return _SETTINGS_CACHE


def reset_settings_cache() -> None:
    global _SETTINGS_CACHE
    _SETTINGS_CACHE = None
