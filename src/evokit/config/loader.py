"""Configuration loading and validation utilities.

YAML files are parsed with PyYAML and validated against Pydantic schemas,
typically :class:`~evokit.config.schemas.OperatorPipelineConfig`.

Example
-------
>>> from evokit.config.loader import load_config
>>> from evokit.config.schemas import OperatorPipelineConfig
>>>
>>> pipeline = load_config("configs/plus_strategy.yaml", OperatorPipelineConfig)
>>> print(pipeline.replacement.method)
plus_strategy
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigurationError
from .settings import get_settings

__all__ = ["ConfigError", "load_config", "save_config"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class ConfigError(ConfigurationError):
    """Raised when configuration loading or validation fails."""


def _resolve_config_path(file_path: Union[str, Path], project_root: Optional[Path] = None) -> Path:
    """Resolve ``file_path`` against the project root and the working directory.

    Raises
    ------
    FileNotFoundError
        If the file cannot be found in any location.
    """
    path = Path(file_path)

    if path.is_absolute() and path.exists():
        return path

    if project_root is None:
        project_root = get_settings().project_root

    resolved = project_root / path
    if resolved.exists():
        return resolved

    if path.exists():
        return path.resolve()

    raise FileNotFoundError(f"Config file not found: {file_path}")


def load_config(
    file_path: Union[str, Path],
    schema: Type[T],
    *,
    project_root: Optional[Path] = None,
    strict: bool = True,
) -> T:
    """Load and validate a YAML configuration file.

    Parameters
    ----------
    file_path : str or Path
        Path to the YAML file.
    schema : Type[BaseModel]
        Pydantic model class to validate against.
    project_root : Path, optional
        Root used to resolve relative paths; defaults to
        ``get_settings().project_root``.
    strict : bool, default=True
        If True, raise on any failure. If False, log a warning and return the
        schema defaults.

    Raises
    ------
    ConfigError
        If loading or validation fails (only when ``strict=True``).
    """
    try:
        resolved_path = _resolve_config_path(file_path, project_root)

        logger.debug("Loading config from: %s", resolved_path)
        with open(resolved_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if data is None:
            raise ConfigError(f"Empty configuration file: {file_path}")

        try:
            config = schema.model_validate(data)
        except ValidationError as e:
            error_msg = f"Configuration validation failed for {file_path}:\n{e}"
            if strict:
                raise ConfigError(error_msg) from e
            logger.warning(error_msg)
            logger.warning("Returning default configuration")
            return schema()
        logger.info("Loaded config: %s", resolved_path.name)
        return config

    except FileNotFoundError as e:
        if strict:
            raise ConfigError(f"Configuration file not found: {file_path}") from e
        logger.warning("Config file not found: %s, using defaults", file_path)
        return schema()
    except yaml.YAMLError as e:
        error_msg = f"Invalid YAML syntax in {file_path}: {e}"
        if strict:
            raise ConfigError(error_msg) from e
        logger.warning(error_msg)
        return schema()
    except ConfigError:
        if strict:
            raise
        logger.warning("Empty config file: %s, using defaults", file_path)
        return schema()


def save_config(
    config: BaseModel, file_path: Union[str, Path], *, project_root: Optional[Path] = None
) -> Path:
    """Save a Pydantic configuration model to a YAML file.

    Relative paths are resolved against ``project_root`` (default
    ``get_settings().project_root``). Missing parent directories are created.

    Returns
    -------
    Path
        Absolute path to the saved file.
    """
    path = Path(file_path)

    if not path.is_absolute():
        if project_root is None:
            project_root = get_settings().project_root
        path = project_root / path

    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="python", exclude_none=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            data,
            f,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

    logger.info("Saved configuration to: %s", path)
    return path
