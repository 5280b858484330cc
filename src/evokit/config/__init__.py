"""Convenience exports for the configuration package."""

from .constants import *  # noqa: F401,F403
from .loader import ConfigError, load_config, save_config
from .logging_conf import JSONFormatter, configure_logging
from .schemas import (
    CrossoverOptions,
    CrossoverStage,
    GroupingStage,
    MutationOptions,
    MutationStage,
    OperatorPipelineConfig,
    ReplacementOptions,
    ReplacementStage,
    SelectionOptions,
    SelectionStage,
    parse_options,
)
from .settings import ENV_PREFIX, Settings, get_settings, reset_settings_cache

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "ENV_PREFIX",
    "Settings",
    "get_settings",
    "reset_settings_cache",
    # Schema classes
    "SelectionOptions",
    "CrossoverOptions",
    "MutationOptions",
    "ReplacementOptions",
    "SelectionStage",
    "GroupingStage",
    "CrossoverStage",
    "MutationStage",
    "ReplacementStage",
    "OperatorPipelineConfig",
    "parse_options",
    # Loader functions
    "load_config",
    "save_config",
    "ConfigError",
]
