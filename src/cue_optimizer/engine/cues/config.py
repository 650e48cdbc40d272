# ~/cue_optimizer/engine/cues/config.py
import os
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import ConfigurationError

logger = structlog.get_logger(__name__)

ENV_PREFIX = "CUE_OPTIMIZER_"

# Defaults bound the worst case: C(16, 5) combinations per chain, 50 chains.
DEFAULT_MAX_CUE_SETS = 50
DEFAULT_TRIM_GOAL_SIZE = 10
DEFAULT_MAX_TRIMMED_SIZE = 16
DEFAULT_MAX_COMBINATION_SIZE = 5


class OptimizerConfig(BaseModel):
    """The search bounds used by the cue optimizer."""

    max_cue_sets: int = Field(
        DEFAULT_MAX_CUE_SETS,
        ge=1,
        description="Only the first N cue sets are optimized.",
    )
    trim_goal_size: int = Field(
        DEFAULT_TRIM_GOAL_SIZE,
        ge=1,
        description="Cue sets are trimmed until they have at most this many cues.",
    )
    max_trimmed_size: int = Field(
        DEFAULT_MAX_TRIMMED_SIZE,
        ge=1,
        description="Trimmed cue sets larger than this are skipped.",
    )
    max_combination_size: int = Field(
        DEFAULT_MAX_COMBINATION_SIZE,
        ge=1,
        description="Largest combination of cues the searcher tries.",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_sizes(self) -> "OptimizerConfig":
        if self.trim_goal_size > self.max_trimmed_size:
            raise ValueError("trim_goal_size cannot exceed max_trimmed_size.")
        return self

    @classmethod
    def from_env(cls, overrides: dict[str, Any] | None = None) -> "OptimizerConfig":
        """
        Builds a config from CUE_OPTIMIZER_* environment variables, with
        `overrides` taking precedence. Unset values keep their defaults.
        """
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if env_value is not None:
                values[name] = env_value
        values.update(overrides or {})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid optimizer configuration: {e}") from e


def load_config(path: Path | None = None) -> OptimizerConfig:
    """
    Loads the optimizer config from a YAML file layered over the environment.

    The file holds a flat mapping of `OptimizerConfig` fields. Without a path,
    only the environment and the defaults apply.
    """
    if path is None:
        return OptimizerConfig.from_env()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file '{path}' must contain a mapping.")

    unknown = set(data) - set(OptimizerConfig.model_fields)
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys in '{path}': {', '.join(sorted(unknown))}"
        )

    config = OptimizerConfig.from_env(data)
    logger.debug("Optimizer config loaded.", path=str(path), **config.model_dump())
    return config
