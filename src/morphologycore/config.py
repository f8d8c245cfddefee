# src/morphologycore/config.py
from __future__ import annotations

# General imports (stdlib)
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

# Local imports
from .exceptions import ConfigError


REBUILD_POLICIES = ("clear", "fail")


@dataclass(frozen=True)
class Build:
    rebuild_policy: str = "clear"                                                # clear | fail, applied when building an already-built morphology
    link_reciprocal: bool = False                                                # Mirror each parent/child edge onto the opposite section


@dataclass(frozen=True)
class Logging:
    level: str = "WARNING"                                                       # Level name for the 'morphologycore' logger
    log_file: Optional[Path] = None                                              # Optional: also write log records to this file


@dataclass(frozen=True)
class Config:
    build: Build = Build()                                                       # Graph construction behavior
    logging: Logging = Logging()                                                 # Logger setup used by setup_logging


def make_config(**overrides: Dict[str, Any]) -> Config:
    """
    Build and validate a Config object.

    Use:
        Construct a Config with defaults, apply per-group field overrides, and
        validate the result. Overrides are given per dataclass group, e.g.
        `make_config(build={"rebuild_policy": "fail"})`.

    Args:
        **overrides: Mapping of group name ('build', 'logging') to a dict of
            field values replacing the defaults of that group.

    Returns:
        Config: Fully-initialized, validated configuration.

    Raises:
        ConfigError: If an unknown group or field is given, if
            build.rebuild_policy is not one of REBUILD_POLICIES, or if
            logging.level is not a known logging level name.
    """
    # Instantiate configuration using defaults from the Config dataclass
    cfg = Config()

    # Apply per-group overrides onto the frozen defaults
    for group, values in overrides.items():
        if not hasattr(cfg, group):
            raise ConfigError(f"Config: unknown group '{group}'.")
        try:
            updated = replace(getattr(cfg, group), **dict(values))
        except TypeError as exc:
            raise ConfigError(f"Config: invalid field for group '{group}': {exc}") from exc
        cfg = replace(cfg, **{group: updated})

    # Validate the rebuild policy
    if cfg.build.rebuild_policy not in REBUILD_POLICIES:
        raise ConfigError(
            f"Config: 'build.rebuild_policy' must be one of {REBUILD_POLICIES}, "
            f"got {cfg.build.rebuild_policy!r}."
        )

    # Normalize and validate the logging level name
    level = str(cfg.logging.level).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Config: 'logging.level' is not a logging level: {cfg.logging.level!r}.")
    cfg = replace(cfg, logging=replace(cfg.logging, level=level))

    # Normalize the optional log file to a Path
    if cfg.logging.log_file is not None:
        cfg = replace(cfg, logging=replace(cfg.logging, log_file=Path(cfg.logging.log_file)))

    # Return the validated configuration
    return cfg
