# src/morphologycore/__init__.py
from __future__ import annotations

from .config import Config, make_config
from .exceptions import (
    AlreadyBuilt,
    ConfigError,
    MalformedInput,
    MorphologyCoreError,
    SelfReferenceViolation,
)
from .logging_config import setup_logging
from .morphology import BuildReport, Morphology
from .section import Section
from .soma import Soma
from .structure import TYPENAME_TO_TYPEVALUE, TYPEVALUE_TO_TYPENAME

__all__ = [
    "AlreadyBuilt",
    "BuildReport",
    "Config",
    "ConfigError",
    "MalformedInput",
    "Morphology",
    "MorphologyCoreError",
    "Section",
    "SelfReferenceViolation",
    "Soma",
    "TYPENAME_TO_TYPEVALUE",
    "TYPEVALUE_TO_TYPENAME",
    "make_config",
    "setup_logging",
]
