# src/morphologycore/exceptions.py
from __future__ import annotations

# General imports (stdlib)
from typing import Any, Optional


class MorphologyCoreError(Exception):
    """Base for all domain errors."""

    def __init__(self, message: str, record_id: Optional[Any] = None) -> None:
        super().__init__(message)
        self.record_id = record_id

class ConfigError(MorphologyCoreError):
    """Invalid or missing configuration."""

class MalformedInput(MorphologyCoreError):
    """Raw record is missing fields, ill-shaped, or references unknown ids."""

class SelfReferenceViolation(MorphologyCoreError):
    """A section was used as its own parent or child."""

class AlreadyBuilt(MorphologyCoreError):
    """Build requested on a morphology that is already populated."""
