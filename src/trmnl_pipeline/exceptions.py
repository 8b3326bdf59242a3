"""Exceptions raised by the TRMNL image pipeline."""

from __future__ import annotations

from enum import Enum
from typing import Any


class TrmnlPipelineError(Exception):
    """Base exception for all pipeline errors."""


class CatalogErrorReason(Enum):
    """Why a catalog could not be loaded."""
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"
    MISSING_KEY = "missing_key"


class CatalogLoadError(TrmnlPipelineError):
    """Profile or palette catalog data could not be turned into records.

    Attributes:
        reason: Failure category
        source: Path or label of the data that failed to load
    """

    def __init__(
            self,
            message: str,
            reason: CatalogErrorReason,
            source: str | None = None,
    ):
        super().__init__(message)
        self.reason = reason
        self.source = source


class NotFoundError(TrmnlPipelineError):
    """Requested device profile is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Model '{name}' not found in models data")
        self.name = name


class InvalidInputError(TrmnlPipelineError, ValueError):
    """Source image or transform parameters are unusable."""


class TransformError(TrmnlPipelineError):
    """A pipeline stage could not produce a usable result.

    The originating exception is available as ``__cause__``.

    Attributes:
        stage: Name of the stage that failed
        parameters: Parameter values the stage ran with
    """

    def __init__(self, stage: str, parameters: dict[str, Any], cause: BaseException):
        details = ", ".join(f"{key}={value!r}" for key, value in parameters.items())
        super().__init__(f"Stage '{stage}' failed ({details}): {cause}")
        self.stage = stage
        self.parameters = parameters
