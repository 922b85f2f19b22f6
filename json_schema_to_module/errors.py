"""
Exceptions raised by the generation pipeline.

Everything except NormalizationError is fatal for an invocation. A
NormalizationError is raised only after the unformatted source has been
written, so the caller still has something on disk to inspect.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for pipeline failures."""


class InputReadError(GenerationError):
    """Raised when schema locations cannot be read from the input stream."""


class EngineError(GenerationError):
    """Raised when the generation engine could not produce source code."""


class SchemaLoadError(EngineError):
    """Raised when a schema document cannot be fetched or parsed."""


class SchemaReferenceError(EngineError):
    """Raised when a $ref or JSON pointer cannot be resolved."""


class NormalizationError(GenerationError):
    """Raised when import fixing or formatting failed.

    Attributes:
        stage: Name of the stage that failed
    """

    def __init__(self, message: str, stage: str = ""):
        super().__init__(message)
        self.stage = stage


class SinkError(GenerationError):
    """Raised when the output file cannot be created or written."""
