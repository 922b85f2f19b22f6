"""JSON Schema to Module

Generates a single Python module of dataclasses from a list of JSON Schema
locations, fetching referenced schemas as needed, and writes it normalized
to a file or as is to standard output.
"""

__version__ = "2.0.0"

from .config import FormatterConfig, GeneratorConfig
from .engine import SchemaEngine
from .errors import (
    EngineError,
    GenerationError,
    InputReadError,
    NormalizationError,
    SchemaLoadError,
    SchemaReferenceError,
    SinkError,
)
from .job import Engine, GenerationRequest, GenerationResult
from .normalizer import SourceNormalizer
from .pipeline import PipelineOptions, run_pipeline

__all__ = [
    "run_pipeline",
    "PipelineOptions",
    "GeneratorConfig",
    "FormatterConfig",
    "Engine",
    "GenerationRequest",
    "GenerationResult",
    "SchemaEngine",
    "SourceNormalizer",
    "GenerationError",
    "InputReadError",
    "EngineError",
    "SchemaLoadError",
    "SchemaReferenceError",
    "NormalizationError",
    "SinkError",
]
