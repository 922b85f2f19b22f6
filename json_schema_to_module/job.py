"""
Generation job: the request/result types and the adapter that drives an engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .config import GeneratorConfig
from .errors import EngineError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """A single request to a generation engine.

    Attributes:
        locations: Schema locations, in caller order
        module_name: Name of the module to generate
        export_types: Whether every generated type is exported
    """

    locations: tuple[str, ...]
    module_name: str
    export_types: bool = True


@dataclass(frozen=True)
class GenerationResult:
    """Source code produced by an engine."""

    source_code: str


class Engine(Protocol):
    """Anything that turns a GenerationRequest into a GenerationResult."""

    def execute(self, request: GenerationRequest) -> GenerationResult: ...


def run_job(engine: Engine, locations: list[str], module_name: str, config: GeneratorConfig) -> GenerationResult:
    """Build a request and run it through the engine synchronously.

    Raises:
        EngineError: If the engine fails; there is no retry and no partial result
    """
    request = GenerationRequest(
        locations=tuple(locations),
        module_name=module_name,
        export_types=config.export_types,
    )
    logger.info("Generating module %s from %d location(s)", module_name, len(request.locations))
    try:
        return engine.execute(request)
    except EngineError:
        raise
    except Exception as e:
        raise EngineError(f"Could not generate source code: {e}") from e
