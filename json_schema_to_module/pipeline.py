"""
The generation pipeline.

Locations are collected, handed to the engine, optionally prefixed with a
build directive and written to a stream or a file. Only file output is
normalized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from .config import GeneratorConfig
from .directives import inject_build_directive
from .inputs import collect_locations
from .job import Engine, run_job
from .normalizer import SourceNormalizer, default_stages
from .sinks import select_target, write_output


@dataclass(frozen=True)
class PipelineOptions:
    """Options of one invocation, as given on the command line.

    Attributes:
        module_name: Name of the module to generate
        input_locations: Space-separated locations; None means read the input stream
        output_file: Destination file; None means write to the output stream
        build_directives: Build directive to inject as a leading comment
    """

    module_name: str
    input_locations: str | None = None
    output_file: str | None = None
    build_directives: str | None = None


def run_pipeline(
    options: PipelineOptions,
    engine: Engine,
    config: GeneratorConfig,
    stdin: TextIO,
    stdout: TextIO,
    normalizer: SourceNormalizer | None = None,
) -> None:
    """Run one generation from start to finish.

    Raises:
        InputReadError: If locations cannot be read from stdin
        EngineError: If the engine fails; nothing is written
        NormalizationError: If the output file was written unnormalized
        SinkError: If the output file cannot be written
    """
    locations = collect_locations(options.input_locations, stdin)
    result = run_job(engine, locations, options.module_name, config)
    source_code = inject_build_directive(result.source_code, options.build_directives, config.directive_comment)

    target = select_target(options.output_file, stdout)
    if normalizer is None:
        normalizer = SourceNormalizer(default_stages(config.formatter))
    write_output(target, source_code, normalizer)
