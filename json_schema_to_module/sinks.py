"""
Output targets for generated code.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TextIO, Union

from .normalizer import SourceNormalizer


@dataclass(frozen=True)
class StreamTarget:
    """Write to an open text stream, unformatted."""

    stream: TextIO


@dataclass(frozen=True)
class FileTarget:
    """Normalize and write to a file, creating or overwriting it."""

    path: Path


OutputTarget = Union[StreamTarget, FileTarget]


def select_target(output_file: str | None, stream: TextIO) -> OutputTarget:
    if output_file is None:
        return StreamTarget(stream)
    return FileTarget(Path(output_file))


def write_output(target: OutputTarget, source_code: str, normalizer: SourceNormalizer) -> None:
    """Write generated code to its target.

    Files go through the normalizer, which writes them itself and raises
    NormalizationError if it had to fall back to the original code. Streams
    receive the code as is, followed by a newline.
    """
    if isinstance(target, FileTarget):
        normalizer.save(target.path, source_code)
    else:
        target.stream.write(source_code + "\n")
        target.stream.flush()
