"""
Best-effort normalization of generated source before it is saved.

The normalizer runs a sequence of stages (import fixing, then canonical
formatting) over a snapshot of the generated code. The first failing stage
aborts the sequence: the original code is written instead of any partial
result and the failure is reported by raising NormalizationError. A file
that does not compile is more useful to look at than no file at all.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .atomic_writer import write_atomic
from .config import FormatterConfig
from .errors import NormalizationError
from .formatters import BlackFormatter, Formatter, FormatterError, RuffImportFixer

logger = logging.getLogger(__name__)


def default_stages(config: FormatterConfig | None = None) -> list[Formatter]:
    """Import fixing followed by canonical formatting."""
    config = config or FormatterConfig()
    return [RuffImportFixer(config), BlackFormatter(config)]


class SourceNormalizer:
    """Normalizes generated code and saves it to a file."""

    def __init__(self, stages: Sequence[Formatter] | None = None):
        self.stages = list(stages) if stages is not None else default_stages()

    def normalize(self, path: Path, source_code: str) -> str:
        """Run every stage in order and return the fully normalized code.

        Raises:
            NormalizationError: At the first failing stage; nothing is returned
        """
        code = source_code
        for stage in self.stages:
            try:
                code = stage.format(code, path)
            except FormatterError as e:
                logger.warning("Normalization stage '%s' failed for %s: %s", stage.name, path, e)
                raise NormalizationError(f"Could not normalize '{path}' ({stage.name}): {e}", stage=stage.name) from e
        return code

    def save(self, path: Path, source_code: str) -> None:
        """Normalize the code and write it to path.

        When a stage fails, the original code is written and the failure is
        re-raised afterwards.

        Raises:
            NormalizationError: After writing the unnormalized code
            SinkError: If the file cannot be written
        """
        try:
            normalized = self.normalize(path, source_code)
        except NormalizationError:
            write_atomic(path, source_code)
            raise
        write_atomic(path, normalized)
