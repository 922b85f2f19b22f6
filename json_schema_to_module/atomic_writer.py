"""
Atomic file writes for generated code.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .errors import SinkError

logger = logging.getLogger(__name__)


def write_atomic(path: Path, content: str) -> None:
    """Write content to a file atomically, creating or replacing it.

    The content goes to a temporary file in the same directory first, which
    is then renamed over the target, so readers never see a partial file.

    Raises:
        SinkError: If the file cannot be created or written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
    except OSError as e:
        raise SinkError(f"Could not create file '{path}': {e}") from e

    temp_path = Path(temp_path_str)
    try:
        with open(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(temp_path, 0o644)
        temp_path.replace(path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        raise SinkError(f"Could not write file '{path}': {e}") from e

    logger.info("Wrote %d characters to %s", len(content), path)
