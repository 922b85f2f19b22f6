"""
Black formatter for Python code.
"""

from __future__ import annotations

from pathlib import Path

from ..config import FormatterConfig
from .base import Formatter, FormatterError


class BlackFormatter(Formatter):
    """Formatter using black for Python code."""

    name = "format"

    def __init__(self, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()
        self._black = None
        self._available = None

    def is_available(self) -> bool:
        """Check if black is installed."""
        if self._available is None:
            try:
                import black

                self._black = black
                self._available = True
            except ImportError:
                self._available = False
        return self._available

    def _mode(self):
        black = self._black
        target_versions = set()
        if self.config.target_version:
            version_name = self.config.target_version.upper()
            if hasattr(black.TargetVersion, version_name):
                target_versions.add(getattr(black.TargetVersion, version_name))
            else:
                # Newer than this black release knows about
                target_versions.add(max(black.TargetVersion, key=lambda v: v.value))

        return black.Mode(
            target_versions=target_versions,
            line_length=self.config.line_length,
            string_normalization=self.config.string_normalization,
            magic_trailing_comma=self.config.magic_trailing_comma,
        )

    def format(self, code: str, path: Path) -> str:
        """
        Format Python code using black.

        Args:
            code: Python source code to format
            path: Destination file of the code (unused by black)

        Returns:
            Formatted code

        Raises:
            FormatterError: If black is missing or the code cannot be parsed
        """
        if not self.is_available():
            raise FormatterError("black is not installed")

        black = self._black
        try:
            return black.format_str(code, mode=self._mode())
        except black.InvalidInput as e:
            raise FormatterError(f"Cannot parse generated code: {e}") from e
