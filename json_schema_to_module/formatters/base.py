"""
Base class for normalization stages.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class FormatterError(Exception):
    """Raised when a formatter cannot process the given code."""


class Formatter(ABC):
    """Abstract base class for source transforms run by the normalizer."""

    # Short stage name used in diagnostics
    name: str = "formatter"

    @abstractmethod
    def format(self, code: str, path: Path) -> str:
        """
        Transform the given code.

        Args:
            code: The source code to transform
            path: The file the code is destined for

        Returns:
            Transformed code

        Raises:
            FormatterError: If the code cannot be transformed
        """

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the formatter is available (dependencies installed).

        Returns:
            True if the formatter can be used
        """
