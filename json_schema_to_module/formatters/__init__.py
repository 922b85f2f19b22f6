"""
Normalization stages applied to generated code before it is saved.
"""

from __future__ import annotations

from .base import Formatter, FormatterError
from .black_formatter import BlackFormatter
from .ruff_formatter import RuffImportFixer

__all__ = [
    "Formatter",
    "FormatterError",
    "BlackFormatter",
    "RuffImportFixer",
]
