"""
Ruff-based import fixer for Python code.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from ruff.__main__ import find_ruff_bin

from ..config import FormatterConfig
from .base import Formatter, FormatterError

# Unused imports and import sorting
IMPORT_RULES = "F401,I"


def resolve_ruff_executable(configured: str = "") -> str:
    """The configured ruff executable, or the binary installed with the ruff package."""
    if configured:
        return configured
    try:
        return find_ruff_bin()
    except FileNotFoundError:
        return "ruff"


class RuffImportFixer(Formatter):
    """Removes unused imports and sorts the remaining ones using ruff.

    The target path is passed as the stdin filename so that ruff resolves
    first-party imports and picks up project settings relative to it.
    """

    name = "imports"

    def __init__(self, config: FormatterConfig | None = None):
        self.config = config or FormatterConfig()
        self.executable = resolve_ruff_executable(self.config.ruff_executable)
        self._available = None

    def is_available(self) -> bool:
        """Check if ruff is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def build_command(self, path: Path) -> list[str]:
        cmd = [
            self.executable,
            "check",
            "--fix",
            "--no-cache",
            "--select",
            IMPORT_RULES,
            "--stdin-filename",
            str(path),
        ]
        if self.config.line_length:
            cmd.extend(["--line-length", str(self.config.line_length)])
        if self.config.target_version:
            cmd.extend(["--target-version", self.config.target_version])
        return cmd

    def format(self, code: str, path: Path) -> str:
        """
        Fix the imports of Python code using ruff.

        Args:
            code: Python source code
            path: Destination file of the code

        Returns:
            Code with unused imports removed and imports sorted

        Raises:
            FormatterError: If ruff is missing, times out, or leaves violations behind
        """
        if not self.is_available():
            raise FormatterError(f"ruff is not available ({self.executable})")

        try:
            result = subprocess.run(
                self.build_command(path),
                input=code,
                capture_output=True,
                text=True,
                timeout=self.config.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise FormatterError(f"ruff timed out after {self.config.timeout}s") from e
        except (subprocess.SubprocessError, OSError) as e:
            raise FormatterError(f"ruff could not be run: {e}") from e

        if result.returncode != 0:
            detail = result.stderr.strip() or f"ruff exited with status {result.returncode}"
            raise FormatterError(detail)
        return result.stdout
