"""
Configuration for a generation run.

A single GeneratorConfig is built when the process starts and passed
explicitly to every pipeline stage that needs it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path


@dataclass(frozen=True)
class FormatterConfig:
    """Configuration for the post-processing formatters."""

    # Line length for the formatters
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"

    # Whether to use string normalization (convert single quotes to double)
    string_normalization: bool = True

    # Whether to honour magic trailing commas
    magic_trailing_comma: bool = True

    # Executable used for the import fixing stage, empty for the one shipped with the ruff package
    ruff_executable: str = ""

    # Seconds before an external formatter process is abandoned
    timeout: float = 30.0


@dataclass(frozen=True)
class GeneratorConfig:
    """Configuration options for a generation run."""

    # Export every generated type (public names and __all__)
    export_types: bool = True

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Comment token used when injecting build directives
    directive_comment: str = "#"

    # Timeout in seconds for fetching network locations
    http_timeout: float = 30.0

    # Reconstructed command line, rendered in the generation comment
    command_line: str = ""

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(GeneratorConfig)}
        kwargs = {}
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                formatter_keys = {f.name for f in fields(FormatterConfig)}
                kwargs["formatter"] = FormatterConfig(**{fk: fv for fk, fv in v.items() if fk in formatter_keys})
            elif k in known and k != "formatter":
                kwargs[k] = v
        return GeneratorConfig(**kwargs)

    @staticmethod
    def from_file(path: str | Path) -> GeneratorConfig:
        """Load a config from a JSON file."""
        with open(path, encoding="utf-8") as f:
            return GeneratorConfig.from_dict(json.load(f))

    def with_command_line(self, command_line: str) -> GeneratorConfig:
        return replace(self, command_line=command_line)

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "export_types": self.export_types,
            "add_generation_comment": self.add_generation_comment,
            "directive_comment": self.directive_comment,
            "http_timeout": self.http_timeout,
            "command_line": self.command_line,
            "formatter": {
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
                "string_normalization": self.formatter.string_normalization,
                "magic_trailing_comma": self.formatter.magic_trailing_comma,
                "ruff_executable": self.formatter.ruff_executable,
                "timeout": self.formatter.timeout,
            },
        }
