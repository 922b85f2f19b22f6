"""
Tests for the ruff import fixer and the black formatter.
"""

from pathlib import Path

import pytest

from json_schema_to_module.config import FormatterConfig
from json_schema_to_module.formatters import BlackFormatter, FormatterError, RuffImportFixer
from json_schema_to_module.formatters.ruff_formatter import resolve_ruff_executable

DIRTY = """import os
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Thing:
    name: str
    extra: Any = None
"""


def require_ruff() -> RuffImportFixer:
    fixer = RuffImportFixer()
    if not fixer.is_available():
        pytest.skip("ruff not available")
    return fixer


class TestRuffImportFixer:
    def test_removes_unused_imports(self, tmp_path):
        fixer = require_ruff()
        fixed = fixer.format(DIRTY, tmp_path / "models.py")

        assert "import os" not in fixed
        assert "field" not in fixed
        assert "from dataclasses import dataclass\n" in fixed
        assert "from typing import Any\n" in fixed

    def test_syntax_error_fails(self, tmp_path):
        fixer = require_ruff()
        with pytest.raises(FormatterError):
            fixer.format("import os\ndef broken(:\n", tmp_path / "models.py")

    def test_missing_executable_fails(self, tmp_path):
        fixer = RuffImportFixer(FormatterConfig(ruff_executable=str(tmp_path / "no-such-ruff")))
        assert not fixer.is_available()
        with pytest.raises(FormatterError, match="not available"):
            fixer.format(DIRTY, tmp_path / "models.py")

    def test_command_uses_target_path(self, tmp_path):
        fixer = RuffImportFixer(FormatterConfig(ruff_executable="ruff", line_length=120, target_version="py313"))
        cmd = fixer.build_command(tmp_path / "models.py")

        assert cmd[:3] == ["ruff", "check", "--fix"]
        assert cmd[cmd.index("--stdin-filename") + 1] == str(tmp_path / "models.py")
        assert cmd[cmd.index("--select") + 1] == "F401,I"
        assert cmd[cmd.index("--line-length") + 1] == "120"
        assert cmd[cmd.index("--target-version") + 1] == "py313"

    def test_configured_executable_wins(self):
        assert resolve_ruff_executable("/opt/ruff") == "/opt/ruff"


class TestBlackFormatter:
    def test_formats_code(self):
        formatted = BlackFormatter().format("x=[1,2 ,3]\ny = {'a':1}\n", Path("models.py"))
        assert formatted == 'x = [1, 2, 3]\ny = {"a": 1}\n'

    def test_respects_string_normalization(self):
        config = FormatterConfig(string_normalization=False)
        formatted = BlackFormatter(config).format("y = {'a':1}\n", Path("models.py"))
        assert formatted == "y = {'a': 1}\n"

    def test_invalid_code_fails(self):
        with pytest.raises(FormatterError, match="Cannot parse"):
            BlackFormatter().format("def broken(:\n", Path("models.py"))

    def test_unknown_target_version_falls_back_to_newest(self):
        config = FormatterConfig(target_version="py399")
        assert BlackFormatter(config).format("x=1\n", Path("models.py")) == "x = 1\n"

    def test_type_alias_statements(self):
        formatted = BlackFormatter().format("type Tree=list[Tree]\n", Path("models.py"))
        assert formatted == "type Tree = list[Tree]\n"
