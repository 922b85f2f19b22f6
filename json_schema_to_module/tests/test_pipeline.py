"""
End-to-end tests of the generation pipeline and the command line.
"""

from __future__ import annotations

import ast
import io
import json
import warnings

import pytest
from click.testing import CliRunner

from json_schema_to_module import __version__
from json_schema_to_module.config import GeneratorConfig
from json_schema_to_module.errors import EngineError, NormalizationError
from json_schema_to_module.formatters import RuffImportFixer
from json_schema_to_module.job import GenerationResult
from json_schema_to_module.json_schema_to_module import json_schema_to_module
from json_schema_to_module.normalizer import SourceNormalizer
from json_schema_to_module.pipeline import PipelineOptions, run_pipeline

DANGLING_IMPORT = """import os
from dataclasses import dataclass
@dataclass
class Thing:
    name: str
"""

FORMATTED = """from dataclasses import dataclass


@dataclass
class Thing:
    name: str
"""

BROKEN = "import os\ndef broken(:\n"


class StubEngine:
    def __init__(self, source_code: str = DANGLING_IMPORT, error: Exception | None = None):
        self.source_code = source_code
        self.error = error
        self.requests = []

    def execute(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return GenerationResult(self.source_code)


def require_ruff():
    if not RuffImportFixer().is_available():
        pytest.skip("ruff not available")


@pytest.fixture
def use_engine(monkeypatch):
    """Make the command line use the given engine instead of SchemaEngine."""

    def install(engine):
        monkeypatch.setattr("json_schema_to_module.json_schema_to_module.SchemaEngine", lambda config: engine)
        return engine

    return install


class TestRunPipeline:
    def test_stream_output(self):
        stdout = io.StringIO()
        engine = StubEngine()

        run_pipeline(PipelineOptions("models", input_locations="a b"), engine, GeneratorConfig(), io.StringIO(), stdout)

        assert stdout.getvalue() == DANGLING_IMPORT + "\n"
        assert engine.requests[0].locations == ("a", "b")

    def test_locations_from_stdin(self):
        engine = StubEngine()
        run_pipeline(PipelineOptions("models"), engine, GeneratorConfig(), io.StringIO("x\ny\n"), io.StringIO())
        assert engine.requests[0].locations == ("x", "y")

    def test_directive_comes_before_normalization(self, tmp_path):
        seen = []

        class Recorder:
            name = "record"

            def format(self, code, path):
                seen.append(code)
                return code

        target = tmp_path / "models.py"
        options = PipelineOptions("models", input_locations="a", output_file=str(target), build_directives="!windows")
        run_pipeline(options, StubEngine("x = 1\n"), GeneratorConfig(), io.StringIO(), io.StringIO(), normalizer=SourceNormalizer([Recorder()]))

        assert seen == ["# +build !windows\nx = 1\n"]
        assert target.read_text() == "# +build !windows\nx = 1\n"

    def test_directive_comment_token_comes_from_config(self):
        stdout = io.StringIO()
        options = PipelineOptions("models", input_locations="a", build_directives="!windows")
        run_pipeline(options, StubEngine("B"), GeneratorConfig(directive_comment="//"), io.StringIO(), stdout)
        assert stdout.getvalue() == "// +build !windows\nB\n"

    def test_engine_failure_writes_nothing(self, tmp_path):
        target = tmp_path / "models.py"
        options = PipelineOptions("models", input_locations="a", output_file=str(target))

        with pytest.raises(EngineError):
            run_pipeline(options, StubEngine(error=EngineError("unreachable")), GeneratorConfig(), io.StringIO(), io.StringIO())

        assert not target.exists()

    def test_normalization_failure_keeps_original(self, tmp_path):
        target = tmp_path / "models.py"
        options = PipelineOptions("models", input_locations="a", output_file=str(target))

        with pytest.raises(NormalizationError):
            run_pipeline(options, StubEngine(BROKEN), GeneratorConfig(), io.StringIO(), io.StringIO())

        assert target.read_text() == BROKEN


class TestCommandLine:
    def test_file_output_is_normalized(self, tmp_path, use_engine):
        require_ruff()
        engine = use_engine(StubEngine())
        target = tmp_path / "out.py"

        result = CliRunner().invoke(json_schema_to_module, ["--in", "file:///a.yml", "--out", str(target), "models"])

        assert result.exit_code == 0, result.output
        assert target.read_text() == FORMATTED
        request = engine.requests[0]
        assert request.locations == ("file:///a.yml",)
        assert request.module_name == "models"
        assert request.export_types is True

    def test_engine_failure(self, tmp_path, use_engine):
        use_engine(StubEngine(error=EngineError("Could not download 'file:///a.yml'")))
        target = tmp_path / "out.py"

        result = CliRunner().invoke(json_schema_to_module, ["--in", "file:///a.yml", "--out", str(target), "models"])

        assert result.exit_code == 1
        assert "Could not download" in result.output
        assert not target.exists()

    def test_normalization_failure_writes_original_and_fails(self, tmp_path, use_engine):
        use_engine(StubEngine(BROKEN))
        target = tmp_path / "out.py"

        result = CliRunner().invoke(json_schema_to_module, ["--in", "a", "--out", str(target), "models"])

        assert result.exit_code == 1
        assert "Could not normalize" in result.output
        assert target.read_text() == BROKEN

    def test_stream_output_is_never_normalized(self, use_engine):
        use_engine(StubEngine(BROKEN))

        result = CliRunner().invoke(json_schema_to_module, ["--in", "a", "models"])

        assert result.exit_code == 0
        assert result.stdout == BROKEN + "\n"

    def test_stdin_locations_and_build_directive(self, use_engine):
        engine = use_engine(StubEngine("x = 1\n"))

        result = CliRunner().invoke(json_schema_to_module, ["--build", "!windows", "--", "models"], input="x\ny\n")

        assert result.exit_code == 0
        assert result.stdout == "# +build !windows\nx = 1\n\n"
        assert engine.requests[0].locations == ("x", "y")

    def test_standard_streams_raise_no_deprecation_warnings(self, use_engine):
        engine = use_engine(StubEngine("x = 1\n"))

        with warnings.catch_warnings():
            warnings.simplefilter("error", DeprecationWarning)
            result = CliRunner().invoke(json_schema_to_module, ["models"], input="a\n")

        assert result.exception is None, result.exception
        assert result.stdout == "x = 1\n\n"
        assert engine.requests[0].locations == ("a",)

    def test_unterminated_stdin_record_is_dropped(self, use_engine):
        engine = use_engine(StubEngine("x = 1\n"))
        result = CliRunner().invoke(json_schema_to_module, ["models"], input="a\nb")
        assert result.exit_code == 0
        assert engine.requests[0].locations == ("a",)

    def test_empty_stdin_reaches_the_engine(self, use_engine):
        engine = use_engine(StubEngine())
        result = CliRunner().invoke(json_schema_to_module, ["models"], input="")
        assert result.exit_code == 0
        assert engine.requests[0].locations == ()

    def test_config_file(self, tmp_path, use_engine):
        use_engine(StubEngine("x = 1\n"))
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"directive_comment": "//"}))

        result = CliRunner().invoke(json_schema_to_module, ["-c", str(config), "--in", "a", "--build", "linux", "models"])

        assert result.exit_code == 0
        assert result.stdout.startswith("// +build linux\n")

    def test_invalid_config_file(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text("{not json")

        result = CliRunner().invoke(json_schema_to_module, ["-c", str(config), "--in", "a", "models"])

        assert result.exit_code == 1
        assert "Could not load configuration" in result.output

    def test_module_name_is_required(self):
        result = CliRunner().invoke(json_schema_to_module, ["--in", "a"])
        assert result.exit_code == 2

    def test_module_name_must_not_be_empty(self):
        result = CliRunner().invoke(json_schema_to_module, ["--in", "a", ""])
        assert result.exit_code == 2
        assert "must not be empty" in result.output

    def test_version(self):
        result = CliRunner().invoke(json_schema_to_module, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        result = CliRunner().invoke(json_schema_to_module, ["-h"])
        assert result.exit_code == 0
        assert "--in INPUT-URLS" in result.output
        assert "MODULE-NAME" in result.output
        assert "directive_comment" in result.output


class TestCommandLineWithSchemaEngine:
    SCHEMA = {
        "title": "Pet",
        "type": "object",
        "properties": {"name": {"type": "string"}, "tags": {"type": "array", "items": {"type": "string"}}},
        "required": ["name"],
    }

    def write_schema(self, tmp_path):
        path = tmp_path / "pet.json"
        path.write_text(json.dumps(self.SCHEMA))
        return path

    def test_generates_to_stdout(self, tmp_path):
        location = self.write_schema(tmp_path).as_uri()

        result = CliRunner().invoke(json_schema_to_module, ["--in", location, "models"])

        assert result.exit_code == 0
        ast.parse(result.stdout)
        assert "class Pet:" in result.stdout
        # Unnormalized output still carries every import
        assert "from typing import Any, Literal" in result.stdout
        assert f"# Command: json_schema_to_module --in {location} -- models" in result.stdout

    def test_generates_normalized_file(self, tmp_path):
        require_ruff()
        location = self.write_schema(tmp_path).as_uri()
        target = tmp_path / "models.py"

        result = CliRunner().invoke(json_schema_to_module, ["--in", location, "--out", str(target), "models"])

        assert result.exit_code == 0, result.output
        code = target.read_text()
        ast.parse(code)
        assert "class Pet:" in code
        assert "Literal" not in code
        assert "from enum import Enum" not in code
        assert 'tags: list[str] | None = None' in code
        assert '__all__ = [\n    "Pet",\n]' in code
