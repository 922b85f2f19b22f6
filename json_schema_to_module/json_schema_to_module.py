import logging
import sys

import click

from . import __version__
from .cli_utils import PROGRAM_NAME, reconstruct_command_line
from .config import GeneratorConfig
from .engine import SchemaEngine
from .errors import GenerationError
from .pipeline import PipelineOptions, run_pipeline

USAGE_EXAMPLES = """
Reads JSON schemas from the given URLs (or from standard input, one per line)
and generates a single Python module with a dataclass for every object type
found in them, plus any schemas they reference through $ref.

\b
Examples:
  cat urls.txt | json_schema_to_module --out models.py models
  json_schema_to_module --in "https://example.com/a.json file:///tmp/b.yml" --build '!windows' -- monkey
"""

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _require_module_name(ctx, param, value):
    if not value:
        raise click.BadParameter("must not be empty")
    return value


def configure_logging(verbosity: int) -> None:
    # stderr only: stdout may be the output sink
    logging.basicConfig(
        level=LOG_LEVELS.get(verbosity, logging.DEBUG),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command(help=USAGE_EXAMPLES, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name=PROGRAM_NAME)
@click.option(
    "--in",
    "input_locations",
    default=None,
    metavar="INPUT-URLS",
    help="Space-separated list of schema URLs. If not provided, the URLs are read from standard input.",
)
@click.option(
    "--out",
    "output_file",
    default=None,
    metavar="OUTPUT-FILE",
    type=click.Path(dir_okay=False),
    help="File to write the generated code to, created or overwritten. Defaults to standard output.",
)
@click.option(
    "--build",
    "build_directives",
    default=None,
    metavar="BUILD-DIRECTIVES",
    help=(
        "Start the generated code with the line '# +build <BUILD-DIRECTIVES>'. "
        "The comment token can be changed with 'directive_comment' in the --config file."
    ),
)
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True), help="JSON configuration file.")
@click.option("--verbose", "-v", count=True, help="Log progress to standard error (-vv for debug output).")
@click.argument("module_name", metavar="MODULE-NAME", callback=_require_module_name)
def json_schema_to_module(input_locations, output_file, build_directives, config, verbose, module_name):
    configure_logging(verbose)

    if config is not None:
        try:
            config = GeneratorConfig.from_file(config)
        except (OSError, ValueError, TypeError) as e:
            raise click.ClickException(f"Could not load configuration '{config}': {e}") from e
    else:
        config = GeneratorConfig()
    config = config.with_command_line(reconstruct_command_line(json_schema_to_module))

    options = PipelineOptions(
        module_name=module_name,
        input_locations=input_locations,
        output_file=output_file,
        build_directives=build_directives,
    )
    try:
        with click.open_file("-", "r") as stdin, click.open_file("-", "w") as stdout:
            run_pipeline(options, SchemaEngine(config), config, stdin=stdin, stdout=stdout)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e
