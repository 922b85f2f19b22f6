"""
CLI utilities for command line reconstruction and introspection.
"""

from __future__ import annotations

import click

PROGRAM_NAME = "json_schema_to_module"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct command line from current Click context using introspection.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
        cli_args = ctx.params
    except RuntimeError:
        # No active context, return basic command
        return PROGRAM_NAME

    if not cli_args:
        return PROGRAM_NAME

    arguments = []
    options = []

    for param in click_command.params:
        param_name = param.name
        if param_name not in cli_args:
            continue

        value = cli_args[param_name]
        if value is None or value is False or value == 0:
            continue

        formatted_value = str(value)
        if " " in formatted_value:
            formatted_value = f"'{formatted_value}'"

        if isinstance(param, click.Argument):
            arguments.append(formatted_value)

        elif isinstance(param, click.Option):
            # Skip if it's the default value
            if value == param.default:
                continue

            # Get the primary option name (first in opts list)
            flag = param.opts[0] if param.opts else f"--{param_name}"
            if param.count:
                options.extend([flag] * value)
            else:
                options.extend([flag, formatted_value])

    cmd_parts = [PROGRAM_NAME]
    cmd_parts.extend(options)
    if arguments:
        cmd_parts.append("--")
        cmd_parts.extend(arguments)

    return " ".join(cmd_parts)
