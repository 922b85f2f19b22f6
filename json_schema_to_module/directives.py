"""
Build directive injection.
"""

from __future__ import annotations

BUILD_DIRECTIVE_PREFIX = "+build"


def render_build_directive(directive: str, comment: str = "#") -> str:
    """Render the leading comment line for a build directive."""
    return f"{comment} {BUILD_DIRECTIVE_PREFIX} {directive}\n"


def inject_build_directive(source_code: str, directive: str | None, comment: str = "#") -> str:
    """Prepend a build directive comment line to the source, if a directive is given.

    The source itself is never inspected.
    """
    if directive is None:
        return source_code
    return render_build_directive(directive, comment) + source_code
