"""
Naming of generated types, fields and enum members.
"""

from __future__ import annotations

import keyword
import re

# Splits camelCase boundaries and keeps acronyms together ("userID" -> "user", "ID")
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")

# Names imported by every generated module
GENERATED_MODULE_IMPORTS = {"annotations", "dataclass", "field", "Enum", "Any", "Literal"}


def _normalize_separators(text: str) -> str:
    """Normalize separators (underscores, hyphens, dots) to spaces."""
    return re.sub(r"[_\-.]", " ", text)


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase boundaries."""
    return _WORD_PATTERN.findall(text)


def _capitalize_and_join(words: list[str]) -> str:
    """Capitalize each word and join them together."""
    return "".join(word.capitalize() for word in words if word)


def snake_to_pascal_case(text: str) -> str:
    """Convert snake_case, camelCase, or space-separated text to PascalCase.

    Examples:
        "first_name" -> "FirstName"
        "FIRST_NAME" -> "FirstName"
        "actionTemplate" -> "ActionTemplate"
        "first 3 rows" -> "First3Rows"
        "ABC" -> "Abc"

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    if not text:
        return ""
    normalized = _normalize_separators(text)
    words = _split_into_words(normalized)
    return _capitalize_and_join(words)


def to_snake_case(text: str) -> str:
    """Convert camelCase, PascalCase, kebab-case or spaced text to snake_case.

    Examples:
        "firstName" -> "first_name"
        "userID" -> "user_id"
        "HTTPServer" -> "http_server"
        "x-rate-limit" -> "x_rate_limit"
    """
    words = _split_into_words(_normalize_separators(text))
    return "_".join(word.lower() for word in words)


def to_constant_name(text: str) -> str:
    """Convert an enum value to an UPPER_SNAKE_CASE member name."""
    name = to_snake_case(text).upper()
    if not name:
        return "EMPTY"
    if name[0].isdigit():
        return f"V_{name}"
    return name


class NameRegistry:
    """Hands out unique names, appending a counter on collision."""

    def __init__(self, reserved: set[str] | None = None):
        self._taken: set[str] = set(reserved or ())

    def claim(self, base: str) -> str:
        name = base
        counter = 1
        while name in self._taken:
            name = f"{base}{counter}"
            counter += 1
        self._taken.add(name)
        return name

    def __contains__(self, name: str) -> bool:
        return name in self._taken


class TypeNamer:
    """Derives unique type names from schema titles or fallback text.

    Unexported names get a leading underscore.
    """

    def __init__(self, export_types: bool = True):
        self.export_types = export_types
        self.registry = NameRegistry(GENERATED_MODULE_IMPORTS)

    def claim(self, text: str) -> str:
        base = snake_to_pascal_case(text) or "Type"
        if base[0].isdigit():
            base = f"T{base}"
        if not self.export_types:
            base = f"_{base}"
        return self.registry.claim(base)


def field_base_name(property_name: str) -> str:
    """Python identifier for a JSON property name, before deduplication."""
    name = to_snake_case(property_name)
    if not name:
        name = "value"
    if name[0].isdigit():
        name = f"f_{name}"
    if keyword.iskeyword(name) or keyword.issoftkeyword(name) or name in GENERATED_MODULE_IMPORTS:
        name = f"{name}_"
    return name
