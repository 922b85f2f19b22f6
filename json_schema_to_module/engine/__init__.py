"""
Reference engine turning JSON schemas into a module of Python dataclasses.
"""

from __future__ import annotations

from .generator import ModuleRenderer, SchemaEngine, TypeCollector
from .loader import SchemaLoader, location_to_url
from .resolver import SchemaResolver

__all__ = [
    "SchemaEngine",
    "SchemaLoader",
    "SchemaResolver",
    "TypeCollector",
    "ModuleRenderer",
    "location_to_url",
]
