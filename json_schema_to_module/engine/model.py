"""
Intermediate representation of the types to generate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TypeKind(str, Enum):
    CLASS = "class"
    ENUM = "enum"
    ALIAS = "alias"


@dataclass
class FieldDef:
    """A dataclass field.

    Attributes:
        name: Python attribute name
        json_name: Property name in the schema
        type_expr: Annotation
        default_expr: Right-hand side of the assignment, empty for none
        has_default: Whether the field can be omitted when constructing
    """

    name: str
    json_name: str
    type_expr: str
    default_expr: str = ""
    has_default: bool = False

    @property
    def declaration(self) -> str:
        if self.default_expr:
            return f"{self.name}: {self.type_expr} = {self.default_expr}"
        return f"{self.name}: {self.type_expr}"


@dataclass
class EnumMember:
    name: str
    value: str


@dataclass
class TypeDef:
    """A generated class, enum or type alias."""

    name: str
    kind: TypeKind
    source: str = ""
    description: str = ""
    fields: list[FieldDef] = field(default_factory=list)
    members: list[EnumMember] = field(default_factory=list)
    alias_expr: str = ""

    def ordered_fields(self) -> list[FieldDef]:
        """Fields without defaults first, as dataclasses require."""
        return [f for f in self.fields if not f.has_default] + [f for f in self.fields if f.has_default]
