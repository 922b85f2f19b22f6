"""
Reference generation engine: JSON schema locations in, one Python module out.

1. Loader: fetch each location and every document it references
2. Collector: walk the schemas and build TypeDefs, naming them as it goes
3. Renderer: render the TypeDefs through the jinja2 templates

The output carries a fixed import block; pruning unused imports is left to
the normalizer.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Any
from urllib.parse import unquote, urldefrag, urlsplit

import jinja2

from .. import __version__
from ..config import GeneratorConfig
from ..errors import EngineError
from ..job import GenerationRequest, GenerationResult
from .loader import SchemaLoader, location_to_url
from .model import EnumMember, FieldDef, TypeDef, TypeKind
from .naming import NameRegistry, TypeNamer, field_base_name, to_constant_name
from .resolver import SchemaResolver, child_key, decode_pointer_token, document_url_of

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent.resolve() / "templates" / "python"

DEFINITION_SECTIONS = ("definitions", "$defs")

TYPE_MAP = {
    "integer": "int",
    "number": "float",
    "string": "str",
    "boolean": "bool",
    "null": "None",
    "object": "dict[str, Any]",
    "array": "list[Any]",
}

_MISSING = object()

# Keywords that make a schema describe a type of its own
TYPE_KEYWORDS = ("type", "properties", "items", "prefixItems", "enum", "const", "$ref", "oneOf", "anyOf", "allOf", "additionalProperties")


def _with_null(expr: str, nullable: bool) -> str:
    if not nullable or expr in ("Any", "None") or expr.endswith("| None"):
        return expr
    return f"{expr} | None"


def _union(exprs: list[str]) -> str:
    unique = list(dict.fromkeys(exprs))
    if not unique:
        return "Any"
    if "Any" in unique:
        return "Any"
    # None goes last so that "X | None" reads naturally
    if "None" in unique:
        unique = [e for e in unique if e != "None"] + ["None"]
    return " | ".join(unique)


def _declared_types(schema: dict) -> list[str]:
    declared = schema.get("type")
    if isinstance(declared, str):
        return [declared]
    if isinstance(declared, list):
        return [t for t in declared if isinstance(t, str)]
    return []


def _is_nullable(schema: dict) -> bool:
    if "null" in _declared_types(schema) or schema.get("nullable") is True:
        return True
    enum = schema.get("enum")
    return isinstance(enum, list) and None in enum


def _is_string_enum(schema: dict) -> bool:
    enum = schema.get("enum")
    if not isinstance(enum, list):
        return False
    values = [v for v in enum if v is not None]
    return bool(values) and all(isinstance(v, str) for v in values)


def _python_type_of(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    if isinstance(value, list):
        return "list[Any]"
    if isinstance(value, dict):
        return "dict[str, Any]"
    return "None"


def _literal_type(values: list[Any]) -> str:
    """Literal[...] for int/str/bool values, plain types otherwise."""
    if values and all(isinstance(v, (int, str)) for v in values):
        return f"Literal[{', '.join(repr(v) for v in values)}]"
    return _union([_python_type_of(v) for v in values])


class TypeCollector:
    """Walks schemas and collects the types needed to represent them.

    Classes and enums are kept in discovery order. Aliases are appended once
    their expression is known; they are emitted as `type` statements, so an
    alias may refer to one that comes later.
    """

    def __init__(self, resolver: SchemaResolver, export_types: bool = True):
        self.resolver = resolver
        self.namer = TypeNamer(export_types)
        self.types: list[TypeDef] = []
        self.aliases: list[TypeDef] = []
        # schema key -> type expression of an already named schema
        self._exprs_by_key: dict[str, str] = {}

    @property
    def type_count(self) -> int:
        return len(self.types) + len(self.aliases)

    def collect_root(self, url: str) -> None:
        """Collect the schema at url and every definition of its document."""
        key, schema = self.resolver.root(url)
        if not isinstance(schema, dict):
            return
        # Documents that only hold definitions have no root type
        if any(keyword in schema for keyword in TYPE_KEYWORDS):
            self.type_for(schema, key, self._suggested_name(key), named=True)
        for section in DEFINITION_SECTIONS:
            definitions = schema.get(section)
            if not isinstance(definitions, dict):
                continue
            for name, definition in definitions.items():
                self.type_for(definition, child_key(key, section, name), name, named=True)

    def type_for(self, schema: Any, key: str, suggested: str, named: bool = False) -> str:
        """
        Return the annotation for a subschema, defining types as needed.

        Args:
            schema: The subschema
            key: Identity of the subschema (document URL + JSON pointer)
            suggested: Name to use when the schema has no title
            named: Whether a schema that is neither a class nor an enum gets a type alias

        Returns:
            A Python type expression
        """
        if not isinstance(schema, dict):
            return "Any"
        if "$ref" in schema:
            target_key, target = self.resolver.resolve(key, schema["$ref"])
            return self.type_for(target, target_key, self._suggested_name(target_key), named=True)
        if key in self._exprs_by_key:
            return self._exprs_by_key[key]

        title = schema.get("title")
        text = title if isinstance(title, str) and title.strip() else suggested

        if _is_string_enum(schema):
            return self._define_enum(schema, key, text)
        if "properties" in schema or "allOf" in schema:
            properties, required = self._class_properties(schema, key, set())
            if properties:
                return self._define_class(schema, key, text, properties, required)
        if named:
            return self._define_alias(schema, key, text)
        return self._inline_type(schema, key, text)

    def _suggested_name(self, key: str) -> str:
        document_url, fragment = urldefrag(key)
        pointer = unquote(fragment)
        if pointer.strip("/"):
            return decode_pointer_token(pointer.rstrip("/").rsplit("/", 1)[-1])
        name = PurePosixPath(unquote(urlsplit(document_url).path)).name
        return name.split(".", 1)[0] or "Schema"

    def _define_enum(self, schema: dict, key: str, text: str) -> str:
        name = self.namer.claim(text)
        self._exprs_by_key[key] = _with_null(name, _is_nullable(schema))
        type_def = TypeDef(name=name, kind=TypeKind.ENUM, source=key, description=schema.get("description") or "")
        member_names = NameRegistry()
        for value in dict.fromkeys(v for v in schema["enum"] if v is not None):
            type_def.members.append(EnumMember(member_names.claim(to_constant_name(value)), repr(value)))
        self.types.append(type_def)
        return self._exprs_by_key[key]

    def _define_class(
        self,
        schema: dict,
        key: str,
        text: str,
        properties: list[tuple[str, Any, str]],
        required: set[str],
    ) -> str:
        name = self.namer.claim(text)
        self._exprs_by_key[key] = _with_null(name, _is_nullable(schema))
        type_def = TypeDef(name=name, kind=TypeKind.CLASS, source=key, description=schema.get("description") or "")
        # Registered before the fields are walked so recursive references resolve
        self.types.append(type_def)

        field_names = NameRegistry()
        for json_name, prop_schema, prop_key in properties:
            field_name = field_names.claim(field_base_name(json_name))
            type_expr = self.type_for(prop_schema, prop_key, f"{name} {json_name}")
            type_def.fields.append(self._field(field_name, json_name, prop_schema, type_expr, json_name in required))
        return self._exprs_by_key[key]

    def _define_alias(self, schema: dict, key: str, text: str) -> str:
        name = self.namer.claim(text)
        self._exprs_by_key[key] = name
        type_def = TypeDef(name=name, kind=TypeKind.ALIAS, source=key, description=schema.get("description") or "")
        type_def.alias_expr = self._inline_type(schema, key, name)
        self.aliases.append(type_def)
        return name

    def _class_properties(self, schema: dict, key: str, seen: set[str]) -> tuple[list[tuple[str, Any, str]], set[str]]:
        """Properties of a schema and of everything it combines with allOf.

        Each property keeps the key of the schema that declares it, so that
        its references resolve against the right document.
        """
        seen.add(key)
        properties: dict[str, tuple[str, Any, str]] = {}
        required = set(r for r in schema.get("required") or [] if isinstance(r, str))

        members = schema.get("allOf")
        for index, member in enumerate(members if isinstance(members, list) else []):
            member_key = child_key(key, "allOf", str(index))
            while isinstance(member, dict) and "$ref" in member:
                member_key, member = self.resolver.resolve(member_key, member["$ref"])
            if not isinstance(member, dict) or member_key in seen:
                continue
            member_properties, member_required = self._class_properties(member, member_key, seen)
            for prop in member_properties:
                properties.setdefault(prop[0], prop)
            required |= member_required

        own = schema.get("properties")
        if isinstance(own, dict):
            for json_name, prop_schema in own.items():
                properties[json_name] = (json_name, prop_schema, child_key(key, "properties", json_name))
        return list(properties.values()), required

    def _field(self, field_name: str, json_name: str, prop_schema: Any, type_expr: str, required: bool) -> FieldDef:
        default = prop_schema.get("default", _MISSING) if isinstance(prop_schema, dict) else _MISSING
        args = []
        if default is not _MISSING:
            if isinstance(default, (list, dict)):
                args.append(f"default_factory=lambda: {default!r}")
            else:
                if default is None:
                    type_expr = _with_null(type_expr, True)
                args.append(f"default={default!r}")
        elif not required:
            type_expr = _with_null(type_expr, True)
            args.append("default=None")
        has_default = bool(args)
        if json_name != field_name:
            args.append(f"metadata={{'json': {json_name!r}}}")

        if not args:
            default_expr = ""
        elif len(args) == 1 and args[0].startswith("default="):
            default_expr = args[0][len("default=") :]
        else:
            default_expr = f"field({', '.join(args)})"
        return FieldDef(field_name, json_name, type_expr, default_expr, has_default)

    def _inline_type(self, schema: dict, key: str, text: str) -> str:
        nullable = _is_nullable(schema)
        declared = [t for t in _declared_types(schema) if t != "null"]

        if isinstance(schema.get("enum"), list):
            expr = _literal_type([v for v in schema["enum"] if v is not None])
        elif "const" in schema:
            expr = _literal_type([schema["const"]]) if schema["const"] is not None else "None"
        elif "oneOf" in schema or "anyOf" in schema:
            keyword = "oneOf" if "oneOf" in schema else "anyOf"
            options = schema[keyword] if isinstance(schema[keyword], list) else []
            expr = _union([self.type_for(option, child_key(key, keyword, str(i)), f"{text} option {i + 1}") for i, option in enumerate(options)])
        elif (declared == ["array"]) or (not declared and ("items" in schema or "prefixItems" in schema)):
            expr = self._array_type(schema, key, text)
        elif (declared == ["object"]) or (not declared and "additionalProperties" in schema):
            expr = self._mapping_type(schema, key, text)
        elif declared:
            expr = _union([TYPE_MAP.get(t, "Any") for t in declared])
        elif isinstance(schema.get("allOf"), list) and schema["allOf"]:
            expr = self.type_for(schema["allOf"][0], child_key(key, "allOf", "0"), text)
        else:
            expr = "Any"
        return _with_null(expr, nullable)

    def _array_type(self, schema: dict, key: str, text: str) -> str:
        items = schema.get("items")
        tuple_items = schema.get("prefixItems", items if isinstance(items, list) else None)
        if isinstance(tuple_items, list):
            keyword = "prefixItems" if "prefixItems" in schema else "items"
            members = [self.type_for(item, child_key(key, keyword, str(i)), f"{text} item {i + 1}") for i, item in enumerate(tuple_items)]
            return f"tuple[{', '.join(members)}]" if members else "tuple[()]"
        if isinstance(items, dict):
            return f"list[{self.type_for(items, child_key(key, 'items'), f'{text} item')}]"
        return "list[Any]"

    def _mapping_type(self, schema: dict, key: str, text: str) -> str:
        additional = schema.get("additionalProperties")
        if isinstance(additional, dict) and additional:
            return f"dict[str, {self.type_for(additional, child_key(key, 'additionalProperties'), f'{text} value')}]"
        return "dict[str, Any]"


def _escape_docstring(text: str) -> str:
    text = str(text).strip().replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text = text[:-1] + '\\"'
    return text


class ModuleRenderer:
    """Renders collected types into module source through jinja2 templates."""

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True, keep_trailing_newline=True)
        self.jinja_env.filters["docstring"] = _escape_docstring
        self.prefix = self._load("prefix.py.jinja2")
        self.class_model = self._load("class.py.jinja2")
        self.suffix = self._load("suffix.py.jinja2")

    def _load(self, name: str) -> jinja2.Template:
        return self.jinja_env.from_string((TEMPLATES_DIR / name).read_text(encoding="utf-8"))

    def generation_comment(self) -> list[str]:
        if not self.config.add_generation_comment:
            return []
        lines = [f"Code generated by json_schema_to_module {__version__}. DO NOT EDIT."]
        if self.config.command_line:
            lines.append(f"Command: {self.config.command_line}")
        return lines

    def render(self, request: GenerationRequest, collector: TypeCollector) -> str:
        exports = []
        if request.export_types:
            exports = sorted(t.name for t in collector.types + collector.aliases)

        out = self.prefix.render(
            generation_comment=self.generation_comment(),
            module_name=request.module_name,
            locations=[location for location in request.locations if location.strip()],
        )
        for type_def in collector.types:
            out += self.class_model.render(type_def=type_def) + "\n\n"
        out += self.suffix.render(aliases=collector.aliases, exports=exports)
        return out


class SchemaEngine:
    """Generates a module of dataclasses for every type found in the given schemas.

    Schemas referenced through $ref are fetched and generated as well.
    """

    def __init__(self, config: GeneratorConfig | None = None, loader: SchemaLoader | None = None):
        self.config = config or GeneratorConfig()
        self.loader = loader
        self.renderer = ModuleRenderer(self.config)

    def execute(self, request: GenerationRequest) -> GenerationResult:
        locations = []
        for location in request.locations:
            if location.strip():
                locations.append(location.strip())
            else:
                logger.warning("Skipping blank schema location")
        if not locations:
            raise EngineError("No schema locations were provided")

        loader = self.loader or SchemaLoader(timeout=self.config.http_timeout)
        with loader:
            collector = TypeCollector(SchemaResolver(loader), export_types=request.export_types)
            for location in locations:
                url = location_to_url(location)
                logger.debug("Collecting types from %s (%s)", url, document_url_of(url))
                collector.collect_root(url)

        logger.info("Generated %d type(s) for module %s", collector.type_count, request.module_name)
        return GenerationResult(source_code=self.renderer.render(request, collector))
