"""
Resolution of $ref values and JSON pointers across schema documents.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote, urldefrag, urljoin

from ..errors import SchemaReferenceError
from .loader import SchemaLoader


def escape_pointer_token(token: str) -> str:
    # JSON Pointer escaping per RFC 6901
    return token.replace("~", "~0").replace("/", "~1")


def decode_pointer_token(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


def resolve_pointer(document: Any, pointer: str, context: str = "") -> Any:
    """Resolve a JSON pointer (fragment without '#') against a document.

    Raises:
        SchemaReferenceError: If the pointer does not lead anywhere
    """
    if pointer in ("", "/"):
        return document
    if not pointer.startswith("/"):
        raise SchemaReferenceError(f"Unsupported JSON pointer '{pointer}' in {context}")

    current = document
    for raw_token in pointer[1:].split("/"):
        token = decode_pointer_token(raw_token)
        if isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError) as e:
                raise SchemaReferenceError(f"Invalid list index '{token}' while resolving {context}") from e
        elif isinstance(current, dict):
            if token not in current:
                raise SchemaReferenceError(f"Key '{token}' not found while resolving {context}")
            current = current[token]
        else:
            raise SchemaReferenceError(f"Cannot dereference through a non-container while resolving {context}")
    return current


def schema_key(document_url: str, pointer: str = "") -> str:
    """Canonical identity of a subschema: document URL plus pointer."""
    if pointer == "/":
        pointer = ""
    return f"{document_url}#{pointer}"


def child_key(key: str, *tokens: str) -> str:
    """Key of a subschema nested below the subschema identified by key."""
    return key + "".join(f"/{escape_pointer_token(token)}" for token in tokens)


def document_url_of(key: str) -> str:
    return urldefrag(key).url


class SchemaResolver:
    """Finds the subschema a reference points to, loading documents as needed."""

    def __init__(self, loader: SchemaLoader):
        self.loader = loader

    def resolve(self, base_key: str, ref: str) -> tuple[str, Any]:
        """
        Resolve a $ref relative to the subschema it appears in.

        Args:
            base_key: Key of the referring subschema
            ref: The $ref value

        Returns:
            The key and content of the referenced subschema
        """
        target = urljoin(document_url_of(base_key), ref)
        document_url, fragment = urldefrag(target)
        pointer = unquote(fragment)
        document = self.loader.load(document_url)
        return schema_key(document_url, pointer), resolve_pointer(document, pointer, context=target)

    def root(self, url: str) -> tuple[str, Any]:
        """Key and content of the subschema a location URL points to."""
        document_url, fragment = urldefrag(url)
        pointer = unquote(fragment)
        document = self.loader.load(document_url)
        return schema_key(document_url, pointer), resolve_pointer(document, pointer, context=url)
