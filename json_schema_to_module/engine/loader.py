"""
Fetching and parsing of schema documents.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urldefrag, urlsplit
from urllib.request import url2pathname

import httpx
import yaml

from ..errors import SchemaLoadError

logger = logging.getLogger(__name__)

NETWORK_SCHEMES = ("http", "https")


def location_to_url(location: str) -> str:
    """Turn a location into an absolute URL.

    URLs with a supported scheme are returned as is; anything else is taken
    as a local path and converted to a file:// URL.

    Raises:
        SchemaLoadError: If the location uses an unsupported scheme
    """
    scheme = urlsplit(location).scheme.lower()
    if scheme in NETWORK_SCHEMES or scheme == "file":
        return location
    # Single letters are Windows drive letters, not schemes
    if len(scheme) > 1:
        raise SchemaLoadError(f"Unsupported URL scheme '{scheme}' in location '{location}'")
    return Path(location).resolve().as_uri()


def parse_document(text: str, url: str) -> Any:
    """Parse a JSON document, falling back to YAML."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Could not parse '{url}' as JSON or YAML: {e}") from e


class SchemaLoader:
    """Loads schema documents by URL, fetching each document only once.

    Use as a context manager so the HTTP client is closed afterwards.
    """

    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._documents: dict[str, Any] = {}

    def __enter__(self) -> SchemaLoader:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=httpx.Timeout(self.timeout), follow_redirects=True)
        return self._client

    def load(self, url: str) -> Any:
        """Return the parsed document at url (fragment ignored)."""
        document_url = urldefrag(url).url
        if document_url not in self._documents:
            text = self._fetch(document_url)
            document = parse_document(text, document_url)
            if not isinstance(document, (dict, bool)):
                raise SchemaLoadError(f"'{document_url}' does not contain a JSON schema object")
            self._documents[document_url] = document
        return self._documents[document_url]

    def _fetch(self, url: str) -> str:
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme == "file":
            return self._fetch_file(parts.netloc, parts.path, url)
        if scheme in NETWORK_SCHEMES:
            return self._fetch_http(url)
        raise SchemaLoadError(f"Unsupported URL scheme '{scheme}' in '{url}'")

    def _fetch_file(self, netloc: str, path: str, url: str) -> str:
        local_path = Path(url2pathname(path))
        if netloc and netloc != "localhost":
            local_path = Path(f"//{netloc}") / local_path
        logger.info("Reading schema %s", local_path)
        try:
            return local_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SchemaLoadError(f"Could not read '{url}': {e}") from e

    def _fetch_http(self, url: str) -> str:
        logger.info("Downloading schema %s", url)
        try:
            response = self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SchemaLoadError(f"Could not download '{url}': HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SchemaLoadError(f"Could not download '{url}': {e}") from e
        return response.text
