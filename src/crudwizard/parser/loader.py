"""Load Swagger documents from a URL, local file, or stdin.

This module handles all I/O for fetching raw Swagger 2.0 documents and
converting them into Python dictionaries. JSON and YAML are both accepted
with automatic format detection.

The public functions are:

* :func:`load_document` -- Load and parse a document from any supported source.
* :func:`aload_document` -- Async variant used by
  :class:`~crudwizard.config.ConfigProvider`; URLs are fetched with
  :class:`httpx.AsyncClient`.
* :func:`validate_swagger_version` -- Check the ``swagger`` field and reject
  OpenAPI 3.x documents.

After loading, pass the raw dict to
:func:`~crudwizard.parser.resolver.resolve_all_references` before locating or
dispatching operations.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from crudwizard.exceptions import SpecParseError

_FETCH_TIMEOUT = 30.0


def load_document(source: str) -> dict[str, Any]:
    """Load a Swagger document from URL, file path, or stdin ('-').

    Args:
        source: A URL (http/https), file path, or '-' for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be loaded or parsed.
    """
    if source == "-":
        return _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        return _load_from_url(source)
    else:
        return _load_from_file(source)


async def aload_document(source: str) -> dict[str, Any]:
    """Async counterpart of :func:`load_document`.

    Only URL sources suspend; files and stdin are read synchronously.
    """
    if source.startswith(("http://", "https://")):
        try:
            async with httpx.AsyncClient(timeout=_FETCH_TIMEOUT, follow_redirects=True) as client:
                response = await client.get(source)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SpecParseError(
                f"HTTP {exc.response.status_code} fetching document from {source}"
            ) from exc
        except httpx.RequestError as exc:
            raise SpecParseError(f"Failed to fetch document from {source}: {exc}") from exc
        return _parse_content(response.text, hint=_hint_from_content_type(response))
    return load_document(source)


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except Exception as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content, hint="stdin")


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP(S). The content type is used as a format hint."""
    try:
        response = httpx.get(url, timeout=_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch document from {url}: {exc}") from exc

    return _parse_content(response.text, hint=_hint_from_content_type(response))


def _hint_from_content_type(response: httpx.Response) -> str:
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local ``.json``, ``.yaml`` or ``.yml`` file.

    Unknown extensions fall back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Document file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read document file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Document file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    JSON is tried first unless the hint says YAML; valid JSON is also valid
    YAML but the JSON parser gives sharper errors.

    Raises:
        SpecParseError: If the content cannot be parsed as either format.
    """
    json_error: Exception | None = None
    yaml_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
            if not isinstance(result, dict):
                raise SpecParseError(
                    "Document must be a JSON/YAML object (got "
                    f"{type(result).__name__})"
                )
            return result
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc

    try:
        result = yaml.safe_load(content)
        if not isinstance(result, dict):
            raise SpecParseError(
                "Document must be a JSON/YAML object (got "
                f"{type(result).__name__ if result is not None else 'empty document'})"
            )
        return result
    except yaml.YAMLError as exc:
        yaml_error = exc

    msg = "Failed to parse document as JSON or YAML"
    if json_error:
        msg += f"\n  JSON error: {json_error}"
    if yaml_error:
        msg += f"\n  YAML error: {yaml_error}"
    raise SpecParseError(msg)


def validate_swagger_version(document: dict[str, Any]) -> str:
    """Validate and return the Swagger version string.

    Only Swagger 2.0 documents are dispatchable: the engine relies on
    ``host``/``basePath`` and on ``in: body`` parameters, both of which
    OpenAPI 3.x replaced.

    Args:
        document: The parsed document dictionary.

    Returns:
        The version string (``"2.0"``).

    Raises:
        SpecParseError: If the version is missing, or the document is OpenAPI 3.x.
    """
    if "openapi" in document:
        raise SpecParseError(
            f"OpenAPI {document['openapi']} is not supported. "
            "Only Swagger 2.0 documents can be dispatched."
        )

    version = document.get("swagger")
    if version is None:
        raise SpecParseError("Missing 'swagger' field. Is this a Swagger 2.0 document?")

    version_str = str(version)
    if version_str == "2.0" or version_str.startswith("2."):
        return version_str

    raise SpecParseError(
        f"Unsupported Swagger version: {version_str}. Only Swagger 2.0 is supported."
    )
