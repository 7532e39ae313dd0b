"""Assemble concrete HTTP requests from located operations and caller arguments.

:func:`build_request` is the pure, synchronous half of dispatch: it turns an
:class:`~crudwizard.models.OperationLocation` plus an argument mapping into a
:class:`~crudwizard.models.RequestDescriptor` without touching the network.

Arguments are matched to declared parameters by ``name``. A parameter whose
argument is missing (or ``None``) is simply left out: path placeholders stay
literal, query entries are not sent, the body stays empty. Header and
formData parameters are classified but not placed into the request yet.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping
from urllib.parse import quote

from crudwizard.exceptions import InvalidUsageError
from crudwizard.models import ClassifiedParameters, OperationLocation, RequestDescriptor
from crudwizard.parser.classifier import classify_parameters

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}

# encodeURIComponent leaves these unescaped on top of quote()'s "_.-~"
_PATH_SAFE = "!*'()"

_COLLECTION_SEPARATORS = {
    "csv": ",",
    "ssv": " ",
    "tsv": "\t",
    "pipes": "|",
}


def build_request(
    document: dict[str, Any],
    location: OperationLocation,
    arguments: Mapping[str, Any],
    classified: ClassifiedParameters | None = None,
) -> RequestDescriptor:
    """Build the request for *location* from *arguments*.

    Steps, in order: substitute path parameters into the path template,
    join ``https://`` + ``host`` + ``basePath`` + path, append query
    entries in declaration order, then set the body from the last matching
    body parameter. The ``Content-Type`` is always ``application/json``.

    Args:
        document: The resolved document (supplies ``host`` and ``basePath``).
        location: The operation to build, from
            :func:`~crudwizard.parser.locator.find_operation`.
        arguments: Parameter name to value mapping.
        classified: Pre-classified parameters; computed from the operation
            when omitted.

    Returns:
        The assembled :class:`~crudwizard.models.RequestDescriptor`.

    Example::

        location = find_operation(document, "getPetById")
        request = build_request(document, location, {"petId": 42})
        # request.url == "https://petstore.swagger.io/v2/pet/42"
    """
    if classified is None:
        classified = classify_parameters(document, location.operation.get("parameters"))

    path = location.path
    for param in classified.path:
        name = param.get("name")
        if _has_argument(arguments, name):
            value = quote(_stringify(arguments[name]), safe=_PATH_SAFE)
            path = path.replace("{" + name + "}", value)

    host = document.get("host") or ""
    base_path = (document.get("basePath") or "").rstrip("/")
    url = f"https://{host}{base_path}{path}"

    params: list[tuple[str, str]] = []
    for param in classified.query:
        name = param.get("name")
        if _has_argument(arguments, name):
            params.extend(_query_entries(param, arguments[name]))

    request = RequestDescriptor(
        method=location.method.upper(),
        url=url,
        params=params,
        headers=dict(JSON_HEADERS),
    )

    for param in classified.body:
        name = param.get("name")
        if _has_argument(arguments, name):
            request.json_body = arguments[name]
            request.has_body = True

    return request


def check_arguments(
    classified: ClassifiedParameters,
    arguments: Mapping[str, Any],
    strict: bool = False,
) -> list[str]:
    """Report argument names that match no declared parameter.

    Missing arguments are always fine; only unknown ones are reported.

    Args:
        classified: The operation's classified parameters.
        arguments: The caller-supplied arguments.
        strict: Raise instead of just logging.

    Returns:
        The sorted list of unknown argument names.

    Raises:
        InvalidUsageError: If *strict* and at least one name is unknown.
    """
    unknown = sorted(set(arguments) - classified.names())
    if unknown:
        if strict:
            raise InvalidUsageError(
                f"Unknown argument(s): {', '.join(unknown)}. "
                f"Declared parameters: {', '.join(sorted(classified.names())) or 'none'}"
            )
        logger.debug("Ignoring undeclared argument(s): %s", ", ".join(unknown))
    return unknown


def _has_argument(arguments: Mapping[str, Any], name: Any) -> bool:
    return isinstance(name, str) and arguments.get(name) is not None


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _query_entries(param: dict[str, Any], value: Any) -> list[tuple[str, str]]:
    """Serialise one query argument; lists follow ``collectionFormat`` (csv by default)."""
    name = param["name"]
    if not isinstance(value, (list, tuple)):
        return [(name, _stringify(value))]

    collection_format = param.get("collectionFormat", "csv")
    if collection_format == "multi":
        return [(name, _stringify(item)) for item in value]
    separator = _COLLECTION_SEPARATORS.get(collection_format, ",")
    return [(name, separator.join(_stringify(item) for item in value))]
