"""Resolve ``$ref`` JSON Reference pointers in Swagger documents.

Swagger documents use ``$ref`` pointers (e.g.
``{"$ref": "#/definitions/Pet"}``) to avoid repetition, and schemas that refer
to themselves (tree-shaped types, linked lists) are common. Recursive
dereferencing does not terminate on those, so :func:`resolve_all_references`
works in two breadth-first passes driven by an explicit queue:

1. **Skeleton pass** -- clone the source document node by node. ``$ref``
   dicts are cloned like any other dict.
2. **Substitution pass** -- walk the *clone* and replace every ``$ref`` child
   with the node it points to inside the clone. The substituted value is the
   same object that lives at the target location, so referrers share it, and
   references nested inside it are resolved once for all of them.

Substitution only ever moves existing clone nodes around, so the second pass
runs over a fixed set of nodes. A pointer walk that meets a still-unresolved
``$ref`` on its way restarts from the document root (see
:func:`resolve_reference`). The price is that a pointer crossing several
nested references can land on an intermediate value instead of the fully
flattened one.

Only **internal** references (``#/...``) are followed. External references
are left in place, and a pointer naming a missing key yields whatever the
walk reached before it; neither raises.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

logger = logging.getLogger(__name__)

_REF_KEY = "$ref"


def is_reference(value: Any) -> bool:
    """Return ``True`` if *value* is a ``{"$ref": "..."}`` pointer node."""
    return isinstance(value, dict) and isinstance(value.get(_REF_KEY), str)


def _is_composite(value: Any) -> bool:
    return isinstance(value, (dict, list))


def _empty_like(value: Any) -> Any:
    if isinstance(value, dict):
        return {}
    if isinstance(value, list):
        return [None] * len(value)
    return value


def _children(node: dict[str, Any] | list[Any]):
    if isinstance(node, dict):
        return node.items()
    return enumerate(node)


def resolve_all_references(document: dict[str, Any]) -> dict[str, Any]:
    """Return a new document with every reachable ``$ref`` node substituted.

    The input is never modified. The result shares no dicts or lists with
    it; scalars are copied by value. On documents without references the
    result is equal to the input.

    Args:
        document: The raw Swagger document, as returned by
            :func:`~crudwizard.parser.loader.load_document`.

    Returns:
        The resolved document. When the source contains cyclic references
        the result may contain itself (e.g. a schema whose ``items`` is the
        schema), so serialise it with care.

    Example::

        raw = load_document("petstore.yaml")
        resolved = resolve_all_references(raw)
        # resolved["paths"]["/pet"]["post"]["parameters"][0]["schema"]
        # is now the Pet definition itself, not a $ref pointer.
    """
    resolved: dict[str, Any] = {}

    # Pass 1: skeleton clone
    pending: deque[tuple[Any, Any]] = deque([(document, resolved)])
    while pending:
        node, clone = pending.popleft()
        for key, child in _children(node):
            clone_child = _empty_like(child)
            clone[key] = clone_child
            if _is_composite(child):
                pending.append((child, clone_child))

    # Pass 2: substitution over the clone
    queue: deque[Any] = deque([resolved])
    visited: set[int] = set()
    substitutions = 0
    while queue:
        node = queue.popleft()
        if id(node) in visited:
            continue
        visited.add(id(node))

        for key, child in list(_children(node)):
            if not _is_composite(child):
                continue
            if is_reference(child):
                child = resolve_reference(resolved, child)
                node[key] = child
                substitutions += 1
            if _is_composite(child):
                queue.append(child)

    logger.debug("Resolved %d reference(s) over %d node(s)", substitutions, len(visited))
    return resolved


def resolve_reference(document: dict[str, Any], value: Any) -> Any:
    """Dereference *value* against *document* if it is a ``$ref`` node.

    The pointer is walked segment by segment from the document root. When a
    node reached along the way is itself an unresolved ``$ref``, the walk
    continues from the document root instead of from that node. A segment
    that does not exist is skipped and the walk carries on with the next
    one from the same node, so the result may be a partial value. RFC 6901
    escapes (``~1`` for ``/``, ``~0`` for ``~``) are honoured and list nodes
    are indexed by integer segments.

    Args:
        document: The document the pointer is rooted at (usually the
            clone being resolved, or an already resolved document).
        value: Any value; non-reference values are returned unchanged.

    Returns:
        The referenced node, a partial walk result, or *value* itself when
        it is not an internal reference.
    """
    if not is_reference(value):
        return value

    ref: str = value[_REF_KEY]
    if not ref.startswith("#/"):
        logger.debug("Leaving external reference %s unresolved", ref)
        return value

    current: Any = document
    for segment in ref[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")
        found, child = _step(current, segment)
        if not found:
            logger.debug("Reference %s skips missing segment %r", ref, segment)
            continue
        current = document if is_reference(child) else child

    return current


def _step(node: Any, segment: str) -> tuple[bool, Any]:
    """Follow one pointer segment; returns ``(found, child)``."""
    if isinstance(node, dict):
        if segment in node:
            return True, node[segment]
        return False, None
    if isinstance(node, list) and segment.isdigit():
        index = int(segment)
        if index < len(node):
            return True, node[index]
    return False, None
