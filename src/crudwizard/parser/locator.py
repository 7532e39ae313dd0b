"""Locate operations in a Swagger document by ``operationId``.

Operations are identified by their ``operationId``; the path template and
HTTP method they sit under are derived from where they are found. The scan
order is document order: every path, then every method under that path.
"""

from __future__ import annotations

from typing import Any, Iterator, Optional

from crudwizard.models import OperationLocation


def iter_operations(document: dict[str, Any]) -> Iterator[OperationLocation]:
    """Yield every operation in *document* in path-then-method order.

    Path items or operations that are not mappings (``None``, vendor
    extension scalars, unresolved junk) are skipped.
    """
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if isinstance(operation, dict):
                yield OperationLocation(method=method, path=path, operation=operation)


def find_operation(document: dict[str, Any], operation_id: str) -> Optional[OperationLocation]:
    """Find the operation whose ``operationId`` equals *operation_id*.

    The first match in :func:`iter_operations` order wins; uniqueness of
    identifiers is not enforced.

    Returns:
        The :class:`~crudwizard.models.OperationLocation`, or ``None`` when
        nothing matches. Whether absence is fatal is up to the caller.
    """
    for location in iter_operations(document):
        if location.operation.get("operationId") == operation_id:
            return location
    return None
