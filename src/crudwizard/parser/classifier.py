"""Partition an operation's declared parameters by placement."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from crudwizard.models import ClassifiedParameters, ParameterPlacement
from crudwizard.parser.resolver import resolve_reference

logger = logging.getLogger(__name__)

_GROUPS = {
    ParameterPlacement.PATH: "path",
    ParameterPlacement.QUERY: "query",
    ParameterPlacement.HEADER: "header",
    ParameterPlacement.BODY: "body",
    ParameterPlacement.FORM_DATA: "form_data",
}


def classify_parameters(
    document: dict[str, Any],
    parameters: Optional[Iterable[Any]],
) -> ClassifiedParameters:
    """Dereference *parameters* and split them into five placement groups.

    Each entry may still be a ``$ref`` node (multi-hop references are not
    always flattened by :func:`~crudwizard.parser.resolver.resolve_all_references`),
    so it is dereferenced against *document* first. Entries that do not end
    up as a mapping with a known ``in`` value are dropped: a half-written
    parameter declaration degrades the operation instead of aborting it.

    Args:
        document: The resolved document the parameters belong to.
        parameters: The operation's ``parameters`` list, or ``None``.

    Returns:
        A :class:`~crudwizard.models.ClassifiedParameters` with every group
        in declaration order.
    """
    classified = ClassifiedParameters()
    for declared in parameters or ():
        param = resolve_reference(document, declared)
        if not isinstance(param, dict):
            logger.debug("Dropping parameter without a value: %r", declared)
            continue
        try:
            placement = ParameterPlacement(param.get("in"))
        except ValueError:
            logger.debug("Dropping parameter with unknown placement: %r", param.get("in"))
            continue
        getattr(classified, _GROUPS[placement]).append(param)
    return classified
