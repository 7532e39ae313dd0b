"""Swagger document parser -- load, resolve ``$ref`` pointers, and locate operations.

This sub-package is the synchronous half of crudwizard: turning a raw
Swagger 2.0 document into a resolved ``dict`` and finding operations and
their parameters in it. Nothing in here performs HTTP dispatch.

Typical usage::

    from crudwizard.parser import load_document, resolve_all_references, find_operation

    raw = load_document("https://petstore.swagger.io/v2/swagger.json")
    document = resolve_all_references(raw)
    location = find_operation(document, "getPetById")

Sub-modules:

* :mod:`~crudwizard.parser.loader` -- I/O layer (URL, file, stdin) plus
  format detection and Swagger version validation.
* :mod:`~crudwizard.parser.resolver` -- Breadth-first ``$ref`` resolution
  that terminates on cyclic schemas.
* :mod:`~crudwizard.parser.locator` -- ``operationId`` lookup.
* :mod:`~crudwizard.parser.classifier` -- Parameter partitioning by placement.
"""

from crudwizard.parser.classifier import classify_parameters
from crudwizard.parser.loader import aload_document, load_document, validate_swagger_version
from crudwizard.parser.locator import find_operation, iter_operations
from crudwizard.parser.resolver import resolve_all_references, resolve_reference

__all__ = [
    "load_document",
    "aload_document",
    "validate_swagger_version",
    "resolve_all_references",
    "resolve_reference",
    "find_operation",
    "iter_operations",
    "classify_parameters",
]
