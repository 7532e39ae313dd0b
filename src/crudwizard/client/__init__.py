"""HTTP dispatch for crudwizard.

Builds concrete requests for located operations and sends them with
:mod:`httpx`, threading arguments and responses through the interceptor
chains of an :class:`~crudwizard.plugins.hooks.InterceptorRegistry`.

Classes and functions:
    :class:`Dispatcher` -- async dispatcher backed by :class:`httpx.AsyncClient`.
    :func:`invoke` -- one-shot dispatch using the process-wide registry.
    :func:`build_request` -- pure request assembly, no network I/O.

Example::

    from crudwizard.client import Dispatcher

    async with Dispatcher() as dispatcher:
        result = await dispatcher.invoke(document, "getPetById", {"petId": 7})
"""

from crudwizard.client.builder import build_request, check_arguments
from crudwizard.client.dispatcher import Dispatcher, invoke

__all__ = ["Dispatcher", "invoke", "build_request", "check_arguments"]
