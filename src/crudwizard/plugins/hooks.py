"""Interceptor chains applied around every dispatched operation.

This module provides :class:`InterceptorRegistry`, which holds two
independent, ordered chains of async transforms:

* **Argument interceptors** -- ``(document, operation_id, args) -> args``,
  run before the request is built.
* **Response interceptors** -- ``(document, operation_id, response) -> response``,
  run on the raw :class:`httpx.Response` after a successful call.

Each chain is a pipeline: interceptors run strictly one after another in
registration order and each receives the previous interceptor's output, so
later entries see (and can override) what earlier ones did. There is no
priority mechanism and nothing ever runs concurrently.

A process-wide registry is available through :func:`get_registry` for
cross-cutting behaviour registered at startup. A
:class:`~crudwizard.client.Dispatcher` can also be handed its own registry,
which keeps ordering explicit and tests isolated.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import httpx

ArgumentInterceptor = Callable[[dict[str, Any], str, dict[str, Any]], Awaitable[dict[str, Any]]]
"""Async transform of the outgoing argument mapping."""

ResponseInterceptor = Callable[[dict[str, Any], str, httpx.Response], Awaitable[httpx.Response]]
"""Async transform of the incoming response."""


class InterceptorRegistry:
    """Ordered argument and response interceptor chains.

    Both chains start empty. The ``add_*`` methods return the interceptor
    so they double as decorators::

        registry = InterceptorRegistry()

        @registry.add_argument_interceptor
        async def add_tenant(document, operation_id, args):
            return {**args, "tenant": "acme"}
    """

    def __init__(self) -> None:
        self._argument_interceptors: list[ArgumentInterceptor] = []
        self._response_interceptors: list[ResponseInterceptor] = []

    @property
    def argument_interceptors(self) -> tuple[ArgumentInterceptor, ...]:
        return tuple(self._argument_interceptors)

    @property
    def response_interceptors(self) -> tuple[ResponseInterceptor, ...]:
        return tuple(self._response_interceptors)

    def add_argument_interceptor(self, interceptor: ArgumentInterceptor) -> ArgumentInterceptor:
        """Append *interceptor* to the end of the argument chain."""
        self._argument_interceptors.append(interceptor)
        return interceptor

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> ResponseInterceptor:
        """Append *interceptor* to the end of the response chain."""
        self._response_interceptors.append(interceptor)
        return interceptor

    async def run_arguments(
        self, document: dict[str, Any], operation_id: str, args: dict[str, Any]
    ) -> dict[str, Any]:
        """Thread *args* through every argument interceptor in order.

        Exceptions raised by an interceptor propagate to the caller.

        Returns:
            The output of the last interceptor, or *args* when the chain is
            empty.
        """
        for interceptor in self._argument_interceptors:
            args = await interceptor(document, operation_id, args)
        return args

    async def run_response(
        self, document: dict[str, Any], operation_id: str, response: httpx.Response
    ) -> httpx.Response:
        """Thread *response* through every response interceptor in order."""
        for interceptor in self._response_interceptors:
            response = await interceptor(document, operation_id, response)
        return response

    def clear(self) -> None:
        """Drop every registered interceptor. Meant for test isolation."""
        self._argument_interceptors.clear()
        self._response_interceptors.clear()

    def __len__(self) -> int:
        return len(self._argument_interceptors) + len(self._response_interceptors)


# ------------------------------------------------------------------ #
# Process-wide registry
# ------------------------------------------------------------------ #

_registry: Optional[InterceptorRegistry] = None


def get_registry() -> InterceptorRegistry:
    """Return the process-wide :class:`InterceptorRegistry`, creating it lazily."""
    global _registry
    if _registry is None:
        _registry = InterceptorRegistry()
    return _registry


def set_registry(registry: InterceptorRegistry) -> None:
    """Install *registry* as the process-wide registry."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Forget the process-wide registry. Primarily useful in test suites."""
    global _registry
    _registry = None
