"""Asynchronous operation dispatcher -- build, send, intercept, normalise.

This module provides :class:`Dispatcher`, which executes a Swagger operation
identified only by its ``operationId``. It wraps :class:`httpx.AsyncClient`
and runs, in order:

1. operation lookup (:func:`~crudwizard.parser.locator.find_operation`),
2. the argument interceptor chain,
3. request building (:func:`~crudwizard.client.builder.build_request`),
4. the HTTP call,
5. the response interceptor chain (successful calls only).

Failures of the HTTP call, including a body that cannot be encoded as
JSON, are never raised past :meth:`Dispatcher.invoke`. They are logged and
returned as a failed :class:`~crudwizard.models.DispatchResult` carrying
the error and, when the server answered, its response. The only condition ``invoke`` raises for is
an unknown ``operationId`` (and errors raised by argument interceptors).

There are no retries and no cancellation: one attempt per call, and the
timeout is whatever the transport is configured with.

See Also:
    :class:`~crudwizard.plugins.hooks.InterceptorRegistry` for the
    interceptor chains.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from crudwizard.client.builder import build_request, check_arguments
from crudwizard.exceptions import OperationNotFoundError
from crudwizard.models import DispatchResult, RequestConfig, RequestDescriptor
from crudwizard.output import get_output
from crudwizard.parser.classifier import classify_parameters
from crudwizard.parser.locator import find_operation
from crudwizard.plugins.hooks import InterceptorRegistry, get_registry

logger = logging.getLogger(__name__)


class Dispatcher:
    """Execute Swagger operations by ``operationId``.

    Use it as an async context manager to share one connection pool across
    calls; outside a context block each :meth:`invoke` opens and closes its
    own client.

    Args:
        registry: Interceptor chains to apply. Defaults to the process-wide
            registry from :func:`~crudwizard.plugins.hooks.get_registry`.
        request_config: Transport settings (timeout, SSL verification).
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic 200 response is returned without network I/O.
        strict_arguments: Reject arguments matching no declared parameter
            with :class:`~crudwizard.exceptions.InvalidUsageError`.

    Example::

        async with Dispatcher(registry) as dispatcher:
            result = await dispatcher.invoke(document, "findPetsByStatus", {"status": "sold"})
    """

    def __init__(
        self,
        registry: Optional[InterceptorRegistry] = None,
        request_config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        dry_run: bool = False,
        strict_arguments: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else get_registry()
        self._config = request_config or RequestConfig()
        self._transport = transport
        self._dry_run = dry_run
        self._strict_arguments = strict_arguments
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def registry(self) -> InterceptorRegistry:
        return self._registry

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> Dispatcher:
        self._client = self._make_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def invoke(
        self,
        document: dict[str, Any],
        operation_id: str,
        arguments: Optional[Mapping[str, Any]] = None,
    ) -> DispatchResult:
        """Locate, build and send the operation named *operation_id*.

        Args:
            document: The resolved Swagger document.
            operation_id: The ``operationId`` to dispatch.
            arguments: Parameter name to value mapping. Missing parameters
                are omitted from the request.

        Returns:
            A :class:`~crudwizard.models.DispatchResult`. ``ok`` is ``False``
            for network errors, non-2xx statuses and response interceptor
            failures; callers must check it.

        Raises:
            OperationNotFoundError: If *operation_id* is not in *document*.
            InvalidUsageError: If strict argument checking rejects *arguments*.
        """
        location = find_operation(document, operation_id)
        if location is None:
            raise OperationNotFoundError(operation_id)

        classified = classify_parameters(document, location.operation.get("parameters"))
        args = dict(arguments or {})
        check_arguments(classified, args, strict=self._strict_arguments)

        args = await self._registry.run_arguments(document, operation_id, args)
        request = build_request(document, location, args, classified)
        logger.debug("Dispatching %s: %s %s", operation_id, request.method, request.full_url)

        if self._dry_run:
            return DispatchResult(
                operation_id=operation_id, ok=True, response=self._print_dry_run(request)
            )

        try:
            content = _encode_body(request)
        except (TypeError, ValueError) as exc:
            logger.warning("Operation %s has a body that cannot be encoded as JSON: %s", operation_id, exc)
            return DispatchResult(operation_id=operation_id, ok=False, error=exc)

        try:
            response = await self._send(request, content)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Operation %s failed before a response was received: %s", operation_id, exc)
            return DispatchResult(operation_id=operation_id, ok=False, error=exc)

        if not response.is_success:
            error = httpx.HTTPStatusError(
                f"HTTP {response.status_code} from {request.method} {request.url}",
                request=response.request,
                response=response,
            )
            logger.warning("Operation %s failed: %s", operation_id, error)
            return DispatchResult(operation_id=operation_id, ok=False, response=response, error=error)

        try:
            response = await self._registry.run_response(document, operation_id, response)
        except Exception as exc:
            logger.warning("Response interceptor failed for %s: %s", operation_id, exc, exc_info=True)
            return DispatchResult(operation_id=operation_id, ok=False, response=response, error=exc)

        return DispatchResult(operation_id=operation_id, ok=True, response=response)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )

    async def _send(self, request: RequestDescriptor, content: Optional[bytes]) -> httpx.Response:
        kwargs: dict[str, Any] = {
            "method": request.method,
            "url": request.url,
            "params": request.params,
            "headers": request.headers,
        }
        if content is not None:
            kwargs["content"] = content

        if self._client is not None:
            return await self._client.request(**kwargs)
        async with self._make_client() as client:
            return await client.request(**kwargs)

    def _print_dry_run(self, request: RequestDescriptor) -> httpx.Response:
        """Print request details to stderr and return a synthetic 200 response."""
        get_output().print_request(request)

        return httpx.Response(
            status_code=200,
            headers={"content-type": "application/json"},
            json={"dry_run": True, "message": "Request was not sent"},
            request=httpx.Request(method=request.method, url=request.full_url),
        )


def _encode_body(request: RequestDescriptor) -> Optional[bytes]:
    """Serialise the JSON body the way httpx would, NaN and infinities rejected."""
    if not request.has_body:
        return None
    return json.dumps(
        request.json_body, ensure_ascii=False, separators=(",", ":"), allow_nan=False
    ).encode("utf-8")


async def invoke(
    document: dict[str, Any],
    operation_id: str,
    arguments: Optional[Mapping[str, Any]] = None,
    *,
    registry: Optional[InterceptorRegistry] = None,
    request_config: Optional[RequestConfig] = None,
) -> DispatchResult:
    """Dispatch one operation with a short-lived :class:`Dispatcher`.

    Uses the process-wide interceptor registry unless *registry* is given.
    """
    async with Dispatcher(registry=registry, request_config=request_config) as dispatcher:
        return await dispatcher.invoke(document, operation_id, arguments)
