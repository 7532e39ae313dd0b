"""Response formatting bridge -- maps dispatch results to the output system.

After :meth:`~crudwizard.client.Dispatcher.invoke` returns, the CLI hands
the :class:`~crudwizard.models.DispatchResult` to :func:`format_dispatch_result`,
which prints the body through :meth:`~crudwizard.output.OutputManager.print_body`
and the status line to stderr, and converts failures into the matching
:class:`~crudwizard.exceptions.CrudWizardError`.

See Also:
    :mod:`crudwizard.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

import httpx

from crudwizard.exceptions import ServerError, TransportError
from crudwizard.models import DispatchResult
from crudwizard.output import get_output


def format_api_response(response: httpx.Response) -> None:
    """Print the status line to stderr and the decoded body to stdout."""
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}")

    content_type = response.headers.get("content-type", "application/json")
    data = extract_response_data(response)
    if data is not None:
        output.print_body(data, content_type)


def format_dispatch_result(result: DispatchResult) -> None:
    """Render *result* and raise for failures.

    The body is printed whenever a response exists, including failed ones,
    so error payloads reach the user.

    Raises:
        ServerError: The operation answered with a non-success status.
        TransportError: The operation failed before a response arrived.
    """
    if result.response is not None:
        format_api_response(result.response)

    if result.ok:
        return
    if result.response is not None:
        raise ServerError(f"{result.operation_id} failed: {result.error}")
    raise TransportError(f"{result.operation_id} failed: {result.error}")


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Tries JSON first and falls back to text.

    Returns:
        A JSON-decoded object, a ``str`` of raw text, or ``None`` if the
        body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except ValueError:
        return response.text
