"""Invoke command -- dispatch an operation by ``operationId``.

``crudwizard invoke`` loads the active profile's document, installs the
discovered plugins into a fresh interceptor registry, dispatches the
operation, prints the response, and exits with the code matching the
outcome (see :mod:`crudwizard.exit_codes`).
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from crudwizard.commands.inspect import load_active_provider
from crudwizard.exceptions import CrudWizardError
from crudwizard.output import debug, error


def invoke_command(
    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId to dispatch."),
    arg: Optional[list[str]] = typer.Option(
        None,
        "--arg",
        "-a",
        help="Argument as NAME=VALUE; VALUE is parsed as JSON when possible. Repeatable.",
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-b", help="JSON value for the operation's body parameter."
    ),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile name."),
) -> None:
    """Dispatch an operation and print its response.

    Example::

        crudwizard invoke getPetById -a petId=7
        crudwizard invoke addPet --body '{"name": "Rex", "photoUrls": []}'
    """
    from crudwizard.client import Dispatcher
    from crudwizard.client.response import format_dispatch_result
    from crudwizard.config import load_global_config
    from crudwizard.parser import classify_parameters, find_operation
    from crudwizard.plugins import InterceptorRegistry, PluginManager

    try:
        arguments = parse_arguments(arg or [])
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    provider = load_active_provider(ctx, profile)
    document = provider.document
    active = provider.profile

    if body is not None:
        location = find_operation(document, operation_id)
        body_params = (
            classify_parameters(document, location.operation.get("parameters")).body
            if location is not None
            else []
        )
        if not body_params:
            error(f"Operation {operation_id} declares no body parameter")
            raise typer.Exit(code=2)
        arguments[body_params[0]["name"]] = _parse_value(body)

    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    registry = InterceptorRegistry()
    manager = PluginManager()
    try:
        loaded = manager.discover(load_global_config(), active)
        manager.install(registry)
        if loaded:
            debug(f"Plugins: {', '.join(loaded)}")

        dispatcher = Dispatcher(
            registry=registry,
            request_config=active.request,
            dry_run=bool(obj.get("dry_run")),
            strict_arguments=active.strict_arguments,
        )

        async def _run():
            async with dispatcher:
                return await dispatcher.invoke(document, operation_id, arguments)

        result = asyncio.run(_run())
        format_dispatch_result(result)
    except CrudWizardError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        manager.cleanup()


def parse_arguments(items: list[str]) -> dict[str, Any]:
    """Parse ``NAME=VALUE`` items into an argument mapping.

    Raises:
        ValueError: If an item has no ``=`` or an empty name.
    """
    arguments: dict[str, Any] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid argument '{item}': expected NAME=VALUE")
        arguments[name.strip()] = _parse_value(value)
    return arguments


def _parse_value(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text
