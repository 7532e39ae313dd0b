"""Inspect commands -- examine a profile's document without dispatching.

``crudwizard operations`` lists every operation, ``crudwizard resources``
lists the profile's declared resources, and ``crudwizard inspect`` shows how
one operation's parameters are classified.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import typer

from crudwizard.config import ConfigProvider
from crudwizard.output import error, get_output


def load_active_provider(ctx: Optional[typer.Context], profile_name: Optional[str] = None) -> ConfigProvider:
    """Load the document for the active profile (or an ad-hoc ``--spec``).

    The profile comes from *profile_name*, then the root ``--profile`` flag,
    then :func:`~crudwizard.config.resolve_config`. A root ``--spec`` flag
    bypasses profiles altogether.

    Raises:
        typer.Exit: With code 2 when no profile can be resolved or the
            document cannot be loaded.
    """
    from crudwizard.config import resolve_config
    from crudwizard.models import Profile

    obj = _obj(ctx)
    spec_override = obj.get("spec")

    if spec_override:
        profile: Optional[Profile] = Profile(name="adhoc", spec=spec_override)
    else:
        try:
            _, profile = resolve_config(cli_profile=profile_name or obj.get("profile"))
        except Exception as exc:
            error(f"Config error: {exc}")
            raise typer.Exit(code=2) from None

    if profile is None:
        error("No active profile. Run: crudwizard init --spec <url>")
        raise typer.Exit(code=2)

    provider = ConfigProvider()
    try:
        asyncio.run(provider.load_profile(profile))
    except Exception as exc:
        error(f"Failed to load document: {exc}")
        raise typer.Exit(code=2) from None
    return provider


def _obj(ctx: Optional[typer.Context]) -> dict[str, Any]:
    if ctx is None or not isinstance(ctx.obj, dict):
        return {}
    return ctx.obj


def operations_command(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile name."),
) -> None:
    """List every operation with its method and path.

    Example::

        crudwizard operations --profile petstore
    """
    from crudwizard.parser import iter_operations

    provider = load_active_provider(ctx, profile)
    rows = [
        [loc.operation_id or "-", loc.method.upper(), loc.path, loc.operation.get("summary") or "-"]
        for loc in iter_operations(provider.document)
    ]
    title = (provider.document.get("info") or {}).get("title") or provider.profile.name
    get_output().print_table(
        ["Operation", "Method", "Path", "Summary"], rows, title=f"{title} -- Operations ({len(rows)})"
    )


def resources_command(
    ctx: typer.Context,
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile name."),
) -> None:
    """List the resources declared by the active profile."""
    provider = load_active_provider(ctx, profile)
    rows = [[r.id, r.name or "-", r.name_plural] for r in provider.get_resources()]
    get_output().print_table(["ID", "Name", "Plural"], rows, title=f"Resources ({len(rows)})")


def inspect_command(
    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId to inspect."),
    profile: Optional[str] = typer.Option(None, "--profile", "-p", help="Profile name."),
) -> None:
    """Show an operation's parameters grouped by placement.

    Example::

        crudwizard inspect findPetsByStatus
    """
    from crudwizard.parser import classify_parameters, find_operation

    provider = load_active_provider(ctx, profile)
    location = find_operation(provider.document, operation_id)
    if location is None:
        error(f"Could not find operation with ID {operation_id}")
        raise typer.Exit(code=4)

    classified = classify_parameters(provider.document, location.operation.get("parameters"))
    output = get_output()
    output.info(f"{location.method.upper()} {location.path}")

    rows: list[list[str]] = []
    for placement, group in (
        ("path", classified.path),
        ("query", classified.query),
        ("header", classified.header),
        ("body", classified.body),
        ("formData", classified.form_data),
    ):
        for param in group:
            rows.append([
                placement,
                str(param.get("name", "-")),
                "yes" if param.get("required") else "",
                _describe_type(param),
            ])
    output.print_table(["In", "Name", "Required", "Type"], rows, title=operation_id)


def _describe_type(param: dict[str, Any]) -> str:
    """Short type label; body schemas may be cyclic so only the top level is read."""
    schema = param.get("schema")
    if isinstance(schema, dict):
        return str(schema.get("type") or "object")
    kind = str(param.get("type") or "-")
    items = param.get("items")
    if kind == "array" and isinstance(items, dict) and items.get("type"):
        return f"array[{items['type']}]"
    return kind
