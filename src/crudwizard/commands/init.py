"""Init command -- create a profile from a Swagger document.

Implements ``crudwizard init``: fetches a Swagger 2.0 document (URL, local
file, or stdin), validates it, records the declared resources, saves a
:class:`~crudwizard.models.Profile`, and pins it in a project-local
``crudwizard.json``.
"""

from __future__ import annotations

import re
from typing import Optional

import typer

from crudwizard.output import debug, error, info, success


def init_command(
    spec: str = typer.Option(
        ...,
        "--spec",
        "-s",
        help="Swagger document URL or file path (use '-' for stdin).",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Profile name (derived from info.title if omitted).",
    ),
    resource: Optional[list[str]] = typer.Option(
        None,
        "--resource",
        "-r",
        help="Declared resource as ID:Plural (e.g. pet:Pets). Repeatable.",
    ),
    api_key_source: Optional[str] = typer.Option(
        None,
        "--api-key-source",
        help="Credential source for the api_key plugin (env:VAR or file:/path).",
    ),
    api_key_argument: str = typer.Option(
        "api_key", "--api-key-argument", help="Argument the api_key plugin fills."
    ),
) -> None:
    """Create a profile from a Swagger 2.0 document.

    Example::

        crudwizard init --spec https://petstore.swagger.io/v2/swagger.json -r pet:Pets
        crudwizard init --spec ./swagger.yaml --name petstore
    """
    from crudwizard.config import profile_exists, save_profile, write_project_config
    from crudwizard.models import ApiKeyConfig, Profile, Resource
    from crudwizard.parser import iter_operations, load_document, validate_swagger_version

    info(f"Fetching document from: {spec}")
    try:
        raw = load_document(spec)
        version = validate_swagger_version(raw)
    except Exception as exc:
        error(f"Invalid document: {exc}")
        raise typer.Exit(code=2) from None

    title = (raw.get("info") or {}).get("title") or "api"
    operation_count = sum(1 for _ in iter_operations(raw))
    info(f"Validated: {title} (Swagger {version}, {operation_count} operations)")

    try:
        resources = [_parse_resource(item) for item in resource or []]
    except ValueError as exc:
        error(str(exc))
        raise typer.Exit(code=2) from None

    profile_name = name or _slugify(title)
    if profile_exists(profile_name):
        info(f'Profile "{profile_name}" already exists and will be overwritten.')

    profile = Profile(
        name=profile_name,
        spec=spec,
        resources=[Resource(**fields) for fields in resources],
        api_key=(
            ApiKeyConfig(argument=api_key_argument, source=api_key_source)
            if api_key_source
            else None
        ),
    )
    save_profile(profile)
    path = write_project_config(profile_name)
    debug(f"Pinned default profile in {path}")

    success(f'Profile "{profile_name}" created.')
    info(f"Next: crudwizard operations --profile {profile_name}")


def _parse_resource(text: str) -> dict[str, str]:
    """Parse ``ID:Plural`` (or ``ID:Name:Plural``) into Resource fields."""
    parts = [part.strip() for part in text.split(":")]
    if len(parts) == 2 and all(parts):
        return {"id": parts[0], "namePlural": parts[1]}
    if len(parts) == 3 and all(parts):
        return {"id": parts[0], "name": parts[1], "namePlural": parts[2]}
    raise ValueError(f"Invalid resource '{text}': expected ID:Plural or ID:Name:Plural")


def _slugify(text: str) -> str:
    slug = text.lower().strip()
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    slug = slug.strip("-")
    return slug or "default"
