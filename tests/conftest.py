"""Shared test fixtures for crudwizard.

Provides reusable fixtures for loading Swagger fixtures, creating isolated
config environments, managing output and interceptor state, and running CLI
commands. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

import pytest
from rich.logging import RichHandler

from crudwizard.models import Profile, RequestConfig
from crudwizard.output import OutputFormat, OutputManager, reset_output, set_output
from crudwizard.plugins.hooks import reset_registry


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_globals_between_tests() -> None:
    """Reset the global OutputManager and interceptor registry after every test.

    The CLI callback also attaches a Rich log handler to the package logger
    and changes its level; both are undone so log assertions in one test
    do not depend on which CLI test ran before it.
    """
    yield
    reset_output()
    reset_registry()
    package_logger = logging.getLogger("crudwizard")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore Swagger 2.0 document."""
    with open(FIXTURES_DIR / "petstore_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_resolved(petstore_raw: dict[str, Any]) -> dict[str, Any]:
    """The petstore document with every ``$ref`` resolved."""
    from crudwizard.parser.resolver import resolve_all_references

    return resolve_all_references(copy.deepcopy(petstore_raw))


@pytest.fixture
def tree_raw() -> dict[str, Any]:
    """A document whose ``TreeNode`` schema refers to itself."""
    return {
        "swagger": "2.0",
        "info": {"title": "Trees", "version": "1"},
        "host": "trees.example.com",
        "basePath": "/",
        "paths": {
            "/trees": {
                "post": {
                    "operationId": "plantTree",
                    "parameters": [
                        {
                            "in": "body",
                            "name": "tree",
                            "schema": {"$ref": "#/definitions/TreeNode"},
                        }
                    ],
                    "responses": {"200": {"description": "ok"}},
                }
            }
        },
        "definitions": {
            "TreeNode": {
                "type": "object",
                "properties": {
                    "value": {"type": "string"},
                    "children": {
                        "type": "array",
                        "items": {"$ref": "#/definitions/TreeNode"},
                    },
                },
            }
        },
    }


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_file(tmp_path: Path) -> Path:
    """Copy the petstore fixture into tmp_path and return its path."""
    spec_path = tmp_path / "petstore.json"
    spec_path.write_text((FIXTURES_DIR / "petstore_2.0.json").read_text())
    return spec_path


@pytest.fixture
def sample_profile(petstore_file: Path) -> Profile:
    """A profile pointing at the local petstore document."""
    return Profile(
        name="petstore",
        spec=str(petstore_file),
        resources=[{"id": "pet", "namePlural": "Pets"}],
        request=RequestConfig(timeout=5, verify_ssl=False),
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears CRUDWIZARD_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("crudwizard.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("CRUDWIZARD_PROFILE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
