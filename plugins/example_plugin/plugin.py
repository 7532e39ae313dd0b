"""Example plugin that traces dispatched operations to stderr."""

from __future__ import annotations

import sys
from typing import Any, Optional

import httpx

from crudwizard.models import GlobalConfig, Profile
from crudwizard.plugins.base import Plugin


class ExamplePlugin(Plugin):
    """Prints each operation's arguments and response status to stderr."""

    def __init__(self) -> None:
        self._initialized = False
        self.calls = 0

    @property
    def name(self) -> str:
        return "example"

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return "Example plugin that traces operations"

    def on_init(self, config: GlobalConfig, profile: Optional[Profile] = None) -> None:
        self._initialized = True

    async def on_arguments(
        self, document: dict[str, Any], operation_id: str, args: dict[str, Any]
    ) -> dict[str, Any]:
        self.calls += 1
        print(f"[example] {operation_id} {sorted(args)}", file=sys.stderr)
        return args

    async def on_response(
        self, document: dict[str, Any], operation_id: str, response: httpx.Response
    ) -> httpx.Response:
        print(f"[example] {operation_id} -> {response.status_code}", file=sys.stderr)
        return response

    def cleanup(self) -> None:
        self._initialized = False
