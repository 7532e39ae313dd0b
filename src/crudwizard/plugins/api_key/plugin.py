"""API key plugin -- injects a credential into the outgoing arguments.

Swagger 2.0 APIs commonly declare their key as an ordinary parameter (for
example the petstore's ``api_key``). This plugin resolves the credential
once, from the active profile's ``api_key`` settings, and adds it to the
argument mapping of every operation whose caller did not supply one.

Only path, query and body parameters reach the wire. When the operation
declares the key as a header parameter (as the petstore's ``deletePet``
does), the request builder drops the filled argument like any other header
value, so the key has to be declared in the query for this plugin to help.

Profile settings::

    {
        "name": "petstore",
        "spec": "https://petstore.swagger.io/v2/swagger.json",
        "api_key": {"argument": "api_key", "source": "env:PETSTORE_KEY"}
    }
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from crudwizard.config import resolve_credential
from crudwizard.models import GlobalConfig, Profile
from crudwizard.plugins.base import Plugin

logger = logging.getLogger(__name__)


class ApiKeyPlugin(Plugin):
    """Fill the configured key argument from a credential source.

    Inactive when the profile has no ``api_key`` section. A source that
    cannot be resolved raises :class:`~crudwizard.exceptions.ConfigError`
    from :meth:`on_init`, which the plugin manager reports as a failed load.
    """

    def __init__(self) -> None:
        self._argument: Optional[str] = None
        self._credential: Optional[str] = None

    @property
    def name(self) -> str:
        return "api_key"

    @property
    def description(self) -> str:
        return "Injects an API key argument into every operation"

    @property
    def active(self) -> bool:
        return self._credential is not None

    def on_init(self, config: GlobalConfig, profile: Optional[Profile] = None) -> None:
        if profile is None or profile.api_key is None:
            logger.debug("No api_key settings in profile; plugin inactive")
            return
        self._argument = profile.api_key.argument
        self._credential = resolve_credential(profile.api_key.source)

    async def on_arguments(
        self, document: dict[str, Any], operation_id: str, args: dict[str, Any]
    ) -> dict[str, Any]:
        if not self.active or self._argument is None:
            return args
        if args.get(self._argument) is not None:
            return args
        return {**args, self._argument: self._credential}

    def cleanup(self) -> None:
        self._credential = None
