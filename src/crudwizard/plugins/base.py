"""Abstract base class for crudwizard plugins.

A plugin contributes cross-cutting behaviour to every dispatched operation by
overriding one or both interceptor hooks:

* :meth:`Plugin.on_arguments` -- transform the outgoing argument mapping.
* :meth:`Plugin.on_response` -- transform the raw response of a successful call.

Only overridden hooks are registered, in plugin load order, into an
:class:`~crudwizard.plugins.hooks.InterceptorRegistry` by
:meth:`~crudwizard.plugins.manager.PluginManager.install`.

Plugins are registered as entry points in the ``crudwizard.plugins`` group
and discovered at runtime by :class:`~crudwizard.plugins.manager.PluginManager`.

Example:
    Minimal plugin implementation::

        class TenantPlugin(Plugin):
            @property
            def name(self) -> str:
                return "tenant"

            async def on_arguments(self, document, operation_id, args):
                return {**args, "tenant": "acme"}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from crudwizard.models import GlobalConfig, Profile


class Plugin(ABC):
    """Base class for all crudwizard plugins.

    The plugin lifecycle is:

    1. Instantiation -- the :class:`PluginManager` calls the no-arg constructor.
    2. :meth:`on_init` -- called once with the global config and active profile.
    3. Interceptor hooks -- awaited for every dispatched operation.
    4. :meth:`cleanup` -- called once during shutdown.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used for discovery and logging."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    def on_init(self, config: GlobalConfig, profile: Optional[Profile] = None) -> None:
        """Called once when the plugin is loaded.

        Args:
            config: The global crudwizard configuration.
            profile: The active profile, when one is resolved. Plugins read
                their own settings from it (or from ``profile.model_extra``).
        """

    async def on_arguments(
        self, document: dict[str, Any], operation_id: str, args: dict[str, Any]
    ) -> dict[str, Any]:
        """Transform the argument mapping before the request is built.

        The returned mapping is what the next plugin (or the request
        builder) receives.
        """
        return args

    async def on_response(
        self, document: dict[str, Any], operation_id: str, response: httpx.Response
    ) -> httpx.Response:
        """Transform the raw response of a successful call.

        Exceptions raised here turn the call into a failed
        :class:`~crudwizard.models.DispatchResult`.
        """
        return response

    def cleanup(self) -> None:
        """Called once during shutdown to release plugin resources."""

    def overrides(self, hook: str) -> bool:
        """Return ``True`` if this plugin's class overrides *hook*."""
        return getattr(type(self), hook) is not getattr(Plugin, hook)
