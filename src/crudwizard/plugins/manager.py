"""Plugin manager -- discovery, loading, and interceptor registration.

This module contains :class:`PluginManager`. It discovers plugins registered
as Python entry points, applies enable/disable filtering from the global
configuration, and installs each plugin's hooks into an
:class:`~crudwizard.plugins.hooks.InterceptorRegistry`.

The entry-point group used for discovery is ``crudwizard.plugins``.
Third-party packages register plugins in their ``pyproject.toml``::

    [project.entry-points."crudwizard.plugins"]
    my-plugin = "my_package.plugin:MyPlugin"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Optional

from crudwizard.exceptions import PluginError
from crudwizard.models import GlobalConfig, Profile
from crudwizard.plugins.base import Plugin
from crudwizard.plugins.hooks import InterceptorRegistry, get_registry

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "crudwizard.plugins"
"""The entry-point group name used for plugin discovery."""


class PluginManager:
    """Discovers, loads, and manages the lifecycle of crudwizard plugins.

    When ``plugins.enabled`` in :class:`~crudwizard.models.GlobalConfig` is
    non-empty only those plugins are loaded; otherwise every discovered
    plugin not listed in ``plugins.disabled`` is loaded.

    Example:
        Typical startup::

            manager = PluginManager()
            manager.discover(global_config, profile)
            manager.install(get_registry())
    """

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._installed: set[tuple[int, str]] = set()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, config: GlobalConfig, profile: Optional[Profile] = None) -> list[str]:
        """Discover and load plugins from the ``crudwizard.plugins`` entry points.

        Returns:
            The names of the plugins that were loaded. Plugins that fail to
            load are logged as warnings and skipped.
        """
        loaded_names: list[str] = []
        enabled_set = set(config.plugins.enabled)
        disabled_set = set(config.plugins.disabled)

        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            name = ep.name

            if enabled_set and name not in enabled_set:
                logger.debug("Plugin '%s' not in enabled list, skipping", name)
                continue
            if name in disabled_set:
                logger.debug("Plugin '%s' is disabled, skipping", name)
                continue

            try:
                plugin_cls = ep.load()
                plugin: Plugin = plugin_cls()
                self.load_plugin(name, plugin, config, profile)
                loaded_names.append(name)
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", name, exc)

        return loaded_names

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_plugin(
        self,
        name: str,
        plugin: Plugin,
        config: GlobalConfig,
        profile: Optional[Profile] = None,
    ) -> None:
        """Initialise *plugin* and register it under *name*.

        Raises:
            PluginError: If a plugin with the same *name* is already loaded.
        """
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already loaded")

        plugin.on_init(config, profile)
        self._plugins[name] = plugin
        logger.info("Loaded plugin '%s' v%s", name, plugin.version)

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_plugin(self, name: str) -> Plugin:
        """Retrieve a loaded plugin by its registered name.

        Raises:
            PluginError: If no plugin with the given *name* is loaded.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin '{name}' is not loaded") from None

    def list_plugins(self) -> list[dict[str, str]]:
        """List loaded plugins as ``name`` / ``version`` / ``description`` dicts."""
        return [
            {
                "name": plugin.name,
                "version": plugin.version,
                "description": plugin.description,
            }
            for plugin in self._plugins.values()
        ]

    # ------------------------------------------------------------------
    # Interceptor registration
    # ------------------------------------------------------------------

    def install(self, registry: Optional[InterceptorRegistry] = None) -> InterceptorRegistry:
        """Register every loaded plugin's overridden hooks into *registry*.

        Hooks are appended in plugin load order, so the first loaded plugin
        sees the arguments first. Calling this twice with the same registry
        does not register a plugin twice.

        Args:
            registry: Target registry; defaults to the process-wide one.

        Returns:
            The registry the hooks were added to.
        """
        registry = registry if registry is not None else get_registry()
        for name, plugin in self._plugins.items():
            key = (id(registry), name)
            if key in self._installed:
                continue
            if plugin.overrides("on_arguments"):
                registry.add_argument_interceptor(plugin.on_arguments)
            if plugin.overrides("on_response"):
                registry.add_response_interceptor(plugin.on_response)
            self._installed.add(key)
        return registry

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cleanup(self) -> None:
        """Call ``cleanup`` on every plugin and reset internal state.

        One plugin's failure is logged and does not stop the others.
        """
        for name, plugin in self._plugins.items():
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up plugin '%s': %s", name, exc)
        self._plugins.clear()
        self._installed.clear()
