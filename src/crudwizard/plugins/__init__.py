"""Plugin system for crudwizard -- discovery, loading, and interceptor chains.

Third-party packages register plugins by declaring an entry point in the
``crudwizard.plugins`` group. At runtime :class:`PluginManager` discovers
and loads them and installs their hooks into an :class:`InterceptorRegistry`,
whose argument and response chains the
:class:`~crudwizard.client.Dispatcher` runs around every operation.

Key classes:

* :class:`Plugin` -- Abstract base class that all plugins must extend.
* :class:`PluginManager` -- Discovers, loads, and installs plugins.
* :class:`InterceptorRegistry` -- Ordered argument and response chains.

Example:
    Typical usage from the CLI entry point::

        from crudwizard.plugins import PluginManager, get_registry

        manager = PluginManager()
        manager.discover(global_config, profile)
        manager.install(get_registry())
"""

from crudwizard.plugins.base import Plugin
from crudwizard.plugins.hooks import (
    ArgumentInterceptor,
    InterceptorRegistry,
    ResponseInterceptor,
    get_registry,
    reset_registry,
    set_registry,
)
from crudwizard.plugins.manager import PluginManager

__all__ = [
    "Plugin",
    "PluginManager",
    "InterceptorRegistry",
    "ArgumentInterceptor",
    "ResponseInterceptor",
    "get_registry",
    "set_registry",
    "reset_registry",
]
