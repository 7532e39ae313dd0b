"""API key argument plugin.

Fills an API key argument (``api_key`` by default) from a credential source
for every dispatched operation, so callers never pass the key themselves.

See Also:
    :class:`~crudwizard.plugins.api_key.plugin.ApiKeyPlugin`
    :func:`crudwizard.config.resolve_credential` for supported sources.
"""

from crudwizard.plugins.api_key.plugin import ApiKeyPlugin

__all__ = ["ApiKeyPlugin"]
