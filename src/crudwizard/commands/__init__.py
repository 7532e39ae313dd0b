"""Built-in CLI sub-commands for crudwizard.

* :mod:`~crudwizard.commands.init` -- create a profile from a Swagger document.
* :mod:`~crudwizard.commands.inspect` -- list operations and resources, show
  one operation's parameters.
* :mod:`~crudwizard.commands.invoke` -- dispatch an operation by ``operationId``.

Each module exports plain callback functions registered directly on the root
app in :mod:`crudwizard.app`.
"""
