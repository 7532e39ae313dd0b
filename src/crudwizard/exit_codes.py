"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to an error category and is referenced by the
corresponding :class:`~crudwizard.exceptions.CrudWizardError` subclass.
Shell wrappers can inspect the exit code of ``crudwizard invoke`` to tell a
missing operation from a failed HTTP call without parsing stderr.

Example::

    $ crudwizard invoke getPetById -a petId=0
    $ echo $?
    5   # EXIT_SERVER_ERROR -- the API answered with a non-2xx status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_OPERATION_NOT_FOUND = 4
"""No operation with the requested ``operationId`` exists in the document."""

EXIT_SERVER_ERROR = 5
"""The remote API answered with a non-success status."""

EXIT_TRANSPORT_ERROR = 6
"""The HTTP call failed before a response was received."""

EXIT_SPEC_PARSE_ERROR = 7
"""The Swagger document could not be loaded or validated."""

EXIT_PLUGIN_ERROR = 10
"""A plugin failed to load or register its interceptors."""
