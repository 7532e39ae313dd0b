"""Exception hierarchy for crudwizard.

All exceptions inherit from :class:`CrudWizardError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`crudwizard.exit_codes`.
The top-level handler in :func:`crudwizard.app.main` catches
``CrudWizardError`` and exits with the matching code.

Note that the dispatch path never raises :class:`TransportError` or
:class:`ServerError` itself: :meth:`~crudwizard.client.Dispatcher.invoke`
returns a failed :class:`~crudwizard.models.DispatchResult` instead, and the
CLI converts that result into one of these exceptions.

Subclass hierarchy::

    CrudWizardError          (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- OperationNotFoundError (exit 4)
    +-- ServerError            (exit 5)
    +-- TransportError         (exit 6)
    +-- SpecParseError         (exit 7)
    +-- PluginError            (exit 10)
    +-- ConfigError            (exit 1)
"""

from crudwizard.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_OPERATION_NOT_FOUND,
    EXIT_PLUGIN_ERROR,
    EXIT_SERVER_ERROR,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class CrudWizardError(Exception):
    """Base exception for all crudwizard errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CrudWizardError):
    """Raised for malformed CLI input or arguments rejected by a strict check."""

    exit_code = EXIT_INVALID_USAGE


class OperationNotFoundError(CrudWizardError):
    """Raised when no operation in the document carries the requested ``operationId``.

    Always raised before any network activity.

    Args:
        operation_id: The identifier that could not be located.
    """

    exit_code = EXIT_OPERATION_NOT_FOUND

    def __init__(self, operation_id: str):
        super().__init__(f"Could not find operation with ID {operation_id}")
        self.operation_id = operation_id


class ServerError(CrudWizardError):
    """A dispatched operation answered with a non-success HTTP status."""

    exit_code = EXIT_SERVER_ERROR


class TransportError(CrudWizardError):
    """A dispatched operation failed before any HTTP response was received."""

    exit_code = EXIT_TRANSPORT_ERROR


class SpecParseError(CrudWizardError):
    """Raised when a Swagger document cannot be loaded, parsed, or validated."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class PluginError(CrudWizardError):
    """Raised when a plugin fails to load or register its interceptors."""

    exit_code = EXIT_PLUGIN_ERROR


class ConfigError(CrudWizardError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE
