"""Exception hierarchy for schemacache.

All exceptions inherit from :class:`SchemacacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`schemacache.exit_codes`.
The top-level handler in :func:`schemacache.app.main` catches
``SchemacacheError`` and exits with the appropriate code.

Errors raised by the upstream :class:`~schemacache.client.RegistryClient`
pass through :class:`~schemacache.cache.CachingRegistry` untouched, so
callers see the same exception types whether or not a cache sits in front
of the client.

Subclass hierarchy::

    SchemacacheError          (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- AuthError             (exit 3)
    +-- NotFoundError         (exit 4)
    +-- ServerError           (exit 5)
    +-- ConnectionError_      (exit 6)
    +-- SchemaValidationError (exit 7)
    +-- StorageError          (exit 8)
    |   +-- StorageReadError
    |   +-- StorageWriteError
    +-- ConfigError           (exit 1)
"""

from schemacache.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_SCHEMA,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_STORAGE_ERROR,
)


class SchemacacheError(Exception):
    """Base exception for all schemacache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SchemacacheError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(SchemacacheError):
    """Raised when the registry returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(SchemacacheError):
    """Raised when the registry has no schema, subject, or version for a request."""

    exit_code = EXIT_NOT_FOUND


class ServerError(SchemacacheError):
    """Raised when the registry returns a 5xx or an unmapped 4xx status."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(SchemacacheError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SchemaValidationError(SchemacacheError):
    """Raised when the registry rejects a schema as malformed or incompatible."""

    exit_code = EXIT_INVALID_SCHEMA


class StorageError(SchemacacheError):
    """Base class for cache snapshot failures."""

    exit_code = EXIT_STORAGE_ERROR


class StorageReadError(StorageError):
    """Raised when a snapshot file exists but cannot be read or parsed."""


class StorageWriteError(StorageError):
    """Raised when a newly learned mapping cannot be persisted.

    The mapping is already held in memory when this is raised; only its
    durability failed.
    """


class ConfigError(SchemacacheError):
    """Raised for configuration problems (invalid JSON, bad values, missing registry URL)."""

    exit_code = EXIT_GENERIC_FAILURE
