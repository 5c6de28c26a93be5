"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~schemacache.exceptions.SchemacacheError` subclass.
Shell wrappers can inspect the exit code to tell a missing schema from an
unreachable registry without parsing stderr.

Example::

    $ schemacache fetch 9999
    $ echo $?
    4   # EXIT_NOT_FOUND -- the registry has no schema with that id
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The registry rejected the supplied credentials."""

EXIT_NOT_FOUND = 4
"""The requested schema, subject, or version does not exist (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The registry returned an HTTP 5xx error or an unexpected 4xx."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INVALID_SCHEMA = 7
"""The registry refused a schema as invalid or incompatible (HTTP 409 / 422)."""

EXIT_STORAGE_ERROR = 8
"""A cache snapshot on disk could not be read or written."""
