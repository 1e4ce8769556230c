"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi2ts.exceptions.Openapi2tsError` subclass.
Build scripts can inspect the exit code to tell a missing schema file from
a broken ``$ref`` without parsing stderr.

Example::

    $ openapi2ts generate openapi.yaml -o schema.ts
    $ echo $?
    8   # EXIT_REF_RESOLUTION_ERROR -- a $ref could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unsupported input."""

EXIT_NOT_FOUND = 4
"""The schema file does not exist or is a directory."""

EXIT_CONNECTION_ERROR = 6
"""A remote schema could not be fetched (HTTP error, timeout, DNS failure)."""

EXIT_SPEC_PARSE_ERROR = 7
"""A schema document could not be parsed as JSON or YAML."""

EXIT_REF_RESOLUTION_ERROR = 8
"""A ``$ref`` pointer could not be resolved."""
