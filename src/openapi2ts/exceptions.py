"""Exception hierarchy for openapi2ts.

All exceptions inherit from :class:`Openapi2tsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`openapi2ts.exit_codes`.
The loader and transformers only ever raise; the top-level error handler in
:func:`openapi2ts.app.main` catches ``Openapi2tsError`` and exits with the
appropriate code.

Subclass hierarchy::

    Openapi2tsError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- SchemaNotFoundError  (exit 4)
    +-- ConnectionError_     (exit 6)
    +-- SpecParseError       (exit 7)
    +-- RefResolutionError   (exit 8)
    +-- ConfigError          (exit 1)
"""

from openapi2ts.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_REF_RESOLUTION_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class Openapi2tsError(Exception):
    """Base exception for all openapi2ts errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`openapi2ts.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(Openapi2tsError):
    """Raised for unsupported input (bad root type, relative ref from an in-memory schema, bad CLI values)."""

    exit_code = EXIT_INVALID_USAGE


class SchemaNotFoundError(Openapi2tsError):
    """Raised when a local schema path does not exist or names a directory."""

    exit_code = EXIT_NOT_FOUND


class ConnectionError_(Openapi2tsError):
    """Raised when a remote schema cannot be fetched.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class SpecParseError(Openapi2tsError):
    """Raised when a schema document cannot be parsed as JSON or YAML."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class RefResolutionError(Openapi2tsError):
    """Raised when a ``$ref`` points somewhere that cannot be loaded."""

    exit_code = EXIT_REF_RESOLUTION_ERROR


class ConfigError(Openapi2tsError):
    """Raised for configuration problems (invalid project config file)."""

    exit_code = EXIT_GENERIC_FAILURE
