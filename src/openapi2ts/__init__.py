"""openapi2ts -- Generate TypeScript type declarations from OpenAPI 3.0/3.1 schemas.

This package loads an OpenAPI document (plus every document it reaches
through ``$ref`` pointers) and renders one TypeScript source file describing
its paths, webhooks, components and operations.

Typical workflow::

    openapi2ts generate openapi.yaml -o src/schema.ts

Or from Python::

    from openapi2ts import generate

    source = generate("openapi.yaml")

Modules:
    app: Typer application and CLI entry point.
    generator: Output assembly (load, transform, emit).
    models: Shared data shapes (hints, contexts, config).
    config: Option precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Document loading, ``$ref`` resolution and hint resolution.
    transform: OpenAPI object to TypeScript type transformers.
"""

__version__ = "0.1.0"

from openapi2ts.generator import generate, openapi_ts  # noqa: E402

__all__ = ["generate", "openapi_ts", "__version__"]
