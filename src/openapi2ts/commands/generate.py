"""Generate command -- render an OpenAPI schema as TypeScript.

Implements ``openapi2ts generate``. The schema can be a local path, a URL,
or ``-`` for stdin. The generated source goes to stdout unless ``--output``
(or ``output`` in the project config) names a file.
"""

from __future__ import annotations

import sys
import time
from typing import Optional

import typer

from openapi2ts.exceptions import Openapi2tsError
from openapi2ts.output import debug, error, print_data, success, write_file


def generate_command(
    schema: str = typer.Argument(..., help="Schema path or URL (use '-' for stdin)."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file path."),
    auth: Optional[str] = typer.Option(
        None, "--auth", help="Authorization header value for remote schemas."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra HTTP header 'Name: value' (repeatable)."
    ),
    http_method: Optional[str] = typer.Option(
        None, "--http-method", help="HTTP method used to fetch remote schemas."
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Project config file (JSON or YAML)."
    ),
    alphabetize: bool = typer.Option(False, "--alphabetize", help="Sort object members."),
    immutable_types: bool = typer.Option(
        False, "--immutable-types", help="Mark members and arrays readonly."
    ),
    additional_properties: bool = typer.Option(
        False, "--additional-properties", help="Allow arbitrary properties on every object."
    ),
    default_non_nullable: bool = typer.Option(
        False, "--default-non-nullable", help="Treat properties with a default as required."
    ),
    support_array_length: bool = typer.Option(
        False, "--support-array-length", help="Render minItems/maxItems as tuples."
    ),
    path_params_as_types: bool = typer.Option(
        False, "--path-params-as-types", help="Render path keys as template literal types."
    ),
    export_type: bool = typer.Option(
        False, "--export-type", help="Use 'export type' instead of 'export interface'."
    ),
) -> None:
    """Generate TypeScript types from an OpenAPI 3.0/3.1 schema.

    Raises:
        typer.Exit: With the error's exit code when the configuration is
            invalid or the schema cannot be loaded.

    Example::

        openapi2ts generate ./openapi.yaml -o ./src/schema.ts
        curl -s https://api.example.com/openapi.json | openapi2ts generate -
    """
    from openapi2ts.config import parse_header_options, resolve_config
    from openapi2ts.generator import generate

    started = time.perf_counter()
    try:
        config = resolve_config(
            {
                "output": output,
                "auth": auth,
                "http_headers": parse_header_options(header),
                "http_method": http_method,
                "alphabetize": alphabetize,
                "immutable_types": immutable_types,
                "additional_properties": additional_properties,
                "default_non_nullable": default_non_nullable,
                "support_array_length": support_array_length,
                "path_params_as_types": path_params_as_types,
                "export_type": export_type,
            },
            config_path=config_file,
        )
        debug(f"Resolved options: {config.model_dump(exclude={'auth'})}")
        source = generate(sys.stdin if schema == "-" else schema, config)
    except Openapi2tsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if config.output:
        write_file(config.output, source)
        elapsed = round((time.perf_counter() - started) * 1000)
        success(f"{'stdin' if schema == '-' else schema} -> {config.output} [{elapsed}ms]")
    else:
        print_data(source)
