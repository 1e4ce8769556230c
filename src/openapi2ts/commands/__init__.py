"""Built-in CLI commands for openapi2ts."""
