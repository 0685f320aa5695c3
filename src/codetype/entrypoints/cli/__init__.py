"""The `codetype` command-line interface."""
