"""CODETYPE test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Port behavior enforced across every adapter (memory, SQLite, Postgres).
- integration/  : Real database interactions (migrator, unit of work, bootstrap).
- e2e/          : The `codetype` command line, invoked through CliRunner.
- fixtures/     : Shared pytest fixtures (engines, factories).
- helpers/      : Shared utilities (no tests here).

Postgres-backed tests are skipped automatically when Docker is unavailable.
"""
