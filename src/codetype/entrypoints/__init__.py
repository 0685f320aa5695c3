"""Entrypoints (inbound adapters) for CODETYPE.

Expose the application to the outside world: the `codetype` CLI here, and
the framework-free request/response translation any inbound adapter (an
HTTP layer, a job runner) needs. They parse and validate inputs, call the
message bus, and present results.

Dependency rule: may import `codetype.service_layer`, `codetype.domain` and
`codetype.bootstrap`; avoid importing `codetype.adapters` directly.
"""
