"""Bootstrap (composition root) for CODETYPE.

Assembles the application at process start: reads configuration, connects
to the database, applies pending migrations, and wires concrete adapters
into the service-layer message bus.

Import rules:
- Entry points import *this* package to build the application.
- This package may import: `codetype.adapters`, `codetype.service_layer`,
  `codetype.interfaces`, `codetype.domain`, and `codetype.config`.
- Inner layers must not import `codetype.bootstrap`.
"""

from .bootstrap import AppContainer, StartupError, bootstrap

__all__ = ["AppContainer", "StartupError", "bootstrap"]
