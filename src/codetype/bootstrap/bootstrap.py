"""Startup sequence and message bus wiring.

`bootstrap()` does, in order:

1. build the engine (bounded pool);
2. ping the database;
3. apply every pending packaged migration for the engine's dialect;
4. wire the unit of work, identity provider client and message bus.

Steps 2 and 3 are fatal: any failure raises `StartupError` and disposes the
engine, so a process that could not migrate never starts serving.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from codetype import config
from codetype.adapters.db.dialects import DialectName, UnsupportedDialect
from codetype.adapters.db.engine import make_engine, ping
from codetype.adapters.db.migrator import Migrator, load_migrations
from codetype.adapters.id_generators import ULIDGenerator
from codetype.adapters.identity_provider import HttpIdentityProviderAdmin
from codetype.adapters.unit_of_work import SqlAlchemyUnitOfWork
from codetype.interfaces.migrations import MigrationError
from codetype.service_layer.handlers import HANDLERS
from codetype.service_layer.messagebus import MessageBus

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from codetype.interfaces.identity_provider import IdentityProviderAdmin
    from codetype.interfaces.unit_of_work import AbstractUnitOfWork
    from codetype.service_layer.commands import Message

logger = logging.getLogger(__name__)


class StartupError(Exception):
    """The application could not be initialized; the process must not serve."""


@dataclass(frozen=True)
class AppContainer:
    """The assembled application."""

    engine: Engine
    message_bus: MessageBus

    def close(self) -> None:
        """Release pooled database connections."""
        self.engine.dispose()


def build_write_uow(engine: Engine) -> AbstractUnitOfWork:
    """Build the unit of work used by all handlers."""
    return SqlAlchemyUnitOfWork(engine, ULIDGenerator())


def migrate(engine: Engine) -> list[str]:
    """Apply the packaged migrations for the engine's dialect.

    Returns:
        Names of the migrations applied.

    Raises:
        StartupError: If the dialect is unsupported or a migration fails.
    """
    try:
        migrations = load_migrations(DialectName.from_sqlalchemy(engine))
        return Migrator(engine).apply(migrations)
    except (MigrationError, UnsupportedDialect) as e:
        raise StartupError(f"apply migrations: {e}") from e


def build_message_bus(
    uow: AbstractUnitOfWork,
    handlers: dict[type[Message], Callable[..., Any]],
    identity_provider: IdentityProviderAdmin | None = None,
) -> MessageBus:
    """Build a message bus with injected dependencies."""
    dependencies: dict[str, object] = {"uow": uow}
    if identity_provider is not None:
        dependencies["identity_provider"] = identity_provider
    # handlers whose dependencies are not all available are left unregistered
    injected_handlers = {
        message_type: inject_dependencies(handler, dependencies)
        for message_type, handler in handlers.items()
        if _dependencies_available(handler, dependencies)
    }

    return MessageBus(uow, handlers=injected_handlers)


def bootstrap(settings: config.Settings | None = None) -> AppContainer:
    """Connect, migrate and wire the application.

    Args:
        settings: Explicit settings; read from the environment when omitted.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
        StartupError: If the database is unreachable or migrations fail.
    """
    settings = settings or config.load_settings()
    engine = make_engine(settings.db_url)

    try:
        ping(engine)
        applied = migrate(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise StartupError(f"ping database: {e}") from e
    except StartupError:
        engine.dispose()
        raise
    if applied:
        logger.info("Startup applied migrations: %s", ", ".join(applied))

    identity_provider = (
        HttpIdentityProviderAdmin(
            settings.identity_admin_url, timeout=settings.identity_timeout_seconds
        )
        if settings.identity_admin_url
        else None
    )
    message_bus = build_message_bus(
        build_write_uow(engine), HANDLERS, identity_provider=identity_provider
    )
    return AppContainer(engine=engine, message_bus=message_bus)


def _dependencies_available(
    handler: Callable, dependencies: Mapping[str, object]
) -> bool:
    params = list(inspect.signature(handler).parameters)[1:]  # skip the message
    return all(name in dependencies for name in params)


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Bind the dependencies a handler asks for, matched by parameter name."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return partial(handler, **deps)
