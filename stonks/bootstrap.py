"""Application bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable

from fastapi import FastAPI
from sqlalchemy import Engine

from stonks.api import create_api_application
from stonks.commands import CommandDispatcher
from stonks.config import AppSettings
from stonks.db import SQLAlchemyDatabaseHealthService, SQLAlchemyTransactionStore, db_create_engine
from stonks.domain import dates_resolve_timezone
from stonks.ledger import LedgerService


@dataclass(frozen=True)
class LedgerContext:
    """Explicit runtime context shared by the CLI and API surfaces.

    Attributes:
        settings: Validated runtime settings.
        engine: SQLAlchemy engine for the transaction store.
        local_timezone: Zone applied to dates entered without an offset.
        health_service: Store connectivity checker.
        ledger_service: Ledger service over the transaction store.
    """

    settings: AppSettings
    engine: Engine
    local_timezone: tzinfo
    health_service: SQLAlchemyDatabaseHealthService
    ledger_service: LedgerService


def bootstrap_create_context(settings: AppSettings, verify_connectivity: bool = True) -> LedgerContext:
    """Assemble the runtime context and verify the store is reachable.

    Args:
        settings: Validated runtime settings.
        verify_connectivity: Run a store health check before returning.

    Returns:
        LedgerContext: Fully wired runtime context.

    Raises:
        StoreConnectionError: Raised when the store is unreachable at startup.
    """

    engine = db_create_engine(database_url=settings.database_url)
    health_service = SQLAlchemyDatabaseHealthService(engine=engine)
    if verify_connectivity:
        health_service.db_check_health()

    store = SQLAlchemyTransactionStore(engine=engine)
    return LedgerContext(
        settings=settings,
        engine=engine,
        local_timezone=dates_resolve_timezone(settings.ledger_timezone),
        health_service=health_service,
        ledger_service=LedgerService(store=store, allow_short_positions=settings.allow_short_positions),
    )


def bootstrap_create_dispatcher(
    context: LedgerContext,
    write_line: Callable[[str], None] = print,
) -> CommandDispatcher:
    """Build the command dispatcher over a runtime context."""

    return CommandDispatcher(
        ledger_service=context.ledger_service,
        local_timezone=context.local_timezone,
        write_line=write_line,
    )


def bootstrap_create_application(context: LedgerContext) -> FastAPI:
    """Build the read-only API application over a runtime context."""

    return create_api_application(
        settings=context.settings,
        db_health_service=context.health_service,
        ledger_service=context.ledger_service,
        local_timezone=context.local_timezone,
    )
