"""FastAPI application factory for the read-only ledger API."""

from datetime import tzinfo

from fastapi import FastAPI

from stonks.config import AppSettings
from stonks.db import DatabaseHealthPort
from stonks.ledger import LedgerService

from .routers import api_create_health_router, api_create_positions_router


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    ledger_service: LedgerService,
    local_timezone: tzinfo,
) -> FastAPI:
    """Create the FastAPI application instance for the ledger API.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        ledger_service: Ledger service backing position reads.
        local_timezone: Zone applied to `until` values without an offset.

    Returns:
        FastAPI: Framework application instance.
    """

    application = FastAPI(title="Stonks Ledger")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return service identification for bootstrap verification."""

        return {
            "service": "stonks-ledger",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(
        api_create_positions_router(ledger_service=ledger_service, local_timezone=local_timezone)
    )

    return application
