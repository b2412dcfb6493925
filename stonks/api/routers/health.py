"""Health endpoint router reporting transaction store readiness."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from stonks.db import DatabaseHealthPort
from stonks.domain import StoreConnectionError


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create the `/health` router.

    The endpoint answers 200 only when the store is reachable and migrated;
    an unreachable store or a missing schema answers 503.

    Args:
        db_health_service: Store health service.

    Returns:
        APIRouter: Router exposing `/health`.

    Raises:
        ValueError: Raised when db_health_service is invalid.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        target = db_health_service.db_connection_label()
        try:
            store_health = db_health_service.db_check_health()
        except StoreConnectionError as error:
            return _api_health_response("degraded", "down", str(error), target)

        if store_health.status != "ok":
            return _api_health_response("degraded", store_health.status, store_health.detail, target)
        return _api_health_response("ok", store_health.status, store_health.detail, target)

    return router


def _api_health_response(overall_status: str, store_status: str, detail: str, target: str) -> JSONResponse:
    return JSONResponse(
        content={
            "status": overall_status,
            "app": "up",
            "database": store_status,
            "detail": detail,
            "target": target,
        },
        status_code=status.HTTP_200_OK if overall_status == "ok" else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
