"""Transaction store health checks covering connectivity and schema readiness."""

import logging

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from stonks.domain import HealthStatus, StoreConnectionError

from .interfaces import DatabaseHealthPort

logger = logging.getLogger(__name__)

HEALTH_STATUS_OK = "ok"
HEALTH_STATUS_SCHEMA_MISSING = "schema_missing"


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Store health service probing the server and the transaction table."""

    _CONNECTIVITY_QUERY = "SELECT 1"
    _SCHEMA_QUERY = "SELECT 1 FROM stock_transaction WHERE 1 = 0"

    def __init__(self, engine: Engine):
        """Initialize store health service.

        Args:
            engine: SQLAlchemy engine for the transaction store.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the store URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Check that the store is reachable and migrated.

        A reachable server without the `stock_transaction` table is reported
        as `schema_missing` rather than raised, so callers can still start and
        point the operator at the migrations.

        Returns:
            HealthStatus: `ok`, or `schema_missing` with a hint in the detail.

        Raises:
            StoreConnectionError: Raised when the server cannot be reached.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text(self._CONNECTIVITY_QUERY))
                try:
                    connection.execute(text(self._SCHEMA_QUERY))
                except SQLAlchemyError as error:
                    logger.warning("transaction table unavailable at %s: %s", self.db_connection_label(), error)
                    return HealthStatus(
                        status=HEALTH_STATUS_SCHEMA_MISSING,
                        detail="stock_transaction table missing; run `alembic upgrade head`",
                    )
        except SQLAlchemyError as error:
            raise StoreConnectionError("database connectivity check failed", operation="health_check") from error
        return HealthStatus(status=HEALTH_STATUS_OK, detail="transaction store reachable and migrated")
