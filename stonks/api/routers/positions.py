"""Position and average-price read API router composition."""

from __future__ import annotations

from datetime import datetime, tzinfo

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from stonks.domain import CommandParseError, Position, TransactionStoreError, dates_parse_cutoff
from stonks.ledger import LedgerService


def api_create_positions_router(ledger_service: LedgerService, local_timezone: tzinfo) -> APIRouter:
    """Create router exposing position, average-price and collection reads.

    Args:
        ledger_service: Ledger service backing every endpoint.
        local_timezone: Zone applied to `until` values without an offset.

    Returns:
        APIRouter: Router exposing read endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if ledger_service is None:
        raise ValueError("ledger_service must not be None")

    router = APIRouter(tags=["positions"])

    @router.get("/positions/{ticker}")
    def api_position_get(ticker: str, until: str | None = Query(default=None)) -> JSONResponse:
        """Replay one ticker and return its position."""

        try:
            cutoff = _api_parse_until(until, local_timezone)
            position = ledger_service.ledger_compute_position(ticker=ticker, until=cutoff)
        except ValueError as error:
            return _api_error_response("INVALID_REQUEST", str(error), status.HTTP_400_BAD_REQUEST)
        except TransactionStoreError as error:
            return _api_error_response("STORE_UNAVAILABLE", str(error), status.HTTP_503_SERVICE_UNAVAILABLE)
        return JSONResponse(content=api_serialize_position(position), status_code=status.HTTP_200_OK)

    @router.get("/average-prices")
    def api_average_price_list(
        ticker_filter: str | None = Query(default=None, alias="filter"),
        until: str | None = Query(default=None),
    ) -> JSONResponse:
        """Return average prices for every ticker matching the filter."""

        try:
            cutoff = _api_parse_until(until, local_timezone)
            rows = [
                {
                    "ticker": row.ticker,
                    "average_price": str(row.average_price),
                    "skipped_record_count": row.position.skipped_record_count,
                }
                for row in ledger_service.ledger_average_prices_for_filter(ticker_filter, cutoff)
            ]
        except ValueError as error:
            return _api_error_response("INVALID_REQUEST", str(error), status.HTTP_400_BAD_REQUEST)
        except TransactionStoreError as error:
            return _api_error_response("STORE_UNAVAILABLE", str(error), status.HTTP_503_SERVICE_UNAVAILABLE)
        payload = {"items": rows, "filters": {"filter": ticker_filter, "until": until}}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/collections")
    def api_collection_list(ticker_filter: str | None = Query(default=None, alias="filter")) -> JSONResponse:
        """Return tickers matching the filter with their transaction counts."""

        try:
            collections = ledger_service.ledger_list_collections(ticker_filter)
        except CommandParseError as error:
            return _api_error_response("INVALID_REQUEST", str(error), status.HTTP_400_BAD_REQUEST)
        except TransactionStoreError as error:
            return _api_error_response("STORE_UNAVAILABLE", str(error), status.HTTP_503_SERVICE_UNAVAILABLE)
        payload = {
            "items": [
                {"ticker": ticker, "transaction_count": transaction_count}
                for ticker, transaction_count in collections
            ]
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_serialize_position(position: Position) -> dict[str, object]:
    """Serialize one position to a JSON payload with decimals as strings."""

    return {
        "ticker": position.ticker,
        "quantity": position.quantity,
        "cost_value": str(position.cost_value),
        "average_price": str(position.average_price),
        "as_of": position.as_of.isoformat(),
        "transaction_count": position.transaction_count,
        "skipped_record_count": position.skipped_record_count,
    }


def _api_parse_until(until: str | None, local_timezone: tzinfo) -> datetime | None:
    if until is None or not until.strip():
        return None
    return dates_parse_cutoff(until, local_timezone)


def _api_error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        content={"status": "error", "code": code, "message": message},
        status_code=status_code,
    )


__all__ = ["api_create_positions_router", "api_serialize_position"]
