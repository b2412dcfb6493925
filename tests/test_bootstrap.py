"""Tests for runtime context assembly."""

from __future__ import annotations

from zoneinfo import ZoneInfo

import pytest

from stonks.bootstrap import bootstrap_create_application, bootstrap_create_context, bootstrap_create_dispatcher
from stonks.config import AppSettings
from stonks.domain import StoreConnectionError


def test_bootstrap_create_context_wires_services_and_checks_connectivity() -> None:
    settings = AppSettings(database_url="sqlite://", ledger_timezone="Europe/Madrid", allow_short_positions=True)

    context = bootstrap_create_context(settings)
    try:
        assert context.local_timezone == ZoneInfo("Europe/Madrid")
        assert context.health_service.db_check_health().status == "schema_missing"
        assert bootstrap_create_dispatcher(context, write_line=lambda line: None) is not None
        assert bootstrap_create_application(context).title == "Stonks Ledger"
    finally:
        context.engine.dispose()


def test_bootstrap_create_context_fails_fast_when_store_is_unreachable() -> None:
    settings = AppSettings(database_url="sqlite:////nonexistent-directory/stonks.db")

    with pytest.raises(StoreConnectionError):
        bootstrap_create_context(settings)


def test_bootstrap_create_context_can_skip_connectivity_check() -> None:
    settings = AppSettings(database_url="sqlite:////nonexistent-directory/stonks.db")

    context = bootstrap_create_context(settings, verify_connectivity=False)

    assert context.settings is settings
    context.engine.dispose()
