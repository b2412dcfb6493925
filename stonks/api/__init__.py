"""Read-only HTTP surface over the ledger service."""

from .application import create_api_application

__all__ = ["create_api_application"]
