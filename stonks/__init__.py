"""Stonks personal stock-transaction ledger."""

__version__ = "0.1.0"
