"""Rent ledger and payment allocation engine."""

__version__ = "0.1.0"
