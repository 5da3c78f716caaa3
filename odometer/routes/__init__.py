"""Odometer ledger route modules."""
