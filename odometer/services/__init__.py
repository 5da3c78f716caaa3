"""Odometer ledger services."""

from odometer.services.ledger_service import (
    Finalize,
    OdometerLedgerService,
    RaiseFloor,
    Reconciliation,
    SetLive,
)

__all__ = [
    "Finalize",
    "OdometerLedgerService",
    "RaiseFloor",
    "Reconciliation",
    "SetLive",
]
