"""Per-user odometer ledger package.

This package provides modular functionality for:
- The running odometer total and active trip pointer of each user
- Reconciliation instructions applied by the trip lifecycle
- Manual odometer and pointer corrections over the API

The package is organized into:
- routes/: API endpoint handlers
- services/: Ledger reads and reconciliation
- serializers.py: Data transformation utilities
"""

from fastapi import APIRouter

from odometer.routes import ledger

router = APIRouter()

router.include_router(ledger.router, tags=["odometer-ledger"])

__all__ = ["router"]
