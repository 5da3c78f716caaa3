"""Pydantic request models for odometer ledger operations."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class UserDataUpdateRequest(BaseModel):
    """Partial ledger update.

    Only fields present in the body are applied; an explicit ``null``
    ``activeTrip`` clears the pointer.
    """

    currentOdometer: Any = None
    activeTrip: Any = None

    model_config = ConfigDict(extra="ignore")


class OdometerUpdateRequest(BaseModel):
    currentOdometer: Any = None

    model_config = ConfigDict(extra="ignore")


class ActiveTripRequest(BaseModel):
    tripId: Any = None

    model_config = ConfigDict(extra="ignore")
