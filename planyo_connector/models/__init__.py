"""Planyo API data models."""

from planyo_connector.models.reservation import (
    RegularProduct,
    Reservation,
    ReservationProperties,
)
from planyo_connector.models.response import (
    PlanyoResponse,
    PlanyoStatus,
    ReservationList,
)

__all__ = [
    "Reservation",
    "ReservationProperties",
    "RegularProduct",
    "PlanyoResponse",
    "PlanyoStatus",
    "ReservationList",
]
