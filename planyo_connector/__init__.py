"""Async client for the Planyo booking REST API."""

from planyo_connector.clients import (
    PlanyoAPIClient,
    PlanyoClientError,
    PlanyoDecodeError,
    PlanyoEndpointError,
    PlanyoRemoteError,
    PlanyoTransportError,
)
from planyo_connector.models import RegularProduct, Reservation, ReservationProperties

__all__ = [
    "PlanyoAPIClient",
    "PlanyoClientError",
    "PlanyoEndpointError",
    "PlanyoTransportError",
    "PlanyoDecodeError",
    "PlanyoRemoteError",
    "Reservation",
    "ReservationProperties",
    "RegularProduct",
]
