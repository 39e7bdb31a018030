"""Pydantic models for the Planyo response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from planyo_connector.models.reservation import Reservation

T = TypeVar("T")


class PlanyoStatus(BaseModel):
    """Status fields present at the top level of every Planyo response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    response_code: int
    response_message: str

    @property
    def is_success(self) -> bool:
        """True when Planyo reports response code 0."""
        return self.response_code == 0


class PlanyoResponse(PlanyoStatus, Generic[T]):
    """Envelope wrapping a Planyo response payload of type T."""

    data: T


class ReservationList(BaseModel):
    """Payload of a reservation listing call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    results: list[Reservation]
