"""Pydantic models for Planyo reservation data."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from planyo_connector.models.coercion import (
    parse_decimal_or_zero,
    parse_int_or_zero,
    parse_planyo_datetime,
)

DEFAULT_AGENCY = "Direct"
DEFAULT_BED_FORMAT = "Double"


class RegularProduct(BaseModel):
    """Add-on product purchased with a reservation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    unit_price: Decimal
    quantity: int

    @field_validator("unit_price", mode="before")
    @classmethod
    def parse_unit_price(cls, v):
        return parse_decimal_or_zero(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, v):
        return parse_int_or_zero(v)

    @property
    def line_total(self) -> Decimal:
        """Price of this line item (unit price times quantity)."""
        return self.unit_price * self.quantity


class ReservationProperties(BaseModel):
    """Custom reservation form fields configured on the Planyo site.

    ``agency`` and ``bed_format_required`` only fall back to their defaults
    when the key is missing from the payload. An empty string is kept as is.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    agency: str
    persons: int
    bed_format_required: str
    allergies: Optional[str] = None
    walking_route: Optional[str] = None
    guest1_first_name: Optional[str] = Field(None, alias="First_Name_1")
    guest1_last_name: Optional[str] = Field(None, alias="Last_name_1")
    guest2_first_name: Optional[str] = Field(None, alias="First_Name_2")
    guest2_last_name: Optional[str] = Field(None, alias="Last_name_2")

    @model_validator(mode="before")
    @classmethod
    def apply_absence_defaults(cls, data: Any) -> Any:
        """Fill agency and bed format only when their keys are absent."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "agency" not in data:
            data["agency"] = DEFAULT_AGENCY
        if "bed_format_required" not in data:
            data["bed_format_required"] = DEFAULT_BED_FORMAT
        return data

    @field_validator("persons", mode="before")
    @classmethod
    def parse_persons(cls, v):
        return parse_int_or_zero(v)


class Reservation(BaseModel):
    """Reservation as returned by the Planyo REST API.

    The single-reservation endpoint does not include the reservation id in
    its payload, so ``reservation_id`` is ``None`` until the client fills it
    in from the request.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    reservation_id: Optional[int] = None
    first_name: str
    last_name: str
    email: str
    phone_number: str
    room: str = Field(alias="name")  # Planyo resource name
    creation_time: datetime
    start_time: datetime
    end_time: datetime
    status: int
    total_price: Decimal
    amount_paid: Decimal
    properties: ReservationProperties
    admin_notes: Optional[str] = None
    user_notes: Optional[str] = None
    regular_products: Optional[list[RegularProduct]] = None

    @field_validator("creation_time", "start_time", "end_time", mode="before")
    @classmethod
    def parse_timestamps(cls, v):
        """Parse Planyo's 'YYYY-MM-DD HH:MM:SS' timestamps as London time."""
        return parse_planyo_datetime(v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return parse_int_or_zero(v)

    @field_validator("total_price", mode="before")
    @classmethod
    def parse_total_price(cls, v):
        return parse_decimal_or_zero(v)

    @field_validator("amount_paid", mode="before")
    @classmethod
    def parse_amount_paid(cls, v):
        return parse_decimal_or_zero(v)

    @property
    def outstanding_balance(self) -> Decimal:
        """Amount still owed on the reservation."""
        return self.total_price - self.amount_paid

    @property
    def regular_products_total(self) -> Decimal:
        """Sum of all add-on product line totals."""
        return sum(
            (product.line_total for product in self.regular_products or []),
            Decimal("0"),
        )

    @property
    def nights(self) -> int:
        """Number of calendar nights between arrival and departure."""
        return (self.end_time.date() - self.start_time.date()).days

    def with_reservation_id(self, reservation_id: int) -> "Reservation":
        """Return a copy of this reservation carrying the given id."""
        return self.model_copy(update={"reservation_id": reservation_id})
