"""Request bodies for JSON endpoints."""

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator


class FavoriteToggleRequest(BaseModel):
    yard_id: int = Field(validation_alias=AliasChoices("yard_id", "yardId"))


class BookingRequest(BaseModel):
    """Yard, time span and party size of a prospective booking."""

    yard_id: int = Field(validation_alias=AliasChoices("yard_id", "yardId"))
    check_in: datetime = Field(validation_alias=AliasChoices("check_in", "checkIn"))
    check_out: datetime = Field(
        validation_alias=AliasChoices("check_out", "checkOut")
    )
    guests: int = Field(ge=1)

    @field_validator("check_in", "check_out")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def _validate_span(self) -> "BookingRequest":
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class CheckoutConfirmRequest(BaseModel):
    session_id: str = Field(
        min_length=1, validation_alias=AliasChoices("session_id", "sessionId")
    )


class CoordinatesUpdateRequest(BaseModel):
    lat: Decimal | None = Field(default=None, ge=-90, le=90)
    lng: Decimal | None = Field(default=None, ge=-180, le=180)
    address: str | None = None


class CalendarCodeRequest(BaseModel):
    code: str = Field(min_length=1)
