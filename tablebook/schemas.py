import datetime as dt
from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from .models import ReservationStatus


class ReservationRequest(BaseModel):
    """Payload for creating or overwriting a reservation.

    Guest count and date carry no constraints here; the admission rules
    reject them with their own codes.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: str | None = Field(None, max_length=32)
    date: dt.date
    time: dt.time
    guests: int
    tables: list[int] = Field(default_factory=list, validation_alias=AliasChoices("tables", "tableIds"))
    note: str | None = None
    status: ReservationStatus = ReservationStatus.PENDING

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("time")
    @classmethod
    def naive_minute(cls, v: dt.time) -> dt.time:
        # Bookings are kept to the minute; the conflict window is measured in whole minutes.
        return v.replace(second=0, microsecond=0, tzinfo=None)

    @field_validator("tables")
    @classmethod
    def unique_tables(cls, v: list[int]) -> list[int]:
        return list(dict.fromkeys(v))


class TableRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    number: str = Field(..., min_length=1, max_length=16)
    capacity: int = Field(..., gt=0)
    is_available: bool = Field(True, validation_alias=AliasChoices("isAvailable", "is_available"))
