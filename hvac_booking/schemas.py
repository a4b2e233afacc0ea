from typing import Optional

from pydantic import BaseModel, ConfigDict


class Slot(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class BookingRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    # Presence is checked by the booking workflow so a missing field is a 400,
    # not FastAPI's default 422.
    date: Optional[str] = None
    time: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    details: Optional[str] = None


class AvailabilityResponse(BaseModel):
    success: bool = True
    date: str
    available: list[Slot]


class BookingResponse(BaseModel):
    success: bool
    message: str


class HealthResponse(BaseModel):
    ok: bool = True
