"""
Domain models for the schema strategy benchmark.

Defines the two document shapes stored in MongoDB: a worker (parent) and an
availability (child). Field aliases match the camelCase keys written to the
collections so `to_document()` produces exactly what gets inserted.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

# Weekday keys of an availability's repeat map, in calendar order.
WEEKDAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")

_MODEL_CONFIG = {
    "frozen": True,
    "populate_by_name": True,
    "arbitrary_types_allowed": True,
}


class Address(BaseModel):
    """
    Postal address embedded in a worker document.
    """

    line1: str
    line2: str
    city: str
    province: str
    postal_code: str = Field(..., alias="postalCode")
    country: str

    model_config = _MODEL_CONFIG


class Worker(BaseModel):
    """
    Parent record. `availabilities` holds the ids of its availability
    documents for the reference-array access path.
    """

    id: Optional[Any] = Field(None, alias="_id", description="Store-assigned id.")
    email: str
    password: str
    notes: str
    birth_date: datetime = Field(..., alias="birthDate")
    emergency_contact_name: str = Field(..., alias="emergencyContactName")
    emergency_contact_number: int = Field(..., alias="emergencyContactNumber")
    rating: float = Field(..., ge=0.0, le=5.0)
    worked_hours: float = Field(..., alias="workedHours", ge=0.0)
    agency: str
    availabilities: List[Any] = Field(default_factory=list)
    phone_code: int = Field(1, alias="phoneCode")
    phone_number: int = Field(..., alias="phoneNumber")
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    address: Address
    about: str

    model_config = _MODEL_CONFIG

    def to_document(self) -> Dict[str, Any]:
        """Serialize using collection keys; an unset id is left to the store."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RepeatDays(BaseModel):
    sunday: bool = False
    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = False

    model_config = _MODEL_CONFIG


class TimeOfDay(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)

    model_config = _MODEL_CONFIG


class Availability(BaseModel):
    """
    Child record. `worker` is the back-reference to the owning worker id.
    """

    id: Optional[Any] = Field(None, alias="_id")
    worker: Optional[Any] = Field(None, description="Owning worker id.")
    name: str
    repeat_days: RepeatDays = Field(default_factory=RepeatDays, alias="repeatDays")
    start_time: TimeOfDay = Field(..., alias="startTime")
    end_time: TimeOfDay = Field(..., alias="endTime")

    model_config = _MODEL_CONFIG

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["WEEKDAYS", "Address", "Availability", "RepeatDays", "TimeOfDay", "Worker"]
