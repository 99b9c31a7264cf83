"""Availability domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import validate_time
from .week import WEEKDAYS, find_slot_problems


class TimeSlot(BaseModel):
    id: Optional[str] = None
    startTime: str
    endTime: str

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time_format(cls, v):
        return validate_time(v)


class DayAvailability(BaseModel):
    enabled: bool
    timeSlots: list[TimeSlot] = []


class WeekAvailability(BaseModel):
    monday: DayAvailability
    tuesday: DayAvailability
    wednesday: DayAvailability
    thursday: DayAvailability
    friday: DayAvailability
    saturday: DayAvailability
    sunday: DayAvailability

    @model_validator(mode="after")
    def validate_slots(self):
        problems = []
        for day in WEEKDAYS:
            slots = [slot.model_dump() for slot in getattr(self, day).timeSlots]
            problems.extend(find_slot_problems(day, slots))
        if problems:
            raise ValueError("; ".join(problems))

        # Slots saved without an id get one derived from the weekday
        for day in WEEKDAYS:
            for index, slot in enumerate(getattr(self, day).timeSlots, start=1):
                if not slot.id:
                    slot.id = f"{day[:3]}-{index}"
        return self


class AvailabilityUpdate(BaseModel):
    availability: WeekAvailability
