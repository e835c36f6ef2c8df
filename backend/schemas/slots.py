import re
from datetime import date, time

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.core.constants import MAX_BLOCK_REASON_LENGTH
from backend.services.time_utils import DATE_PATTERN, time_to_minutes

RULE_TIME_PATTERN = re.compile(r'^\d{2}:\d{2}$')


def _validate_rule_time(value: str) -> str:
    if not RULE_TIME_PATTERN.match(value):
        raise ValueError('Invalid time format (HH:MM)')
    hours, minutes = (int(part) for part in value.split(':'))
    if hours > 23 or minutes > 59:
        raise ValueError('Invalid time format (HH:MM)')
    return value


class CreateTimeSlotRequest(BaseModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    is_active: bool = True

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, value: str) -> str:
        return _validate_rule_time(value)

    @model_validator(mode='after')
    def validate_window(self):
        if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
            raise ValueError('Start time must be before end time')
        return self


class UpdateTimeSlotRequest(BaseModel):
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: str | None = None
    end_time: str | None = None
    is_active: bool | None = None

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, value: str | None) -> str | None:
        return None if value is None else _validate_rule_time(value)

    @model_validator(mode='after')
    def validate_window(self):
        if self.start_time and self.end_time:
            if time_to_minutes(self.start_time) >= time_to_minutes(self.end_time):
                raise ValueError('Start time must be before end time')
        return self


class CreateBlockedDateRequest(BaseModel):
    date: date
    reason: str | None = None

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, value):
        if isinstance(value, str) and not DATE_PATTERN.match(value):
            raise ValueError('Invalid date format (YYYY-MM-DD)')
        return value

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None
        normalized = value.strip()
        if len(normalized) > MAX_BLOCK_REASON_LENGTH:
            raise ValueError(f'Reason cannot exceed {MAX_BLOCK_REASON_LENGTH} characters')
        return normalized or None


class AvailableSlotResponse(BaseModel):
    id: int
    day_of_week: int
    start_time: time
    end_time: time
    is_active: bool

    class Config:
        from_attributes = True


class BlockedDateResponse(BaseModel):
    id: int
    date: date
    reason: str | None = None

    class Config:
        from_attributes = True


class SlotConfigurationResponse(BaseModel):
    slots: list[AvailableSlotResponse]
    blockedDates: list[BlockedDateResponse]
