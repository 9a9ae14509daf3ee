"""
Event and initiative schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from thinktank.kernel.models.event import EventStatus, EventType, InitiativeCategory


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=256)
    start_date: datetime
    end_date: Optional[datetime] = None
    registration_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    type: EventType
    status: EventStatus = EventStatus.UPCOMING
    is_virtual: bool = False
    virtual_link: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=1)
    display_order: int = 0

    @model_validator(mode="after")
    def check_window(self) -> "EventCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=256)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=256)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    type: Optional[EventType] = None
    status: Optional[EventStatus] = None
    is_virtual: Optional[bool] = None
    virtual_link: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=1)
    display_order: Optional[int] = None


class EventResponse(BaseModel):
    id: int
    slug: str
    title: str
    description: Optional[str]
    location: Optional[str]
    start_date: datetime
    end_date: Optional[datetime]
    registration_url: Optional[str]
    thumbnail_url: Optional[str]
    type: str
    status: str
    effective_status: Optional[str] = None
    is_virtual: bool
    virtual_link: Optional[str]
    max_attendees: Optional[int]
    display_order: int

    class Config:
        from_attributes = True

    @classmethod
    def from_event(cls, event, now: datetime) -> "EventResponse":
        response = cls.model_validate(event)
        response.effective_status = event.effective_status(now).value
        return response


class InitiativeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=256)
    description: Optional[str] = None
    category: InitiativeCategory
    icon_name: Optional[str] = Field(None, max_length=100)
    display_order: int = 0


class InitiativeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=256)
    description: Optional[str] = None
    category: Optional[InitiativeCategory] = None
    icon_name: Optional[str] = Field(None, max_length=100)
    display_order: Optional[int] = None


class InitiativeResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    category: str
    icon_name: Optional[str]
    display_order: int

    class Config:
        from_attributes = True
