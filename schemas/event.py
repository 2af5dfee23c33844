from datetime import datetime
from typing import Optional

from pydantic import Field

from models.event import EventType, EventStatus
from schemas.common import CamelModel


class EventCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    type: EventType = EventType.WORKDAY
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=0)
    status: EventStatus = EventStatus.UPCOMING


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None
    time: Optional[str] = None
    duration: Optional[int] = Field(None, ge=0)
    type: Optional[EventType] = None
    location: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=0)
    status: Optional[EventStatus] = None
