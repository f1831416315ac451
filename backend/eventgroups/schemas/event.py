"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from eventgroups.schemas.group import GroupResponse


class EventCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100)
    date_time: datetime
    location: str = Field(..., min_length=3, max_length=200)
    group_size_limit: int = Field(..., ge=1, le=100)
    max_participants: int = Field(..., ge=1, le=1000)


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    date_time: Optional[datetime] = None
    location: Optional[str] = Field(None, min_length=3, max_length=200)
    group_size_limit: Optional[int] = Field(None, ge=1, le=100)
    max_participants: Optional[int] = Field(None, ge=1, le=1000)


class EventResponse(BaseModel):
    id: str
    name: str
    date_time: datetime
    location: str
    group_size_limit: int
    max_participants: int
    created_at: datetime

    model_config = {"from_attributes": True}


class EventWithGroupsResponse(EventResponse):
    groups: list[GroupResponse]
    total_participants: int
