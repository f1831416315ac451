"""
Pydantic schemas for groups and their members.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class MemberCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MemberAdd(MemberCreate):
    group_id: int


class MemberResponse(BaseModel):
    id: int
    group_id: int
    name: str
    email: Optional[str]

    model_config = {"from_attributes": True}


class GroupCreate(BaseModel):
    event_id: str
    creator_name: str = Field(..., min_length=2, max_length=100)
    creator_email: EmailStr
    group_name: str = Field(..., min_length=2, max_length=100)
    accepts_others: bool = False
    project_description: Optional[str] = Field(None, max_length=500)
    members: list[MemberCreate] = Field(default_factory=list)


class GroupUpdate(BaseModel):
    """Partial update. A present `members` list replaces the whole roster."""

    creator_name: Optional[str] = Field(None, min_length=2, max_length=100)
    creator_email: Optional[EmailStr] = None
    group_name: Optional[str] = Field(None, min_length=2, max_length=100)
    accepts_others: Optional[bool] = None
    project_description: Optional[str] = Field(None, max_length=500)
    members: Optional[list[MemberCreate]] = None


class GroupResponse(BaseModel):
    id: int
    event_id: str
    creator_name: str
    creator_email: str
    group_name: str
    accepts_others: bool
    project_description: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class GroupWithMembersResponse(GroupResponse):
    members: list[MemberResponse]
