from eventgroups.schemas.group import (
    MemberCreate, MemberAdd, MemberResponse,
    GroupCreate, GroupUpdate, GroupResponse, GroupWithMembersResponse,
)
from eventgroups.schemas.event import EventCreate, EventUpdate, EventResponse, EventWithGroupsResponse

__all__ = [
    "MemberCreate", "MemberAdd", "MemberResponse",
    "GroupCreate", "GroupUpdate", "GroupResponse", "GroupWithMembersResponse",
    "EventCreate", "EventUpdate", "EventResponse", "EventWithGroupsResponse",
]
