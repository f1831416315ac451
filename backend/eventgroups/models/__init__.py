from eventgroups.models.event import Event
from eventgroups.models.group import Group, GroupMember

__all__ = ["Event", "Group", "GroupMember"]
