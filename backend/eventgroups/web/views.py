"""
Event page state: participant totals and group search/filtering.

Filtering is a linear scan recomputed on every request; event rosters are
small enough that nothing is indexed.
"""

from enum import Enum
from typing import Iterable, Optional

from eventgroups.client.api import EventGroupsClient
from eventgroups.schemas.event import EventResponse
from eventgroups.schemas.group import GroupWithMembersResponse


class StatusFilter(str, Enum):
    ALL = "all"
    OPEN = "open"
    CLOSED = "closed"

    @classmethod
    def parse(cls, value: Optional[str]) -> "StatusFilter":
        try:
            return cls((value or "all").lower())
        except ValueError:
            return cls.ALL


class ViewMode(str, Enum):
    LIST = "list"
    GRID = "grid"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ViewMode":
        try:
            return cls((value or "list").lower())
        except ValueError:
            return cls.LIST


def matches_search(group: GroupWithMembersResponse, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    return (
        needle in group.group_name.lower()
        or needle in group.creator_name.lower()
        or bool(group.project_description and needle in group.project_description.lower())
    )


def matches_status(group: GroupWithMembersResponse, status: StatusFilter) -> bool:
    if status is StatusFilter.OPEN:
        return group.accepts_others
    if status is StatusFilter.CLOSED:
        return not group.accepts_others
    return True


def filter_groups(
    groups: Iterable[GroupWithMembersResponse],
    query: str = "",
    status: StatusFilter = StatusFilter.ALL,
) -> list[GroupWithMembersResponse]:
    return [g for g in groups if matches_search(g, query) and matches_status(g, status)]


def total_participants(groups: Iterable[GroupWithMembersResponse]) -> int:
    return sum(len(g.members) for g in groups)


class EventView:
    def __init__(
        self,
        event: EventResponse,
        groups: list[GroupWithMembersResponse],
        search_query: str = "",
        status_filter: StatusFilter = StatusFilter.ALL,
        view_mode: ViewMode = ViewMode.LIST,
    ):
        self.event = event
        self.groups = groups
        self.search_query = search_query
        self.status_filter = status_filter
        self.view_mode = view_mode

    @classmethod
    async def load(
        cls,
        api: EventGroupsClient,
        event_id: str,
        search_query: str = "",
        status_filter: Optional[str] = None,
        view_mode: Optional[str] = None,
    ) -> "EventView":
        """Fetch the event, then its groups. Requests run one after the other."""
        event = await api.get_event(event_id)
        groups = await api.get_groups(event_id)
        return cls(
            event,
            groups,
            search_query=search_query,
            status_filter=StatusFilter.parse(status_filter),
            view_mode=ViewMode.parse(view_mode),
        )

    @property
    def total_participants(self) -> int:
        return total_participants(self.groups)

    @property
    def spots_left(self) -> int:
        return max(self.event.max_participants - self.total_participants, 0)

    @property
    def can_register(self) -> bool:
        return self.total_participants < self.event.max_participants

    @property
    def filtered_groups(self) -> list[GroupWithMembersResponse]:
        return filter_groups(self.groups, self.search_query, self.status_filter)
