"""
Event endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventgroups.db.session import get_db
from eventgroups.schemas.event import EventCreate, EventUpdate, EventResponse, EventWithGroupsResponse
from eventgroups.schemas.group import GroupResponse, GroupWithMembersResponse
from eventgroups.services.event_service import (
    create_event,
    get_event_with_groups,
    list_events,
    update_event,
    delete_event,
)
from eventgroups.services.group_service import list_event_groups

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=list[EventResponse])
async def list_events_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List events with pagination, latest date first."""
    return await list_events(db, page, limit)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    db: AsyncSession = Depends(get_db),
):
    return await create_event(db, event_data)


@router.get("/{event_id}", response_model=EventWithGroupsResponse)
async def get_event_endpoint(
    event_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Get a single event with its groups and the current participant count."""
    event, groups, total = await get_event_with_groups(db, event_id)
    return EventWithGroupsResponse(
        **EventResponse.model_validate(event).model_dump(),
        groups=[GroupResponse.model_validate(g) for g in groups],
        total_participants=total,
    )


@router.put("/{event_id}", response_model=EventResponse)
async def update_event_endpoint(
    event_id: str,
    event_data: EventUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await update_event(db, event_id, event_data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete an event with all of its groups and members."""
    await delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{event_id}/groups", response_model=list[GroupWithMembersResponse])
async def list_event_groups_endpoint(
    event_id: str,
    db: AsyncSession = Depends(get_db),
):
    """All groups registered for an event, with members."""
    return await list_event_groups(db, event_id)
