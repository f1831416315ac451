"""
Event service handling CRUD operations.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from eventgroups.models.event import Event
from eventgroups.models.group import Group
from eventgroups.schemas.event import EventCreate, EventUpdate
from eventgroups.services.capacity_service import (
    load_event,
    count_participants,
    largest_roster,
    bump_event_version,
)
from eventgroups.core.logging import get_logger

logger = get_logger(__name__)


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    event = Event(
        name=event_data.name,
        date_time=event_data.date_time,
        location=event_data.location,
        group_size_limit=event_data.group_size_limit,
        max_participants=event_data.max_participants,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info(
        "event_created",
        event_id=event.id,
        name=event.name,
        group_size_limit=event.group_size_limit,
        max_participants=event.max_participants,
    )
    return event


async def get_event(db: AsyncSession, event_id: str) -> Event:
    """Get a single event by ID."""
    return await load_event(db, event_id)


async def get_event_with_groups(db: AsyncSession, event_id: str) -> tuple[Event, list[Group], int]:
    """Event, its groups newest first, and the number of registered participants."""
    event = await load_event(db, event_id)
    result = await db.execute(
        select(Group)
        .where(Group.event_id == event_id)
        .order_by(Group.created_at.desc(), Group.id.desc())
    )
    groups = list(result.scalars().all())
    total = await count_participants(db, event_id)
    return event, groups, total


async def list_events(db: AsyncSession, page: int = 1, limit: int = 10) -> list[Event]:
    """List events, latest date first."""
    result = await db.execute(
        select(Event)
        .order_by(Event.date_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all())


async def update_event(db: AsyncSession, event_id: str, event_data: EventUpdate) -> Event:
    """
    Update event details. Limits may not drop below what is already
    registered: the largest group must still fit and so must the total.
    """
    event = await load_event(db, event_id)
    changes = {k: v for k, v in event_data.model_dump(exclude_unset=True).items() if v is not None}

    new_group_limit = changes.get("group_size_limit", event.group_size_limit)
    if new_group_limit < event.group_size_limit:
        largest = await largest_roster(db, event_id)
        if largest > new_group_limit:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"Cannot lower the group size limit to {new_group_limit}: "
                    f"a registered group already has {largest} members"
                ),
            )

    new_max = changes.get("max_participants", event.max_participants)
    if new_max < event.max_participants:
        registered = await count_participants(db, event_id)
        if registered > new_max:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    f"Cannot lower the maximum participant limit to {new_max}: "
                    f"{registered} participants are already registered"
                ),
            )

    if not await bump_event_version(db, event):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Event was modified concurrently. Please try again.",
        )

    for field, value in changes.items():
        setattr(event, field, value)
    await db.flush()
    event = await load_event(db, event_id)

    logger.info("event_updated", event_id=event_id, fields=sorted(changes))
    return event


async def delete_event(db: AsyncSession, event_id: str) -> None:
    """Delete an event together with its groups and their members."""
    event = await load_event(db, event_id)

    result = await db.execute(select(Group).where(Group.event_id == event_id))
    groups = list(result.scalars().all())
    for group in groups:
        # Cascades to the group's members
        await db.delete(group)
    await db.delete(event)
    await db.flush()

    logger.info("event_deleted", event_id=event_id, groups_deleted=len(groups))
