"""
Capacity enforcement for event rosters.

Two limits hold for every event:

  group_size_limit   members in any single group
  max_participants   members across all groups of the event

CONCURRENCY STRATEGY: Optimistic Locking with Retry
====================================================

Problem:
  Two groups register for the last free places simultaneously.
  Both count 8/10 registered participants, both add 2, both succeed.
  Result: 12/10.

Solution:
  Every roster write first bumps the event's `version` column:

  1. Read the event and count its current participants
  2. UPDATE events SET version = version + 1
     WHERE id = :event_id AND version = :read_version
  3. If rows_affected == 0, another roster write got in between -> retry

  The caller performs its inserts in the same transaction, after the bump,
  so the count it checked against is the count it commits on top of.

The client pattern-matches on the rejection messages, so they must keep
containing "group size limit" and "maximum participant limit".
"""

from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from eventgroups.models.event import Event
from eventgroups.models.group import Group, GroupMember
from eventgroups.core.config import get_settings
from eventgroups.core.metrics import record_registration, record_db_retry
from eventgroups.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()


def event_not_found(event_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Event with ID {event_id} not found",
    )


async def load_event(db: AsyncSession, event_id: str) -> Event:
    """Read the event fresh from the database (ignores identity-map state)."""
    result = await db.execute(
        select(Event)
        .where(Event.id == event_id)
        .execution_options(populate_existing=True)
    )
    event = result.scalar_one_or_none()
    if not event:
        raise event_not_found(event_id)
    return event


async def count_participants(
    db: AsyncSession,
    event_id: str,
    exclude_group_id: Optional[int] = None,
) -> int:
    """Count members across all groups of an event, optionally skipping one group."""
    query = (
        select(func.count(GroupMember.id))
        .join(Group, GroupMember.group_id == Group.id)
        .where(Group.event_id == event_id)
    )
    if exclude_group_id is not None:
        query = query.where(Group.id != exclude_group_id)
    return (await db.execute(query)).scalar() or 0


async def largest_roster(db: AsyncSession, event_id: str) -> int:
    counts = (
        select(func.count(GroupMember.id).label("size"))
        .join(Group, GroupMember.group_id == Group.id)
        .where(Group.event_id == event_id)
        .group_by(Group.id)
        .subquery()
    )
    return (await db.execute(select(func.max(counts.c.size)))).scalar() or 0


async def count_group_members(db: AsyncSession, group_id: int) -> int:
    result = await db.execute(
        select(func.count(GroupMember.id)).where(GroupMember.group_id == group_id)
    )
    return result.scalar() or 0


def group_size_exceeded(size: int, limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Group has {size} members, which exceeds the group size limit of {limit}",
    )


def participant_limit_exceeded(incoming: int, registered: int, limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=(
            f"Registering {incoming} members would exceed the maximum participant limit "
            f"of {limit} ({registered} already registered)"
        ),
    )


async def bump_event_version(db: AsyncSession, event: Event) -> bool:
    """Optimistic lock: succeed only if nobody changed the event since we read it."""
    result = await db.execute(
        update(Event)
        .where(Event.id == event.id, Event.version == event.version)
        .values(version=Event.version + 1)
    )
    return result.rowcount == 1


async def reserve_roster(
    db: AsyncSession,
    event_id: str,
    operation: str,
    roster_size: Optional[int] = None,
    group_id: Optional[int] = None,
) -> Event:
    """
    Check both limits for one group's roster and claim the event for writing.

    `roster_size` is the size the group will have after the write. When it is
    None the write adds a single member to `group_id`, so the size is that
    group's current member count plus one. The group's present roster is
    excluded from the event total because the write replaces it.

    Must run before the caller changes anything in the session: a version
    conflict rolls the transaction back.
    """
    max_attempts = max(settings.REGISTRATION_MAX_RETRIES, 1)

    for attempt in range(1, max_attempts + 1):
        event = await load_event(db, event_id)

        size = roster_size
        if size is None:
            size = await count_group_members(db, group_id) + 1

        if size > event.group_size_limit:
            record_registration(operation, "group_size_limit")
            logger.warning(
                "roster_rejected_group_size",
                event_id=event_id,
                group_id=group_id,
                size=size,
                limit=event.group_size_limit,
            )
            raise group_size_exceeded(size, event.group_size_limit)

        registered = await count_participants(db, event_id, exclude_group_id=group_id)
        if registered + size > event.max_participants:
            record_registration(operation, "participant_limit")
            logger.warning(
                "roster_rejected_participant_limit",
                event_id=event_id,
                group_id=group_id,
                requested=size,
                registered=registered,
                limit=event.max_participants,
            )
            raise participant_limit_exceeded(size, registered, event.max_participants)

        if await bump_event_version(db, event):
            record_registration(operation, "success")
            return event

        # Version conflict - another roster write for this event got in first
        record_db_retry()
        logger.info(
            "registration_retry",
            event_id=event_id,
            attempt=attempt,
            reason="version_conflict",
        )
        await db.rollback()

    record_registration(operation, "conflict")
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Registration failed due to high demand. Please try again.",
    )
