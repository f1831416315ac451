"""
Group and member service.

Every write that changes a roster goes through
`capacity_service.reserve_roster` first, which enforces the group size
limit and the event-wide participant cap and serializes roster writes per
event.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from eventgroups.models.group import Group, GroupMember
from eventgroups.schemas.group import GroupCreate, GroupUpdate, MemberAdd, MemberCreate
from eventgroups.services.capacity_service import load_event, reserve_roster
from eventgroups.core.metrics import record_group_deleted
from eventgroups.core.logging import get_logger

logger = get_logger(__name__)

# Columns that may legitimately be cleared by an update
NULLABLE_FIELDS = {"project_description"}


def group_not_found(group_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Group with ID {group_id} not found",
    )


def _build_members(members: list[MemberCreate]) -> list[GroupMember]:
    return [GroupMember(name=m.name, email=m.email) for m in members]


async def _load_group(db: AsyncSession, group_id: int) -> Optional[Group]:
    result = await db.execute(
        select(Group)
        .where(Group.id == group_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_group(db: AsyncSession, group_id: int) -> Group:
    """Get a group with its members."""
    group = await _load_group(db, group_id)
    if not group:
        raise group_not_found(group_id)
    return group


async def list_groups(db: AsyncSession, page: int = 1, limit: int = 10) -> list[Group]:
    result = await db.execute(
        select(Group)
        .order_by(Group.created_at.desc(), Group.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_event_groups(db: AsyncSession, event_id: str) -> list[Group]:
    """All groups of an event with their members, newest first."""
    await load_event(db, event_id)
    result = await db.execute(
        select(Group)
        .where(Group.event_id == event_id)
        .order_by(Group.created_at.desc(), Group.id.desc())
    )
    return list(result.scalars().all())


async def create_group(db: AsyncSession, group_data: GroupCreate) -> Group:
    """Register a new group and its roster for an event."""
    await reserve_roster(
        db,
        group_data.event_id,
        operation="create",
        roster_size=len(group_data.members),
    )

    group = Group(
        event_id=group_data.event_id,
        creator_name=group_data.creator_name,
        creator_email=group_data.creator_email,
        group_name=group_data.group_name,
        accepts_others=group_data.accepts_others,
        project_description=group_data.project_description,
        members=_build_members(group_data.members),
    )
    db.add(group)
    await db.flush()
    group = await get_group(db, group.id)

    logger.info(
        "group_registered",
        group_id=group.id,
        event_id=group.event_id,
        members=len(group.members),
    )
    return group


async def update_group(db: AsyncSession, group_id: int, group_data: GroupUpdate) -> Group:
    """
    Apply a partial update. When `members` is present the roster is
    replaced, and capacity is checked as if the old roster were gone.
    """
    group = await get_group(db, group_id)
    changes = group_data.model_dump(exclude_unset=True, exclude={"members"})
    replace_roster = group_data.members is not None

    if replace_roster:
        await reserve_roster(
            db,
            group.event_id,
            operation="update",
            roster_size=len(group_data.members),
            group_id=group_id,
        )
        # reserve_roster may have rolled back and expired the group
        group = await get_group(db, group_id)

    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(group, field, value)

    if replace_roster:
        # delete-orphan cascade removes the previous members on flush
        group.members = _build_members(group_data.members)

    await db.flush()
    group = await get_group(db, group_id)

    logger.info(
        "group_updated",
        group_id=group_id,
        fields=sorted(changes),
        roster_replaced=replace_roster,
        members=len(group.members),
    )
    return group


async def delete_group(db: AsyncSession, group_id: int) -> None:
    """Delete a group and, through the cascade, its members."""
    group = await get_group(db, group_id)
    await db.delete(group)
    await db.flush()

    record_group_deleted()
    logger.info("group_deleted", group_id=group_id, event_id=group.event_id)


async def list_group_members(db: AsyncSession, group_id: int) -> list[GroupMember]:
    group = await get_group(db, group_id)
    return list(group.members)


async def add_member(db: AsyncSession, member_data: MemberAdd) -> GroupMember:
    """Add one member to an open group."""
    group = await get_group(db, member_data.group_id)

    if not group.accepts_others:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Group with ID {group.id} does not accept new members",
        )

    await reserve_roster(db, group.event_id, operation="add_member", group_id=group.id)

    member = GroupMember(group_id=member_data.group_id, name=member_data.name, email=member_data.email)
    db.add(member)
    await db.flush()
    await db.refresh(member)

    logger.info("member_added", member_id=member.id, group_id=member.group_id)
    return member


async def delete_member(db: AsyncSession, member_id: int) -> None:
    result = await db.execute(select(GroupMember).where(GroupMember.id == member_id))
    member = result.scalar_one_or_none()
    if not member:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Member with ID {member_id} not found",
        )

    await db.delete(member)
    await db.flush()
    logger.info("member_deleted", member_id=member_id, group_id=member.group_id)
