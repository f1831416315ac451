"""
Group endpoints. Roster writes are capacity-checked in the service layer.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventgroups.db.session import get_db
from eventgroups.schemas.group import (
    GroupCreate,
    GroupUpdate,
    GroupResponse,
    GroupWithMembersResponse,
    MemberResponse,
)
from eventgroups.services.group_service import (
    create_group,
    get_group,
    list_groups,
    update_group,
    delete_group,
    list_group_members,
)

router = APIRouter(prefix="/groups", tags=["Groups"])


@router.get("", response_model=list[GroupResponse])
async def list_groups_endpoint(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    return await list_groups(db, page, limit)


@router.post("", response_model=GroupWithMembersResponse, status_code=status.HTTP_201_CREATED)
async def create_group_endpoint(
    group_data: GroupCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a group for an event.

    Rejected with 400 when the roster exceeds the event's group size limit
    and with 409 when it would push the event past its maximum participant
    limit.
    """
    return await create_group(db, group_data)


@router.get("/{group_id}", response_model=GroupWithMembersResponse)
async def get_group_endpoint(
    group_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await get_group(db, group_id)


@router.put("/{group_id}", response_model=GroupWithMembersResponse)
async def update_group_endpoint(
    group_id: int,
    group_data: GroupUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partially update a group; a `members` list replaces the roster."""
    return await update_group(db, group_id, group_data)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group_endpoint(
    group_id: int,
    db: AsyncSession = Depends(get_db),
):
    await delete_group(db, group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members", response_model=list[MemberResponse])
async def list_group_members_endpoint(
    group_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await list_group_members(db, group_id)
