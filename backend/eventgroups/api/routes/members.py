"""
Single-member endpoints for joining an open group.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventgroups.db.session import get_db
from eventgroups.schemas.group import MemberAdd, MemberResponse
from eventgroups.services.group_service import add_member, delete_member

router = APIRouter(prefix="/members", tags=["Members"])


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member_endpoint(
    member_data: MemberAdd,
    db: AsyncSession = Depends(get_db),
):
    """Join a group that accepts others, within both capacity limits."""
    return await add_member(db, member_data)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_member_endpoint(
    member_id: int,
    db: AsyncSession = Depends(get_db),
):
    await delete_member(db, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
