"""
Group and GroupMember models.

A group belongs to exactly one event and owns its members; members have no
identity outside their group, so they are deleted with it.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from eventgroups.db.base import Base, TimestampMixin


class Group(Base, TimestampMixin):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    creator_name = Column(String(100), nullable=False)
    creator_email = Column(String(255), nullable=False)
    group_name = Column(String(100), nullable=False)
    accepts_others = Column(Boolean, nullable=False, default=False)
    project_description = Column(String(500), nullable=True)

    event = relationship("Event", back_populates="groups")
    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name={self.group_name}, event={self.event_id})>"


class GroupMember(Base):
    __tablename__ = "group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=True)

    group = relationship("Group", back_populates="members")

    def __repr__(self) -> str:
        return f"<GroupMember(id={self.id}, name={self.name}, group={self.group_id})>"
