"""
Event model with roster capacity limits.

Key design decisions:
- String UUID primary key so event links are not guessable by counting
- `version` column enables optimistic locking: every roster change for an
  event bumps it, so concurrent registrations cannot jointly overshoot
  `max_participants`
- Index on `date_time` for the newest-first listing
"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, Index, CheckConstraint
from sqlalchemy.orm import relationship

from eventgroups.db.base import Base, TimestampMixin


def _new_event_id() -> str:
    return str(uuid.uuid4())


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_new_event_id)
    name = Column(String(100), nullable=False)
    date_time = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(200), nullable=False)
    group_size_limit = Column(Integer, nullable=False)
    max_participants = Column(Integer, nullable=False)

    # Optimistic locking version counter
    version = Column(Integer, nullable=False, default=1)

    groups = relationship(
        "Group",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Group.created_at.desc()",
    )

    __table_args__ = (
        CheckConstraint("group_size_limit > 0", name="check_group_size_limit_positive"),
        CheckConstraint("max_participants > 0", name="check_max_participants_positive"),
        Index("ix_events_date_time", "date_time"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, limits={self.group_size_limit}/{self.max_participants})>"
