from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from invitely.config.table_names import TableNames
from invitely.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    rsvp_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # JSON text, see invitely.events.reminder_schedule
    reminder_schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Party size ceiling including the invitee; NULL means unlimited
    max_guests_per_invitee: Mapped[int | None] = mapped_column(Integer, nullable=True)

    host_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reply_to: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.start_time}>"


class EventCoHost(Base, TimeStamp):
    __tablename__ = TableNames.EVENT_COHOSTS.value
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_event_cohost"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.USERS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(50), default="COHOST", nullable=False)

    def __repr__(self) -> str:
        return f"<EventCoHost {self.user_id} of {self.event_id}>"
