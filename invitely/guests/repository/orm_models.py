from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from invitely.config.table_names import TableNames
from invitely.guests.dtos import GuestStatus
from invitely.models.base import Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_guest_event_email"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    status: Mapped[GuestStatus] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=GuestStatus.PENDING,
        nullable=False,
        index=True,
    )
    dietary_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    notify_by_email: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_by_sms: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    token: Mapped[str] = mapped_column(String(36), nullable=False, unique=True, index=True)
    invited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Written once by the reminder cycle; NULL means not reminded yet
    reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    sms_reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    # Overrides events.max_guests_per_invitee when set
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)

    additional_guests: Mapped[list["AdditionalGuest"]] = relationship(
        "AdditionalGuest",
        order_by="AdditionalGuest.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Guest {self.email} - {self.status.value}>"


class AdditionalGuest(Base, TimeStamp):
    __tablename__ = TableNames.ADDITIONAL_GUESTS.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<AdditionalGuest {self.name} of {self.guest_id}>"
