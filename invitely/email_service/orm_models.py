from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from invitely.config.table_names import TableNames
from invitely.models.base import Base, TimeStamp

EMAIL_TYPES = ("invitation", "confirmation", "reminder", "rsvp_notification")
EMAIL_STATUSES = ("pending", "sent", "failed")


class EmailLog(Base, TimeStamp):
    __tablename__ = TableNames.EMAIL_LOGS.value

    provider_email_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True, unique=True
    )

    to_address: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    from_address: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(500), nullable=False)

    # Stored for debugging/audit
    html_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    text_body: Mapped[str | None] = mapped_column(Text, nullable=True)

    email_type: Mapped[str] = mapped_column(
        Enum(*EMAIL_TYPES, name="email_type_enum"), nullable=False, index=True
    )
    guest_id: Mapped[UUID | None] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        Enum(*EMAIL_STATUSES, name="email_status_enum"),
        default="pending",
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<EmailLog to={self.to_address} type={self.email_type} status={self.status}>"
