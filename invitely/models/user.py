from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from invitely.config.table_names import TableNames
from invitely.models.base import Base, TimeStamp


class User(Base, TimeStamp):
    __tablename__ = TableNames.USERS.value

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Hosts and co-hosts opt in to an email on every RSVP change
    notify_on_rsvp_changes: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email}>"
