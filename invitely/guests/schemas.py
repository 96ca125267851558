from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from invitely.guests.dtos import ChangeType, GuestDTO, GuestStatus, RSVPResultDTO


class AdditionalGuestResponse(BaseModel):
    id: UUID
    name: str


class GuestResponse(BaseModel):
    id: UUID
    event_id: UUID
    email: str
    name: str | None = None
    phone: str | None = None
    status: GuestStatus
    dietary_notes: str | None = None
    additional_guests: list[AdditionalGuestResponse] = []
    responded_at: datetime | None = None

    @classmethod
    def from_dto(cls, guest: GuestDTO) -> "GuestResponse":
        return cls(
            id=guest.id,
            event_id=guest.event_id,
            email=guest.email,
            name=guest.name,
            phone=guest.phone,
            status=guest.status,
            dietary_notes=guest.dietary_notes,
            additional_guests=[
                AdditionalGuestResponse(id=additional.id, name=additional.name)
                for additional in guest.additional_guests
            ],
            responded_at=guest.responded_at,
        )


class RSVPResponse(BaseModel):
    guest: GuestResponse
    token: str
    change_type: ChangeType

    @classmethod
    def from_result(cls, result: RSVPResultDTO) -> "RSVPResponse":
        return cls(
            guest=GuestResponse.from_dto(result.guest),
            token=result.guest.token,
            change_type=result.change_type,
        )
