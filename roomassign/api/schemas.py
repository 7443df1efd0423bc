from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from roomassign.domain.models import Guest, Page, Placement, RoomView, SlotAssignment
from roomassign.domain.status import GuestStatus, RoomStatus

SlotNumber = Annotated[int, Field(ge=1, le=3)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttendeeBrief(CamelModel):
    id: str
    first_name: str | None
    last_name: str | None
    email: str

    @classmethod
    def from_guest(cls, guest: Guest) -> "AttendeeBrief":
        return cls(
            id=guest.guest_id,
            first_name=guest.first_name or None,
            last_name=guest.last_name or None,
            email=guest.email,
        )


class OccupiedSlotOut(CamelModel):
    state: Literal["occupied"] = "occupied"
    slot: int
    attendee_id: str
    attendee: AttendeeBrief


class VacantSlotOut(CamelModel):
    state: Literal["vacant"] = "vacant"
    slot: int
    attendee_id: None = None
    attendee: None = None


SlotOut = Annotated[OccupiedSlotOut | VacantSlotOut, Field(discriminator="state")]


def slot_out(assignment: SlotAssignment) -> OccupiedSlotOut | VacantSlotOut:
    if assignment.guest is None:
        return VacantSlotOut(slot=assignment.slot)
    return OccupiedSlotOut(
        slot=assignment.slot,
        attendee_id=assignment.guest.guest_id,
        attendee=AttendeeBrief.from_guest(assignment.guest),
    )


class RoomOut(CamelModel):
    id: str
    event_id: str
    room_no: str
    category: str
    max_guests: int
    created_at: datetime
    updated_at: datetime
    status: RoomStatus
    assignments: list[SlotOut]

    @classmethod
    def from_view(cls, view: RoomView) -> "RoomOut":
        room = view.room
        return cls(
            id=room.room_id,
            event_id=room.event_id,
            room_no=room.room_no,
            category=room.category,
            max_guests=room.max_guests,
            created_at=room.created_at,
            updated_at=room.updated_at,
            status=view.status,
            assignments=[slot_out(slot) for slot in view.slots],
        )


class RoomsPageOut(CamelModel):
    rooms: list[RoomOut]
    total_count: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> "RoomsPageOut":
        return cls(
            rooms=[RoomOut.from_view(view) for view in page.items],
            total_count=page.total_count,
            page=page.page,
            page_size=page.page_size,
            total_pages=page.total_pages,
        )


class RoomIn(CamelModel):
    room_no: str = Field(min_length=1)
    category: str = Field(min_length=1)
    max_guests: SlotNumber


class RoomPatch(CamelModel):
    room_no: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    max_guests: SlotNumber | None = None


class AssignIn(CamelModel):
    room_id: str
    slot: SlotNumber
    attendee_id: str | None = None


class UnassignIn(CamelModel):
    slot: SlotNumber


class AssignOut(CamelModel):
    success: bool
    message: str
    outcome: str


class SuccessOut(CamelModel):
    success: bool = True


class EventIn(CamelModel):
    name: str = Field(min_length=1)


class EventOut(CamelModel):
    id: str
    name: str
    created_at: datetime


class AttendeeIn(CamelModel):
    first_name: str = ""
    last_name: str = ""
    email: str = Field(min_length=3)
    status: GuestStatus = GuestStatus.INVITED


class PlacementOut(CamelModel):
    room_id: str
    room_no: str
    slot: int


class AttendeeOut(CamelModel):
    id: str
    event_id: str
    first_name: str | None
    last_name: str | None
    email: str
    status: str
    assigned: PlacementOut | None = None

    @classmethod
    def from_guest(
        cls, guest: Guest, placement: Placement | None = None
    ) -> "AttendeeOut":
        assigned = None
        if placement is not None:
            assigned = PlacementOut(
                room_id=placement.room_id,
                room_no=placement.room_no,
                slot=placement.slot,
            )
        return cls(
            id=guest.guest_id,
            event_id=guest.event_id,
            first_name=guest.first_name or None,
            last_name=guest.last_name or None,
            email=guest.email,
            status=guest.status,
            assigned=assigned,
        )
