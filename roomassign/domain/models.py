from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from roomassign.domain.status import RoomStatus, derive_status


@dataclass(frozen=True)
class Event:
    event_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Guest:
    guest_id: str
    event_id: str
    first_name: str
    last_name: str
    email: str
    status: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Placement:
    """Where a guest currently sleeps."""

    room_id: str
    room_no: str
    slot: int


@dataclass(frozen=True)
class SlotAssignment:
    slot: int
    guest: Guest | None = None

    @property
    def occupied(self) -> bool:
        return self.guest is not None


@dataclass(frozen=True)
class Room:
    room_id: str
    event_id: str
    room_no: str
    category: str
    max_guests: int
    created_at: datetime
    updated_at: datetime
    # slot number -> guest id, only occupied slots
    occupants: dict[int, str] = field(default_factory=dict)

    @property
    def assigned_count(self) -> int:
        return len(self.occupants)

    @property
    def status(self) -> RoomStatus:
        return derive_status(self.assigned_count, self.max_guests)

    def slots(self, guests: dict[str, Guest] | None = None) -> list[SlotAssignment]:
        guests = guests or {}
        result = []
        for slot in range(1, self.max_guests + 1):
            guest_id = self.occupants.get(slot)
            guest = guests.get(guest_id) if guest_id else None
            if guest_id and guest is None:
                # guest record gone; still report the slot as held
                guest = Guest(guest_id, self.event_id, "", "", "", "")
            result.append(SlotAssignment(slot, guest))
        return result


@dataclass(frozen=True)
class RoomView:
    room: Room
    slots: list[SlotAssignment]

    @property
    def status(self) -> RoomStatus:
        return self.room.status


@dataclass(frozen=True)
class Page:
    items: list[RoomView]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)


@dataclass(frozen=True)
class RoomFilters:
    page: int = 1
    page_size: int | None = None
    category: str | None = None
    search: str | None = None
    statuses: tuple[RoomStatus, ...] = ()
    sort: str = "newest"
