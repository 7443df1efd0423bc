from datetime import datetime
from typing import Protocol

from roomassign.domain.models import Event, Guest, Room
from roomassign.domain.status import AssignOutcome


class RoomStore(Protocol):
    async def create_event(self, event: Event) -> None: ...

    async def get_event(self, event_id: str) -> Event | None: ...

    async def add_guest(self, guest: Guest) -> None: ...

    async def get_guest(self, event_id: str, guest_id: str) -> Guest | None: ...

    async def list_guests(self, event_id: str) -> list[Guest]: ...

    async def create_room(self, room: Room) -> bool: ...

    async def get_room(self, event_id: str, room_id: str) -> Room | None: ...

    async def list_rooms(self, event_id: str) -> list[Room]: ...

    async def update_room(
        self,
        event_id: str,
        room_id: str,
        *,
        updated_at: datetime,
        room_no: str | None = None,
        category: str | None = None,
        max_guests: int | None = None,
    ) -> Room: ...

    async def delete_room(self, event_id: str, room_id: str) -> list[str]: ...

    async def assign_slot(
        self, event_id: str, room_id: str, slot: int, guest_id: str
    ) -> AssignOutcome: ...

    async def clear_slot(
        self, event_id: str, room_id: str, slot: int
    ) -> AssignOutcome: ...

    async def get_placements(self, event_id: str) -> dict[str, tuple[str, int]]: ...
