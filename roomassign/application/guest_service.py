import logging
import secrets
from collections.abc import Iterable
from datetime import datetime, timezone

from roomassign.application.guards import event_exists
from roomassign.application.ports import RoomStore
from roomassign.domain.models import Event, Guest, Placement
from roomassign.domain.status import GuestStatus

logger = logging.getLogger(__name__)


class GuestService:
    """Events and their guest list, as far as room assignment needs them."""

    def __init__(self, store: RoomStore):
        self._store = store

    def _make_id(self, prefix: str) -> str:
        return f"{prefix}_{secrets.token_hex(8)}"

    async def create_event(self, name: str) -> Event:
        event = Event(
            event_id=self._make_id("evt"),
            name=name,
            created_at=datetime.now(timezone.utc),
        )
        await self._store.create_event(event)
        logger.info("Created event %s (%s)", name, event.event_id)
        return event

    @event_exists
    async def add_guest(
        self,
        event_id: str,
        first_name: str,
        last_name: str,
        email: str,
        status: GuestStatus = GuestStatus.INVITED,
    ) -> Guest:
        guest = Guest(
            guest_id=self._make_id("att"),
            event_id=event_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            status=GuestStatus(status).value,
        )
        await self._store.add_guest(guest)
        return guest

    @event_exists
    async def list_guests(
        self,
        event_id: str,
        statuses: Iterable[GuestStatus] = (),
        search: str | None = None,
    ) -> list[tuple[Guest, Placement | None]]:
        wanted = {GuestStatus(s).value for s in statuses}
        guests = await self._store.list_guests(event_id)
        if wanted:
            guests = [guest for guest in guests if guest.status in wanted]
        if search:
            needle = search.strip().lower()
            guests = [
                guest
                for guest in guests
                if needle in guest.full_name.lower() or needle in guest.email.lower()
            ]
        placements = await self._store.get_placements(event_id)
        room_nos: dict[str, str] = {}
        result = []
        for guest in sorted(guests, key=lambda g: (g.last_name.lower(), g.first_name.lower())):
            placement = None
            held = placements.get(guest.guest_id)
            if held is not None:
                room_id, slot = held
                if room_id not in room_nos:
                    room = await self._store.get_room(event_id, room_id)
                    room_nos[room_id] = room.room_no if room else ""
                placement = Placement(room_id, room_nos[room_id], slot)
            result.append((guest, placement))
        return result
