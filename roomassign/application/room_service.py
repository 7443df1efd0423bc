import logging
import re
import secrets
from datetime import datetime, timezone

from roomassign.application.errors import DuplicateRoomError, GuestNotFoundError
from roomassign.application.guards import event_exists
from roomassign.application.ports import RoomStore
from roomassign.config import Config
from roomassign.domain.models import Guest, Page, Room, RoomFilters, RoomView
from roomassign.domain.status import STATUS_ORDER, AssignOutcome

logger = logging.getLogger(__name__)

SORTS = ("newest", "room-asc", "room-desc", "status")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _room_no_key(room_no: str) -> tuple:
    # "9" < "10" < "10a"; case-insensitive otherwise
    parts = re.split(r"(\d+)", room_no.casefold())
    return tuple(int(part) if index % 2 else part for index, part in enumerate(parts))


class RoomService:
    def __init__(self, store: RoomStore, config: Config | None = None):
        self._store = store
        self._config = config or Config()

    def _make_room_id(self) -> str:
        return f"room_{secrets.token_hex(8)}"

    def _check_capacity(self, max_guests: int) -> None:
        limit = self._config.rooms.max_guests
        if not 1 <= max_guests <= limit:
            raise ValueError(f"maxGuests must be between 1 and {limit}")

    async def _view(self, room: Room) -> RoomView:
        guests = await self._load_guests(room.event_id, [room])
        return RoomView(room, room.slots(guests))

    async def _load_guests(self, event_id: str, rooms: list[Room]) -> dict[str, Guest]:
        wanted = {gid for room in rooms for gid in room.occupants.values()}
        if not wanted:
            return {}
        return {
            guest.guest_id: guest
            for guest in await self._store.list_guests(event_id)
            if guest.guest_id in wanted
        }

    def _matches_search(self, view: RoomView, needle: str) -> bool:
        room = view.room
        if needle in room.room_no.lower() or needle in room.category.lower():
            return True
        for slot in view.slots:
            guest = slot.guest
            if guest is None:
                continue
            haystack = (
                guest.first_name,
                guest.last_name,
                guest.full_name,
                guest.email,
            )
            if any(needle in value.lower() for value in haystack):
                return True
        return False

    def _sorted(self, views: list[RoomView], sort: str) -> list[RoomView]:
        if sort in ("room-asc", "room-desc"):
            return sorted(
                views,
                key=lambda v: _room_no_key(v.room.room_no),
                reverse=sort == "room-desc",
            )
        if sort == "status":
            return sorted(views, key=lambda v: STATUS_ORDER[v.status])
        return views

    @event_exists
    async def list_rooms(self, event_id: str, filters: RoomFilters | None = None) -> Page:
        filters = filters or RoomFilters()
        settings = self._config.rooms
        if filters.sort not in SORTS:
            raise ValueError(f"sort must be one of {', '.join(SORTS)}")
        page = max(filters.page, 1)
        page_size = filters.page_size or settings.default_page_size
        page_size = max(1, min(page_size, settings.max_page_size))

        rooms = await self._store.list_rooms(event_id)
        if filters.category:
            rooms = [room for room in rooms if room.category == filters.category]
        guests = await self._load_guests(event_id, rooms)
        views = [RoomView(room, room.slots(guests)) for room in rooms]
        if filters.statuses:
            views = [view for view in views if view.status in filters.statuses]
        if filters.search:
            needle = filters.search.strip().lower()
            views = [view for view in views if self._matches_search(view, needle)]
        views = self._sorted(views, filters.sort)

        start = (page - 1) * page_size
        return Page(
            items=views[start:start + page_size],
            total_count=len(views),
            page=page,
            page_size=page_size,
        )

    @event_exists
    async def create_room(
        self, event_id: str, room_no: str, category: str, max_guests: int
    ) -> RoomView:
        self._check_capacity(max_guests)
        now = _utcnow()
        room = Room(
            room_id=self._make_room_id(),
            event_id=event_id,
            room_no=room_no,
            category=category,
            max_guests=max_guests,
            created_at=now,
            updated_at=now,
        )
        if not await self._store.create_room(room):
            raise DuplicateRoomError(room_no)
        logger.info("Created room %s (%s) in event %s", room_no, room.room_id, event_id)
        return RoomView(room, room.slots())

    async def update_room(
        self,
        event_id: str,
        room_id: str,
        room_no: str | None = None,
        category: str | None = None,
        max_guests: int | None = None,
    ) -> RoomView:
        if max_guests is not None:
            self._check_capacity(max_guests)
        room = await self._store.update_room(
            event_id,
            room_id,
            updated_at=_utcnow(),
            room_no=room_no,
            category=category,
            max_guests=max_guests,
        )
        logger.info("Updated room %s in event %s", room_id, event_id)
        return await self._view(room)

    async def delete_room(self, event_id: str, room_id: str) -> None:
        released = await self._store.delete_room(event_id, room_id)
        logger.info(
            "Deleted room %s in event %s, released %d guest(s)",
            room_id,
            event_id,
            len(released),
        )

    async def assign(
        self, event_id: str, room_id: str, slot: int, guest_id: str | None
    ) -> AssignOutcome:
        """Put a guest into a slot, or clear the slot when no guest is given.

        Room existence and the slot's range are checked by the store inside
        the same transaction that writes the assignment.
        """
        if not guest_id:
            outcome = await self._store.clear_slot(event_id, room_id, slot)
            logger.info("Cleared slot %d of room %s: %s", slot, room_id, outcome.value)
            return outcome
        if await self._store.get_guest(event_id, guest_id) is None:
            raise GuestNotFoundError(guest_id)
        outcome = await self._store.assign_slot(event_id, room_id, slot, guest_id)
        logger.info(
            "Assigned guest %s to room %s slot %d: %s",
            guest_id,
            room_id,
            slot,
            outcome.value,
        )
        return outcome

    async def unassign(self, event_id: str, room_id: str, slot: int) -> AssignOutcome:
        outcome = await self._store.clear_slot(event_id, room_id, slot)
        logger.info("Unassigned slot %d of room %s: %s", slot, room_id, outcome.value)
        return outcome
