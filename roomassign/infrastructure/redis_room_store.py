import inspect
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Awaitable, Callable, TypeVar, cast

from redis.asyncio.client import Pipeline, Redis
from redis.exceptions import WatchError

from roomassign.application.errors import (
    CapacityConflictError,
    DuplicateRoomError,
    InvalidSlotError,
    RoomNotFoundError,
)
from roomassign.domain.models import Event, Guest, Room
from roomassign.domain.status import AssignOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _await(x: T | Awaitable[T]) -> T:
    if inspect.isawaitable(x):
        return await cast(Awaitable[T], x)
    return x


def _encode_placement(room_id: str, slot: int) -> str:
    return f"{room_id}:{slot}"


def _decode_placement(value: str) -> tuple[str, int]:
    room_id, _, slot = value.rpartition(":")
    return room_id, int(slot)


class RedisRoomStore:
    """Rooms, guests and slot assignments kept in Redis.

    Layout per event ``E`` and room ``R``::

        event:E              hash   name, created_at
        event:E:guests       set    guest ids
        event:E:rooms        zset   room ids scored by creation time
        event:E:room_nos     hash   room number -> room id
        event:E:placements   hash   guest id -> "R:slot"
        guest:G              hash   guest fields
        room:R               hash   room fields
        room:R:slots         hash   slot -> guest id

    ``room:R:slots`` and ``event:E:placements`` mirror each other and are
    only ever written together inside a MULTI block.
    """

    def __init__(self, r: Redis):
        self._r = r

    def _event_key(self, event_id: str) -> str:
        return f"event:{event_id}"

    def _event_guests_key(self, event_id: str) -> str:
        return f"event:{event_id}:guests"

    def _event_rooms_key(self, event_id: str) -> str:
        return f"event:{event_id}:rooms"

    def _event_room_nos_key(self, event_id: str) -> str:
        return f"event:{event_id}:room_nos"

    def _placements_key(self, event_id: str) -> str:
        return f"event:{event_id}:placements"

    def _guest_key(self, guest_id: str) -> str:
        return f"guest:{guest_id}"

    def _room_key(self, room_id: str) -> str:
        return f"room:{room_id}"

    def _room_slots_key(self, room_id: str) -> str:
        return f"room:{room_id}:slots"

    async def _transaction(
        self, keys: list[str], body: Callable[[Pipeline], Awaitable[T]]
    ) -> T:
        async with self._r.pipeline(transaction=True) as pipe:
            while True:
                try:
                    await pipe.watch(*keys)
                    return await body(pipe)
                except WatchError:
                    logger.debug("Watched keys changed, retrying: %s", keys)
                    await pipe.reset()

    def _room_from_hashes(
        self, room_id: str, data: dict[str, str], slots: dict[str, str]
    ) -> Room:
        return Room(
            room_id=room_id,
            event_id=data["event_id"],
            room_no=data["room_no"],
            category=data["category"],
            max_guests=int(data["max_guests"]),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
            occupants={int(slot): guest_id for slot, guest_id in slots.items()},
        )

    def _room_mapping(self, room: Room) -> dict[str, Any]:
        return {
            "event_id": room.event_id,
            "room_no": room.room_no,
            "category": room.category,
            "max_guests": str(room.max_guests),
            "created_at": room.created_at.isoformat(),
            "updated_at": room.updated_at.isoformat(),
        }

    def _guest_from_hash(self, guest_id: str, data: dict[str, str]) -> Guest:
        return Guest(
            guest_id=guest_id,
            event_id=data["event_id"],
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email", ""),
            status=data.get("status", ""),
        )

    async def create_event(self, event: Event) -> None:
        await _await(
            self._r.hset(
                self._event_key(event.event_id),
                mapping={
                    "name": event.name,
                    "created_at": event.created_at.isoformat(),
                },
            )
        )

    async def get_event(self, event_id: str) -> Event | None:
        data = await _await(self._r.hgetall(self._event_key(event_id)))
        if not data:
            return None
        return Event(
            event_id=event_id,
            name=data.get("name", ""),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    async def add_guest(self, guest: Guest) -> None:
        async with self._r.pipeline(transaction=True) as pipe:
            pipe.hset(
                self._guest_key(guest.guest_id),
                mapping={
                    "event_id": guest.event_id,
                    "first_name": guest.first_name,
                    "last_name": guest.last_name,
                    "email": guest.email,
                    "status": guest.status,
                },
            )
            pipe.sadd(self._event_guests_key(guest.event_id), guest.guest_id)
            await pipe.execute()

    async def get_guest(self, event_id: str, guest_id: str) -> Guest | None:
        data = await _await(self._r.hgetall(self._guest_key(guest_id)))
        if not data or data.get("event_id") != event_id:
            return None
        return self._guest_from_hash(guest_id, data)

    async def list_guests(self, event_id: str) -> list[Guest]:
        guest_ids = sorted(
            await _await(self._r.smembers(self._event_guests_key(event_id)))
        )
        if not guest_ids:
            return []
        async with self._r.pipeline(transaction=False) as pipe:
            for guest_id in guest_ids:
                pipe.hgetall(self._guest_key(guest_id))
            rows = await pipe.execute()
        return [
            self._guest_from_hash(guest_id, data)
            for guest_id, data in zip(guest_ids, rows)
            if data
        ]

    async def create_room(self, room: Room) -> bool:
        """Store a new room; False when its number is already taken in the event."""
        room_nos_key = self._event_room_nos_key(room.event_id)

        async def body(pipe: Pipeline) -> bool:
            if await pipe.hexists(room_nos_key, room.room_no):
                return False
            pipe.multi()
            pipe.hset(room_nos_key, room.room_no, room.room_id)
            pipe.hset(self._room_key(room.room_id), mapping=self._room_mapping(room))
            pipe.zadd(
                self._event_rooms_key(room.event_id),
                {room.room_id: room.created_at.timestamp()},
            )
            await pipe.execute()
            return True

        return await self._transaction([room_nos_key], body)

    async def get_room(self, event_id: str, room_id: str) -> Room | None:
        data = await _await(self._r.hgetall(self._room_key(room_id)))
        if not data or data.get("event_id") != event_id:
            return None
        slots = await _await(self._r.hgetall(self._room_slots_key(room_id)))
        return self._room_from_hashes(room_id, data, slots)

    async def list_rooms(self, event_id: str) -> list[Room]:
        """Rooms of an event, newest first."""
        room_ids = await _await(
            self._r.zrevrange(self._event_rooms_key(event_id), 0, -1)
        )
        if not room_ids:
            return []
        async with self._r.pipeline(transaction=False) as pipe:
            for room_id in room_ids:
                pipe.hgetall(self._room_key(room_id))
                pipe.hgetall(self._room_slots_key(room_id))
            rows = await pipe.execute()
        rooms = []
        for index, room_id in enumerate(room_ids):
            data, slots = rows[2 * index], rows[2 * index + 1]
            if data:
                rooms.append(self._room_from_hashes(room_id, data, slots))
        return rooms

    async def update_room(
        self,
        event_id: str,
        room_id: str,
        *,
        updated_at: datetime,
        room_no: str | None = None,
        category: str | None = None,
        max_guests: int | None = None,
    ) -> Room:
        """Apply a partial update and return the stored room.

        Raises RoomNotFoundError, DuplicateRoomError when the new number
        belongs to another room, and CapacityConflictError when the new
        capacity is below an occupied slot. Nothing is written in those cases.
        """
        room_key = self._room_key(room_id)
        slots_key = self._room_slots_key(room_id)
        room_nos_key = self._event_room_nos_key(event_id)

        async def body(pipe: Pipeline) -> Room:
            data = await pipe.hgetall(room_key)
            if not data or data.get("event_id") != event_id:
                raise RoomNotFoundError(room_id)
            slots = await pipe.hgetall(slots_key)
            current = self._room_from_hashes(room_id, data, slots)
            if max_guests is not None:
                highest = max(current.occupants, default=0)
                if highest > max_guests:
                    raise CapacityConflictError(current.room_no, max_guests, highest)
            new_no = room_no if room_no is not None else current.room_no
            renamed = new_no != current.room_no
            if renamed:
                owner = await pipe.hget(room_nos_key, new_no)
                if owner is not None and owner != room_id:
                    raise DuplicateRoomError(new_no)
            updated = replace(
                current,
                room_no=new_no,
                category=category if category is not None else current.category,
                max_guests=max_guests if max_guests is not None else current.max_guests,
                updated_at=updated_at,
            )
            pipe.multi()
            if renamed:
                pipe.hdel(room_nos_key, current.room_no)
                pipe.hset(room_nos_key, new_no, room_id)
            pipe.hset(room_key, mapping=self._room_mapping(updated))
            await pipe.execute()
            return updated

        return await self._transaction([room_key, slots_key, room_nos_key], body)

    async def delete_room(self, event_id: str, room_id: str) -> list[str]:
        """Remove a room and release its guests; returns the released guest ids."""
        room_key = self._room_key(room_id)
        slots_key = self._room_slots_key(room_id)
        placements_key = self._placements_key(event_id)

        async def body(pipe: Pipeline) -> list[str]:
            owner_event, room_no = await pipe.hmget(room_key, ["event_id", "room_no"])
            if owner_event != event_id:
                raise RoomNotFoundError(room_id)
            slots = await pipe.hgetall(slots_key)
            released = list(slots.values())
            pipe.multi()
            if released:
                pipe.hdel(placements_key, *released)
            pipe.delete(room_key, slots_key)
            pipe.zrem(self._event_rooms_key(event_id), room_id)
            pipe.hdel(self._event_room_nos_key(event_id), room_no)
            await pipe.execute()
            return released

        return await self._transaction([room_key, slots_key, placements_key], body)

    async def assign_slot(
        self, event_id: str, room_id: str, slot: int, guest_id: str
    ) -> AssignOutcome:
        room_key = self._room_key(room_id)
        slots_key = self._room_slots_key(room_id)
        placements_key = self._placements_key(event_id)

        async def body(pipe: Pipeline) -> AssignOutcome:
            owner_event, max_guests = await pipe.hmget(
                room_key, ["event_id", "max_guests"]
            )
            if owner_event != event_id:
                raise RoomNotFoundError(room_id)
            if not 1 <= slot <= int(max_guests):
                raise InvalidSlotError(slot, int(max_guests))
            holder = await pipe.hget(slots_key, str(slot))
            if holder == guest_id:
                return AssignOutcome.ALREADY_ASSIGNED
            current = await pipe.hget(placements_key, guest_id)
            pipe.multi()
            if current is not None:
                prev_room_id, prev_slot = _decode_placement(current)
                pipe.hdel(self._room_slots_key(prev_room_id), str(prev_slot))
            if holder is not None:
                pipe.hdel(placements_key, holder)
            pipe.hset(slots_key, str(slot), guest_id)
            pipe.hset(placements_key, guest_id, _encode_placement(room_id, slot))
            await pipe.execute()
            if current is not None:
                return AssignOutcome.MOVED
            return AssignOutcome.ASSIGNED

        return await self._transaction([room_key, slots_key, placements_key], body)

    async def clear_slot(self, event_id: str, room_id: str, slot: int) -> AssignOutcome:
        room_key = self._room_key(room_id)
        slots_key = self._room_slots_key(room_id)
        placements_key = self._placements_key(event_id)

        async def body(pipe: Pipeline) -> AssignOutcome:
            if await pipe.hget(room_key, "event_id") != event_id:
                raise RoomNotFoundError(room_id)
            holder = await pipe.hget(slots_key, str(slot))
            if holder is None:
                return AssignOutcome.ALREADY_VACANT
            pipe.multi()
            pipe.hdel(slots_key, str(slot))
            pipe.hdel(placements_key, holder)
            await pipe.execute()
            return AssignOutcome.REMOVED

        return await self._transaction([room_key, slots_key, placements_key], body)

    async def get_placements(self, event_id: str) -> dict[str, tuple[str, int]]:
        raw = await _await(self._r.hgetall(self._placements_key(event_id)))
        return {guest_id: _decode_placement(value) for guest_id, value in raw.items()}
