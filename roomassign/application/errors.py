class NotFoundError(LookupError):
    pass


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str):
        super().__init__(f"Event with ID {event_id} not found")
        self.event_id = event_id


class RoomNotFoundError(NotFoundError):
    def __init__(self, room_id: str):
        super().__init__(f"Room with ID {room_id} not found")
        self.room_id = room_id


class GuestNotFoundError(NotFoundError):
    def __init__(self, guest_id: str):
        super().__init__(f"Attendee with ID {guest_id} not found")
        self.guest_id = guest_id


class ConflictError(RuntimeError):
    pass


class DuplicateRoomError(ConflictError):
    def __init__(self, room_no: str):
        super().__init__(f"Room {room_no} already exists for this event")
        self.room_no = room_no


class CapacityConflictError(ConflictError):
    def __init__(self, room_no: str, max_guests: int, highest_slot: int):
        super().__init__(
            f"Room {room_no} has a guest in slot {highest_slot}; "
            f"cannot reduce capacity to {max_guests}"
        )
        self.room_no = room_no
        self.max_guests = max_guests
        self.highest_slot = highest_slot


class InvalidSlotError(ValueError):
    def __init__(self, slot: int, max_guests: int):
        super().__init__(f"Slot {slot} is outside room capacity of {max_guests}")
        self.slot = slot
        self.max_guests = max_guests
