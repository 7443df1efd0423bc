from enum import Enum


class RoomStatus(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    FULL = "full"


class GuestStatus(str, Enum):
    INVITED = "invited"
    EMAIL_VERIFIED = "email_verified"
    ACCEPTED = "accepted"
    REGISTERED = "registered"


class AssignOutcome(str, Enum):
    ASSIGNED = "assigned"
    MOVED = "moved"
    ALREADY_ASSIGNED = "already_assigned"
    REMOVED = "removed"
    ALREADY_VACANT = "already_vacant"


ELIGIBLE_GUEST_STATUSES = (GuestStatus.ACCEPTED, GuestStatus.REGISTERED)

STATUS_ORDER = {RoomStatus.EMPTY: 0, RoomStatus.PARTIAL: 1, RoomStatus.FULL: 2}


def derive_status(assigned: int, capacity: int) -> RoomStatus:
    if assigned <= 0:
        return RoomStatus.EMPTY
    if assigned >= capacity:
        return RoomStatus.FULL
    return RoomStatus.PARTIAL
