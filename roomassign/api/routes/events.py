from fastapi import APIRouter, HTTPException, Query, status

from roomassign.api.deps import GuestServiceDep
from roomassign.api.schemas import AttendeeIn, AttendeeOut, EventIn, EventOut
from roomassign.application.errors import NotFoundError
from roomassign.domain.status import ELIGIBLE_GUEST_STATUSES, GuestStatus

events_router = APIRouter(prefix="/api/events", tags=["events"])

DEFAULT_STATUS_FILTER = ",".join(s.value for s in ELIGIBLE_GUEST_STATUSES)


def _parse_statuses(raw: str) -> list[GuestStatus]:
    statuses = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            statuses.append(GuestStatus(part))
        except ValueError as exc:
            raise HTTPException(
                status_code=422,
                detail=f"unknown attendee status: {part}",
            ) from exc
    return statuses


@events_router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(event_in: EventIn, guest_service: GuestServiceDep):
    event = await guest_service.create_event(event_in.name)
    return EventOut(id=event.event_id, name=event.name, created_at=event.created_at)


@events_router.post(
    "/{event_id}/attendees",
    response_model=AttendeeOut,
    status_code=status.HTTP_201_CREATED,
)
async def add_attendee(
    event_id: str, attendee_in: AttendeeIn, guest_service: GuestServiceDep
):
    try:
        guest = await guest_service.add_guest(
            event_id,
            first_name=attendee_in.first_name,
            last_name=attendee_in.last_name,
            email=attendee_in.email,
            status=attendee_in.status,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return AttendeeOut.from_guest(guest)


@events_router.get("/{event_id}/attendees", response_model=list[AttendeeOut])
async def list_attendees(
    event_id: str,
    guest_service: GuestServiceDep,
    attendee_status: str = Query(DEFAULT_STATUS_FILTER, alias="status"),
    q: str | None = None,
):
    statuses = _parse_statuses(attendee_status)
    try:
        rows = await guest_service.list_guests(event_id, statuses=statuses, search=q)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return [AttendeeOut.from_guest(guest, placement) for guest, placement in rows]
