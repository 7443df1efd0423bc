from fastapi import APIRouter, HTTPException, Query, status

from roomassign.api.deps import RoomServiceDep
from roomassign.api.schemas import (
    AssignIn,
    AssignOut,
    RoomIn,
    RoomOut,
    RoomPatch,
    RoomsPageOut,
    SuccessOut,
    UnassignIn,
)
from roomassign.application.errors import ConflictError, InvalidSlotError, NotFoundError
from roomassign.domain.models import RoomFilters
from roomassign.domain.status import AssignOutcome, RoomStatus

rooms_router = APIRouter(prefix="/api/events/{event_id}/rooms", tags=["rooms"])

OUTCOME_MESSAGES = {
    AssignOutcome.ASSIGNED: "Assignment created",
    AssignOutcome.MOVED: "Assignment moved",
    AssignOutcome.ALREADY_ASSIGNED: "Already assigned",
    AssignOutcome.REMOVED: "Assignment removed",
    AssignOutcome.ALREADY_VACANT: "Slot already empty",
}


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return HTTPException(status_code=422, detail=str(exc))


@rooms_router.get("", response_model=RoomsPageOut)
async def list_rooms(
    event_id: str,
    room_service: RoomServiceDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, alias="pageSize", ge=1),
    category: str | None = None,
    q: str | None = None,
    room_status: list[RoomStatus] = Query([], alias="status"),
    sort: str = "newest",
):
    filters = RoomFilters(
        page=page,
        page_size=page_size,
        category=category,
        search=q,
        statuses=tuple(room_status),
        sort=sort,
    )
    try:
        result = await room_service.list_rooms(event_id, filters)
    except (NotFoundError, ValueError) as exc:
        raise _http_error(exc) from exc
    return RoomsPageOut.from_page(result)


@rooms_router.post("", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
async def create_room(event_id: str, room_in: RoomIn, room_service: RoomServiceDep):
    try:
        view = await room_service.create_room(
            event_id,
            room_no=room_in.room_no,
            category=room_in.category,
            max_guests=room_in.max_guests,
        )
    except (NotFoundError, ConflictError, ValueError) as exc:
        raise _http_error(exc) from exc
    return RoomOut.from_view(view)


# registered before the /{room_id} routes
@rooms_router.post("/assign", response_model=AssignOut)
async def assign_room(event_id: str, assign_in: AssignIn, room_service: RoomServiceDep):
    try:
        outcome = await room_service.assign(
            event_id,
            room_id=assign_in.room_id,
            slot=assign_in.slot,
            guest_id=assign_in.attendee_id,
        )
    except (NotFoundError, InvalidSlotError) as exc:
        raise _http_error(exc) from exc
    return AssignOut(
        success=True, message=OUTCOME_MESSAGES[outcome], outcome=outcome.value
    )


@rooms_router.patch("/{room_id}", response_model=RoomOut)
async def update_room(
    event_id: str, room_id: str, patch: RoomPatch, room_service: RoomServiceDep
):
    try:
        view = await room_service.update_room(
            event_id,
            room_id,
            room_no=patch.room_no,
            category=patch.category,
            max_guests=patch.max_guests,
        )
    except (NotFoundError, ConflictError, ValueError) as exc:
        raise _http_error(exc) from exc
    return RoomOut.from_view(view)


@rooms_router.delete("/{room_id}", response_model=SuccessOut)
async def delete_room(event_id: str, room_id: str, room_service: RoomServiceDep):
    try:
        await room_service.delete_room(event_id, room_id)
    except NotFoundError as exc:
        raise _http_error(exc) from exc
    return SuccessOut()


@rooms_router.delete("/{room_id}/unassign", response_model=SuccessOut)
async def unassign_room(
    event_id: str, room_id: str, unassign_in: UnassignIn, room_service: RoomServiceDep
):
    try:
        await room_service.unassign(event_id, room_id, unassign_in.slot)
    except NotFoundError as exc:
        raise _http_error(exc) from exc
    return SuccessOut()
