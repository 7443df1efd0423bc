from typing import Annotated

from fastapi import Depends
from fastapi.requests import HTTPConnection

from roomassign.application.guest_service import GuestService
from roomassign.application.room_service import RoomService


def get_room_service(conn: HTTPConnection) -> RoomService:
    return conn.app.state.room_service


def get_guest_service(conn: HTTPConnection) -> GuestService:
    return conn.app.state.guest_service


RoomServiceDep = Annotated[RoomService, Depends(get_room_service)]
GuestServiceDep = Annotated[GuestService, Depends(get_guest_service)]
