"""
RoomBooking Backend — Room Route Handlers
==========================================

What:  /rooms CRUD endpoints, plus capacity / floor filters on the listing.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.database import get_db_session
from roombooking.schemas.common import ErrorResponse
from roombooking.schemas.room import RoomCreate, RoomResponse, RoomUpdate
from roombooking.services.room_service import room_service

router = APIRouter(prefix="/rooms", tags=["Rooms"])

_NOT_FOUND = {404: {"description": "Room not found", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=RoomResponse,
    responses={
        400: {"description": "Invalid request body", "model": ErrorResponse},
        409: {"description": "A room with this name already exists", "model": ErrorResponse},
    },
    summary="Create a meeting room",
)
async def create_room(
    payload: RoomCreate,
    db: AsyncSession = Depends(get_db_session),
) -> RoomResponse:
    return await room_service.create_room(db, payload)


@router.get(
    "",
    response_model=list[RoomResponse],
    summary="List meeting rooms",
)
async def list_rooms(
    response: Response,
    min_capacity: Optional[int] = Query(
        default=None, ge=1, alias="minCapacity",
        description="Only rooms seating at least this many people",
    ),
    floor: Optional[int] = Query(default=None, description="Only rooms on this floor"),
    db: AsyncSession = Depends(get_db_session),
) -> list[RoomResponse]:
    rooms = await room_service.list_rooms(db, min_capacity=min_capacity, floor=floor)
    response.headers["X-Total-Count"] = str(len(rooms))
    return rooms


@router.get(
    "/{room_id}",
    response_model=RoomResponse,
    responses=_NOT_FOUND,
    summary="Get a meeting room by ID",
)
async def get_room(
    room_id: int = Path(description="Room ID"),
    db: AsyncSession = Depends(get_db_session),
) -> RoomResponse:
    return await room_service.get_room(db, room_id)


@router.patch(
    "/{room_id}",
    response_model=RoomResponse,
    responses={
        **_NOT_FOUND,
        409: {"description": "A room with this name already exists", "model": ErrorResponse},
    },
    summary="Update a meeting room",
)
async def update_room(
    payload: RoomUpdate,
    room_id: int = Path(description="Room ID"),
    db: AsyncSession = Depends(get_db_session),
) -> RoomResponse:
    return await room_service.update_room(db, room_id, payload)


@router.delete(
    "/{room_id}",
    response_model=RoomResponse,
    responses={
        **_NOT_FOUND,
        409: {"description": "Room still has reservations", "model": ErrorResponse},
    },
    summary="Delete a meeting room",
)
async def delete_room(
    room_id: int = Path(description="Room ID"),
    db: AsyncSession = Depends(get_db_session),
) -> RoomResponse:
    return await room_service.delete_room(db, room_id)
