"""
RoomBooking Backend — Reservation Route Handlers
=================================================

What:  /reservations CRUD endpoints.

Ownership:
    PATCH and DELETE identify the caller through `requestingUserId` in the
    JSON body. DELETE therefore carries a body, which most HTTP clients
    support but some proxies strip.

Status codes:
    201 created · 400 time rules · 403 not the reserver
    404 unknown reservation / room / user · 409 overlapping reservation
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.database import get_db_session
from roombooking.schemas.common import ErrorResponse
from roombooking.schemas.reservation import (
    ReservationCreate,
    ReservationDelete,
    ReservationResponse,
    ReservationUpdate,
)
from roombooking.services.reservation_service import reservation_service

router = APIRouter(prefix="/reservations", tags=["Reservations"])

_BAD_REQUEST = {400: {"description": "Invalid time range or request body", "model": ErrorResponse}}
_FORBIDDEN = {403: {"description": "Requester is not the reserver", "model": ErrorResponse}}
_CONFLICT = {409: {"description": "Overlaps an existing reservation", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=ReservationResponse,
    responses={
        **_BAD_REQUEST,
        404: {"description": "Room or reserver not found", "model": ErrorResponse},
        **_CONFLICT,
    },
    summary="Create a reservation",
)
async def create_reservation(
    payload: ReservationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ReservationResponse:
    return await reservation_service.create_reservation(db, payload)


@router.get(
    "",
    response_model=list[ReservationResponse],
    summary="List reservations",
    description="Ordered by start time. Filter by room and/or reserver.",
)
async def list_reservations(
    response: Response,
    room_id: Optional[int] = Query(default=None, ge=1, alias="roomId"),
    reserver_id: Optional[int] = Query(default=None, ge=1, alias="reserverId"),
    db: AsyncSession = Depends(get_db_session),
) -> list[ReservationResponse]:
    reservations = await reservation_service.list_reservations(
        db, room_id=room_id, reserver_id=reserver_id
    )
    response.headers["X-Total-Count"] = str(len(reservations))
    return reservations


@router.get(
    "/{reservation_id}",
    response_model=ReservationResponse,
    responses={404: {"description": "Reservation not found", "model": ErrorResponse}},
    summary="Get a reservation by ID",
)
async def get_reservation(
    reservation_id: int = Path(description="Reservation ID"),
    db: AsyncSession = Depends(get_db_session),
) -> ReservationResponse:
    return await reservation_service.get_reservation(db, reservation_id)


@router.patch(
    "/{reservation_id}",
    response_model=ReservationResponse,
    responses={
        **_BAD_REQUEST,
        **_FORBIDDEN,
        404: {"description": "Reservation, room or reserver not found", "model": ErrorResponse},
        **_CONFLICT,
    },
    summary="Update a reservation",
    description="Only the reserver (requestingUserId) may update. Omitted fields keep their value.",
)
async def update_reservation(
    payload: ReservationUpdate,
    reservation_id: int = Path(description="Reservation ID"),
    db: AsyncSession = Depends(get_db_session),
) -> ReservationResponse:
    return await reservation_service.update_reservation(db, reservation_id, payload)


@router.delete(
    "/{reservation_id}",
    response_model=ReservationResponse,
    responses={
        **_FORBIDDEN,
        404: {"description": "Reservation not found", "model": ErrorResponse},
    },
    summary="Delete a reservation",
    description="Only the reserver (requestingUserId) may delete. Returns the deleted reservation.",
)
async def delete_reservation(
    payload: ReservationDelete,
    reservation_id: int = Path(description="Reservation ID"),
    db: AsyncSession = Depends(get_db_session),
) -> ReservationResponse:
    return await reservation_service.delete_reservation(db, reservation_id, payload)
