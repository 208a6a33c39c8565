"""
RoomBooking Backend — User Route Handlers
==========================================

What:  /users CRUD endpoints.
How:   Each handler delegates to UserService; errors raised there are
       rendered by the global exception handlers in main.py.
"""

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.ext.asyncio import AsyncSession

from roombooking.database import get_db_session
from roombooking.schemas.common import ErrorResponse
from roombooking.schemas.user import UserCreate, UserResponse, UserUpdate
from roombooking.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["Users"])

_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    responses={
        400: {"description": "Invalid request body", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create_user(db, payload)


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List all users",
    description="Returns every user ordered by ID. The count is also sent as X-Total-Count.",
)
async def list_users(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> list[UserResponse]:
    users = await user_service.list_users(db)
    response.headers["X-Total-Count"] = str(len(users))
    return users


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="Get a user by ID",
)
async def get_user(
    user_id: int = Path(description="User ID"),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        **_NOT_FOUND,
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Update a user",
    description="Partial update: only the fields present in the body change.",
)
async def update_user(
    payload: UserUpdate,
    user_id: int = Path(description="User ID"),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_user(db, user_id, payload)


@router.delete(
    "/{user_id}",
    response_model=UserResponse,
    responses={
        **_NOT_FOUND,
        409: {"description": "User still owns reservations", "model": ErrorResponse},
    },
    summary="Delete a user",
    description="Deletes the user and returns the deleted record.",
)
async def delete_user(
    user_id: int = Path(description="User ID"),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.delete_user(db, user_id)
