"""
RoomBooking Backend — Reservation Service Unit Tests
=====================================================

What:  Tests for ReservationService business rules in isolation.
How:   Uses the mock DB session and patched room/user services (no database).

What we test:
    ✅ validate_time_range: past start, end <= start, valid window
    ✅ Time rules fail before any database access
    ✅ Overlap found → ConflictError carrying the conflicting id
    ✅ Ownership: non-reserver update/delete → ForbiddenError, nothing written
    ✅ Unknown attendee ids dropped, known ones kept
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from roombooking.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from roombooking.schemas.reservation import (
    ReservationCreate,
    ReservationDelete,
    ReservationUpdate,
)
from roombooking.services.reservation_service import (
    ReservationService,
    validate_time_range,
)

NOW = datetime(2030, 7, 10, 8, 0, tzinfo=timezone.utc)


class TestValidateTimeRange:

    def test_valid_window_passes(self):
        validate_time_range(NOW + timedelta(hours=1), NOW + timedelta(hours=2), now=NOW)

    def test_start_equal_to_now_passes(self):
        validate_time_range(NOW, NOW + timedelta(minutes=30), now=NOW)

    def test_past_start_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_time_range(NOW - timedelta(minutes=1), NOW + timedelta(hours=1), now=NOW)
        assert exc_info.value.field == "startTime"

    @pytest.mark.parametrize("minutes", [0, -15])
    def test_end_not_after_start_rejected(self, minutes):
        start = NOW + timedelta(hours=1)
        with pytest.raises(ValidationError) as exc_info:
            validate_time_range(start, start + timedelta(minutes=minutes), now=NOW)
        assert exc_info.value.field == "endTime"


class TestCreateReservation:

    def setup_method(self):
        self.service = ReservationService()
        self.start = datetime.now(timezone.utc) + timedelta(days=1)

    @pytest.mark.asyncio
    async def test_invalid_range_fails_before_db_access(self, mock_db_session):
        data = ReservationCreate(
            start_time=self.start,
            end_time=self.start - timedelta(hours=1),
            reserver_id=1,
            room_id=1,
        )

        with pytest.raises(ValidationError):
            await self.service.create_reservation(mock_db_session, data)

        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_overlap_raises_conflict(self, mock_db_session):
        clash = SimpleNamespace(
            id=42,
            start_time=self.start,
            end_time=self.start + timedelta(hours=1),
        )
        overlap_result = MagicMock()
        overlap_result.first.return_value = clash
        mock_db_session.execute.return_value = overlap_result

        data = ReservationCreate(
            start_time=self.start,
            end_time=self.start + timedelta(hours=1),
            reserver_id=1,
            room_id=7,
        )

        with patch("roombooking.services.reservation_service.room_service") as mock_rooms, \
             patch("roombooking.services.reservation_service.user_service") as mock_users:
            mock_rooms.fetch_room = AsyncMock(return_value=SimpleNamespace(id=7))
            mock_users.fetch_user = AsyncMock(return_value=SimpleNamespace(id=1))

            with pytest.raises(ConflictError) as exc_info:
                await self.service.create_reservation(mock_db_session, data)

        assert exc_info.value.context["conflicting_reservation_id"] == 42
        assert exc_info.value.context["room_id"] == 7
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_room_raises_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        data = ReservationCreate(
            start_time=self.start,
            end_time=self.start + timedelta(hours=1),
            reserver_id=1,
            room_id=99,
        )

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.create_reservation(mock_db_session, data)

        assert exc_info.value.resource == "room"


class TestOwnership:

    def setup_method(self):
        self.service = ReservationService()
        self.reservation = SimpleNamespace(id=5, reserver_id=1, room_id=2)

    @pytest.mark.asyncio
    async def test_update_by_non_owner_is_forbidden(self, mock_db_session):
        with patch.object(
            self.service, "fetch_reservation", AsyncMock(return_value=self.reservation)
        ):
            with pytest.raises(ForbiddenError) as exc_info:
                await self.service.update_reservation(
                    mock_db_session, 5, ReservationUpdate(requesting_user_id=2)
                )

        assert exc_info.value.context["requesting_user_id"] == 2
        mock_db_session.flush.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_by_non_owner_is_forbidden(self, mock_db_session):
        with patch.object(
            self.service, "fetch_reservation", AsyncMock(return_value=self.reservation)
        ):
            with pytest.raises(ForbiddenError):
                await self.service.delete_reservation(
                    mock_db_session, 5, ReservationDelete(requesting_user_id=3)
                )

        mock_db_session.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_reservation_is_not_found(self, mock_db_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.delete_reservation(
                mock_db_session, 404, ReservationDelete(requesting_user_id=1)
            )

        assert exc_info.value.resource == "reservation"


class TestFetchAttendees:

    @pytest.mark.asyncio
    async def test_unknown_ids_are_dropped(self, mock_db_session):
        known = SimpleNamespace(id=2)
        result = MagicMock()
        result.scalars.return_value.all.return_value = [known]
        mock_db_session.execute.return_value = result

        attendees = await ReservationService().fetch_attendees(mock_db_session, [9, 2, 5, 9])

        assert attendees == [known]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_list_skips_query(self, mock_db_session):
        assert await ReservationService().fetch_attendees(mock_db_session, []) == []
        mock_db_session.execute.assert_not_awaited()
