"""
RoomBooking Backend — /rooms API Tests
=======================================

What we test:
    ✅ Create / duplicate name → 409 / capacity < 1 → 400
    ✅ Listing filters (minCapacity, floor)
    ✅ Partial update, clearing location, rename collision
    ✅ Delete, and delete blocked while reservations exist
"""

import pytest


class TestCreateRoom:

    @pytest.mark.asyncio
    async def test_create_room(self, test_client):
        response = await test_client.post(
            "/rooms",
            json={"name": "Large Room 1", "floor": 5, "capacity": 20, "location": "Building A"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Large Room 1"
        assert body["floor"] == 5
        assert body["capacity"] == 20
        assert body["location"] == "Building A"

    @pytest.mark.asyncio
    async def test_location_is_optional(self, test_client):
        response = await test_client.post("/rooms", json={"name": "Booth", "floor": 1, "capacity": 1})

        assert response.status_code == 201
        assert response.json()["location"] is None

    @pytest.mark.asyncio
    async def test_duplicate_name_is_conflict(self, test_client, create_room):
        await create_room(name="Orion")

        response = await test_client.post("/rooms", json={"name": "Orion", "floor": 2, "capacity": 4})

        assert response.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize("capacity", [0, -3])
    async def test_capacity_must_be_positive(self, test_client, capacity):
        response = await test_client.post(
            "/rooms", json={"name": "Tiny", "floor": 1, "capacity": capacity}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestListRooms:

    @pytest.mark.asyncio
    async def test_filters(self, test_client, create_room):
        small = await create_room(floor=1, capacity=4)
        big = await create_room(floor=1, capacity=30)
        await create_room(floor=2, capacity=30)

        response = await test_client.get("/rooms", params={"minCapacity": 10, "floor": 1})

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [big["id"]]
        assert response.headers["X-Total-Count"] == "1"
        assert small["id"] not in [r["id"] for r in response.json()]


class TestUpdateRoom:

    @pytest.mark.asyncio
    async def test_partial_update_and_clear_location(self, test_client, create_room):
        room = await create_room(capacity=6, location="Next to the kitchen")

        response = await test_client.patch(
            f"/rooms/{room['id']}", json={"capacity": 10, "location": None}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["capacity"] == 10
        assert body["location"] is None
        assert body["name"] == room["name"]

    @pytest.mark.asyncio
    async def test_rename_to_existing_name_is_conflict(self, test_client, create_room):
        await create_room(name="Vega")
        room = await create_room(name="Lyra")

        response = await test_client.patch(f"/rooms/{room['id']}", json={"name": "Vega"})

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_update_missing_room_is_404(self, test_client):
        response = await test_client.patch("/rooms/4242", json={"capacity": 3})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_room_zero_is_404(self, test_client):
        assert (await test_client.get("/rooms/0")).status_code == 404
        assert (await test_client.patch("/rooms/0", json={"capacity": 3})).status_code == 404


class TestDeleteRoom:

    @pytest.mark.asyncio
    async def test_delete_room(self, test_client, create_room):
        room = await create_room()

        response = await test_client.delete(f"/rooms/{room['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == room["id"]
        assert (await test_client.get(f"/rooms/{room['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_delete_room_with_reservations(
        self, test_client, create_user, create_room, create_reservation
    ):
        user = await create_user()
        room = await create_room()
        assert (await create_reservation(room["id"], user["id"], 1, 2)).status_code == 201

        response = await test_client.delete(f"/rooms/{room['id']}")

        assert response.status_code == 409
