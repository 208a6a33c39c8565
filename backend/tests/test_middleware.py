"""
RoomBooking Backend — Middleware and Error Shape Tests
=======================================================

What we test:
    ✅ X-Request-ID generated, or echoed when the client sends one
    ✅ Error bodies carry error / message / requestId
    ✅ Rate limiter answers 429 with Retry-After once the window is full,
       and the 429 keeps the request ID (body and header)
    ✅ Excluded paths are never limited
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from roombooking.config import settings
from roombooking.middleware.rate_limit import RateLimitMiddleware
from roombooking.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware


def build_limited_app(max_requests: int) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


class TestRequestID:

    @pytest.mark.asyncio
    async def test_generated_when_absent(self, test_client):
        response = await test_client.get("/users")

        assert response.status_code == 200
        assert len(response.headers[REQUEST_ID_HEADER]) == 8

    @pytest.mark.asyncio
    async def test_client_value_is_echoed(self, test_client):
        response = await test_client.get("/users", headers={REQUEST_ID_HEADER: "trace-123"})
        assert response.headers[REQUEST_ID_HEADER] == "trace-123"

    @pytest.mark.asyncio
    async def test_error_body_shape(self, test_client):
        response = await test_client.get("/rooms/12345", headers={REQUEST_ID_HEADER: "abc"})

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert "12345" in body["message"]
        assert body["requestId"] == "abc"


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_third_request_is_limited(self):
        transport = ASGITransport(app=build_limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200

            response = await client.get("/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert response.json()["error"] == "rate_limit_exceeded"

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=build_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            for _ in range(5):
                assert (await client.get("/health")).status_code == 200

    @pytest.mark.asyncio
    async def test_limited_response_keeps_request_id(self, test_client, monkeypatch):
        # The app builds its middleware stack on the first request
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        assert (await test_client.get("/users")).status_code == 200
        response = await test_client.get("/users", headers={REQUEST_ID_HEADER: "abc"})

        assert response.status_code == 429
        assert response.headers[REQUEST_ID_HEADER] == "abc"
        assert response.json()["requestId"] == "abc"
        assert "Retry-After" in response.headers
