# Middleware package init
"""
RoomBooking Backend — Middleware Package
=========================================

What:  Per-request concerns applied before any route runs.

Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - Rate Limit rejects over-quota clients with 429 before any work is done
    - Request ID sets the correlation ID that every later log line uses
    - Access Log records status and duration once the response exists
"""
