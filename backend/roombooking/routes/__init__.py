# Routes package init
"""
RoomBooking Backend — API Routes Package
=========================================

Route Inventory:
    - users.py:         POST/GET /users, GET/PATCH/DELETE /users/{id}
    - rooms.py:         POST/GET /rooms, GET/PATCH/DELETE /rooms/{id}
    - reservations.py:  POST/GET /reservations, GET/PATCH/DELETE /reservations/{id}
    - health.py:        GET /health

Routes stay thin: parse the request, call one service method, set the
status code and headers.
"""
