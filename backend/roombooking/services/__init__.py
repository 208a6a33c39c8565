# Services package init
"""
RoomBooking Backend — Services Layer
=====================================

What:  Business rules between the routes (HTTP) and the ORM (persistence).
How:   Stateless classes with one module-level instance each. Every method
       receives the request's AsyncSession and returns response schemas.

Service Inventory:
    - UserService:        user CRUD, unique email
    - RoomService:        room CRUD, unique name
    - ReservationService: time ordering, overlap rejection, ownership checks
    - db_errors:          SQLAlchemy exception → application exception mapping
"""
