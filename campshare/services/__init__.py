"""
High-level use cases for the CampShare backend.

The AppContext owns the application state and its business rules; routers
call into it instead of touching repositories or stores directly.
"""
