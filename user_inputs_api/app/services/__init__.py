"""
Service layer abstraction.

Services encapsulate business logic so that the in-memory store can be
swapped for a real persistence layer without changing API handlers.
"""
