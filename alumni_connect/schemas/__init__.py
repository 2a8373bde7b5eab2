"""
Schemas module - request/response and domain models.

The services pass these models around internally and the routes return them
as-is, so the API contract and the core speak the same types.
"""
