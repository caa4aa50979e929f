"""
Pydantic schema definitions for API payloads.

Schemas are kept apart from the ORM models in ``models`` so the wire
format can stay stable while the table layout changes.
"""
