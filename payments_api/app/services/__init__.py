"""
Service layer.

Each service wraps a database session and holds the business rules of
one domain; services raise errors from ``core.errors`` and never build
HTTP responses themselves.
"""
