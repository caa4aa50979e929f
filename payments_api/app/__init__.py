"""
Application package for the Payments API.

``main`` builds the FastAPI app; ``core`` holds configuration,
logging, persistence, error handling and security; ``models`` is the
relational schema; ``schemas`` the wire format; ``services`` the
business rules; ``api`` the HTTP routes, grouped by version.
"""

from .main import app, create_app  # noqa: F401
