"""
Endpoint subpackage for API v1.

Each module defines an ``APIRouter`` for one domain (accounts,
payments, health); they are aggregated in ``router.py``.
"""
