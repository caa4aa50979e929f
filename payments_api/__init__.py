"""
Top-level package for the Payments API.

All functionality lives in the ``app`` subpackage, importable as
``payments_api.app``.
"""

__all__ = []
