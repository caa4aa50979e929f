"""
Version 1 of the Payments API.

Breaking changes to the request or response shapes belong in a new
version subpackage (e.g. ``v2``) mounted under its own prefix.
"""
