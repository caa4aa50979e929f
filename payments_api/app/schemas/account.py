"""
Pydantic models for account data.

``AccountCredentials`` is the body of both the registration and login
requests.  Missing members decode to empty strings so that the
field-level rules (an "@" in the email, a minimum password length) are
reported by the account service with their own messages rather than as
generic decode errors.  ``AccountRead`` is what the API returns: the
password member is always present and always empty.
"""

from typing import Optional

from pydantic import BaseModel, Field

MIN_PASSWORD_LENGTH = 6
# Width of ``accounts.email``.
MAX_EMAIL_LENGTH = 255


class AccountCredentials(BaseModel):
    email: str = Field("", max_length=MAX_EMAIL_LENGTH, examples=["user@example.com"])
    password: str = Field("", examples=["secret1"])


class AccountRead(BaseModel):
    """Account as returned by registration and login."""

    id: int
    email: str
    password: str = ""
    token: Optional[str] = None
