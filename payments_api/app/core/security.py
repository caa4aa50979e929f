"""
Security helpers for password hashing and bearer tokens.

Tokens are compact JSON Web Tokens signed with HMAC-SHA256 (``HS256``)
and base64url encoded.  They carry the account identifier in ``sub``
and an absolute expiry in ``exp``; nothing is stored server side, so a
token is valid exactly as long as its signature checks out and ``exp``
lies in the future.

Passwords are hashed with PBKDF2-HMAC-SHA256 and a random 16 byte salt.
The stored string is ``<salt hex>$<digest hex>``.
"""

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import Unauthorized

ALGORITHM = "HS256"
PBKDF2_ITERATIONS = 100_000

ERROR_MISSING_TOKEN = "Missing auth token"
ERROR_INVALID_TOKEN = "Invalid/Malformed auth token"


def _b64_url_encode(data: bytes) -> str:
    """Base64url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64url text, restoring the stripped padding."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    subject: Any,
    secret: str,
    expires_in: int,
    now: Optional[float] = None,
) -> str:
    """Mint a signed token for ``subject``.

    Parameters
    ----------
    subject : Any
        Owner of the token, stored as a string in the ``sub`` claim.
    secret : str
        Symmetric signing key.
    expires_in : int
        Lifetime in seconds, added to ``now`` to form ``exp``.
    now : Optional[float]
        Issue time as a UNIX timestamp; defaults to the current time.

    Returns
    -------
    str
        ``header.payload.signature``, each part base64url encoded.
    """
    issued_at = int(now if now is not None else time.time())
    claims = {"sub": str(subject), "exp": issued_at + expires_in}
    header = {"alg": ALGORITHM, "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, secret))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
    """Verify ``token`` and return its claims, or ``None`` if it is not valid.

    A token is rejected when it is not three dot separated parts, when
    its header does not announce ``HS256``, when the signature does not
    match, or when ``exp`` is missing or in the past.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts
    try:
        header = json.loads(_b64_url_decode(header_b64))
        actual_sig = _b64_url_decode(signature_b64)
        claims = json.loads(_b64_url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError):
        return None
    if not isinstance(header, dict) or header.get("alg") != ALGORITHM:
        return None
    expected_sig = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), secret)
    # Constant-time comparison
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    if not isinstance(claims, dict):
        return None
    try:
        expires_at = int(claims["exp"])
    except (KeyError, TypeError, ValueError):
        return None
    current = int(now if now is not None else time.time())
    if expires_at < current:
        return None
    return claims


def hash_password(password: str) -> str:
    """Hash ``password`` with a fresh random salt."""
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check ``plain_password`` against a stored ``salt$digest`` string.

    Malformed stored values never match.
    """
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """Dependency returning the account id carried by the bearer token.

    Raises ``Unauthorized`` when the ``Authorization`` header is absent
    or the token does not verify.  The account row itself is not looked
    up: tokens are self-contained.
    """
    if credentials is None:
        raise Unauthorized(ERROR_MISSING_TOKEN, headers={"WWW-Authenticate": "Bearer"})
    secret = request.app.state.settings.token_secret
    claims = decode_access_token(credentials.credentials, secret)
    if claims is None:
        raise Unauthorized(ERROR_INVALID_TOKEN, headers={"WWW-Authenticate": "Bearer"})
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise Unauthorized(ERROR_INVALID_TOKEN, headers={"WWW-Authenticate": "Bearer"})
