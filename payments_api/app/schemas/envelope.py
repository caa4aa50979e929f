"""
Response envelope shared by every endpoint.

Successful responses carry their payload in ``data`` and optional
hypermedia ``links``; failed responses carry human readable messages in
``errors`` and leave the other two members empty.
"""

from typing import Any, List, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class Link(BaseModel):
    rel: str = Field(..., examples=["self"])
    href: str = Field(..., examples=["/v1/payments"])


class Envelope(BaseModel):
    """Uniform ``{data, errors, links}`` wrapper."""

    data: Optional[Any] = None
    errors: List[str] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)


def self_link(href: str) -> Link:
    return Link(rel="self", href=href)


def envelope_response(
    status_code: int,
    data: Any = None,
    errors: Optional[List[str]] = None,
    links: Optional[List[Link]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Build a JSON response whose body is an ``Envelope``."""
    envelope = Envelope(data=data, errors=errors or [], links=links or [])
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope),
        headers=dict(headers) if headers else None,
    )
